"""
Simplified rain-rule target.

This is a resource-proportion approximation, not the official
Duckworth-Lewis-Stern tables.
"""
import math

from scorebook.models.match import MAX_WICKETS


def _resource(overs_available: float, wickets_in_hand: int, max_overs: int) -> float:
    """Percentage of batting resource left for the given overs and wickets"""
    over_fraction = min(overs_available / max_overs, 1) if max_overs > 0 else 0
    wicket_factor = wickets_in_hand / MAX_WICKETS
    return over_fraction * (0.1 + 0.9 * wicket_factor) * 100


def calculate_dls_target(
    team1_score: int,
    team1_overs_used: float,
    max_overs: int,
    team2_overs_available: float,
    team2_wickets_lost: int,
) -> int:
    """Revised target for the side batting second, never below 1"""
    wickets_in_hand = max(0, MAX_WICKETS - team2_wickets_lost)

    team1_resource = _resource(team1_overs_used, MAX_WICKETS, max_overs)
    team2_resource = _resource(team2_overs_available, wickets_in_hand, max_overs)

    if team1_resource == 0:
        return team1_score + 1

    target = _round_half_up(team1_score * (team2_resource / team1_resource)) + 1
    return max(target, 1)


def _round_half_up(value: float) -> int:
    # halves round up, unlike round()
    return math.floor(value + 0.5)
