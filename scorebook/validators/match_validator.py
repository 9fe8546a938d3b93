from typing import Optional

from scorebook.config import settings
from scorebook.models.match import MAX_WICKETS


class MatchSetupValidator:
    @staticmethod
    def validate(
        team1: str,
        team2: str,
        total_overs: Optional[int],
        toss_winner: Optional[str],
        toss_choice: Optional[str],
        custom_start: Optional[dict] = None,
    ) -> dict:
        """
        Validate a new-match form before it reaches the scorebook.

        Rules:
        1. Both teams, overs, toss winner and toss choice are filled in
        2. Teams have different names and the toss winner is one of them
        3. Overs between 1 and the configured maximum (50 by default)
        4. A custom start may not exceed the match overs or 10 wickets
        """
        errors = []

        team1, team2 = team1.strip(), team2.strip()
        toss_winner = toss_winner.strip() if toss_winner else toss_winner

        if not (team1 and team2 and total_overs is not None and toss_winner and toss_choice):
            errors.append("Please fill in all required fields.")
            return {"valid": False, "errors": errors}

        if team1.lower() == team2.lower():
            errors.append("Team names must be different.")

        if toss_winner not in (team1, team2):
            errors.append("Toss winner must be one of the two teams.")

        if toss_choice not in ("bat", "bowl"):
            errors.append("Toss choice must be 'bat' or 'bowl'.")

        if total_overs < 1 or total_overs > settings.MAX_MATCH_OVERS:
            errors.append(f"Please enter overs between 1 and {settings.MAX_MATCH_OVERS}.")

        if custom_start:
            if custom_start.get("overs", 0) > total_overs:
                errors.append("Custom overs cannot exceed total overs.")
            if custom_start.get("wickets", 0) > MAX_WICKETS:
                errors.append("Wickets cannot exceed 10.")
            if any(custom_start.get(k, 0) < 0 for k in ("runs", "wickets", "overs")):
                errors.append("Custom start values cannot be negative.")

        return {
            "valid": len(errors) == 0,
            "errors": errors,
        }


class PlayerNameValidator:
    @staticmethod
    def validate(name: str, existing_names: list[str], role: str = "player") -> dict:
        """Non-empty and not already used in this innings (case-insensitive)"""
        errors = []
        cleaned = name.strip()
        if not cleaned:
            errors.append(f"Please enter a {role} name.")
        elif cleaned.lower() in {n.lower() for n in existing_names}:
            errors.append(f'A {role} named "{cleaned}" already exists in this innings. Please use a unique name.')
        return {"valid": len(errors) == 0, "errors": errors}
