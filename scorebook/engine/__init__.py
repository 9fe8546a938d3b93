from scorebook.engine.scoring import record_ball, undo_last_ball, update_last_ball_shot_zone, innings_phase
from scorebook.engine.dls import calculate_dls_target

__all__ = ["record_ball", "undo_last_ball", "update_last_ball_shot_zone", "innings_phase", "calculate_dls_target"]
