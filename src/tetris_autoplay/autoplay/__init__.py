"""Heuristic autoplay: placement search and board evaluation."""

from .evaluation import BoardFeatures, board_features, evaluate_board, is_basin
from .planner import MovePlan, candidate_placements, plan_move

__all__ = [
    "BoardFeatures",
    "board_features",
    "evaluate_board",
    "is_basin",
    "MovePlan",
    "candidate_placements",
    "plan_move",
]
