from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Tuple

from tetris_autoplay.game.grid import GameGrid
from tetris_autoplay.game.movement import can_occupy, drop_distance, merge_piece
from tetris_autoplay.game.pieces import ActivePiece, rotate_cw

from .evaluation import evaluate_board


@dataclass(frozen=True)
class MovePlan:
    """Rotation count and column offset relative to the piece before planning."""

    rotations: int = 0
    translation: int = 0
    score: float = -math.inf


def candidate_placements(piece: ActivePiece, board: GameGrid) -> Iterator[Tuple[int, int, ActivePiece]]:
    """Yield ``(rotations, translation, landed_piece)`` for every legal drop.

    Order is rotation ascending, then translation ascending. Candidates whose
    start position already collides are skipped.
    """
    shape = piece.shape.copy()
    for rotations in range(4):
        if rotations:
            shape = rotate_cw(shape)
        for translation in range(-piece.x, board.width):
            candidate = piece.copy(shape=shape.copy(), x=piece.x + translation)
            if not can_occupy(candidate, 0, 0, board):
                continue
            candidate.y += drop_distance(candidate, board)
            yield rotations, translation, candidate


def simulate_drop(candidate: ActivePiece, board: GameGrid) -> GameGrid:
    simulated = board.copy()
    merge_piece(candidate, simulated)
    return simulated


def plan_move(piece: ActivePiece, board: GameGrid) -> MovePlan:
    """Search every rotation and column for the best-scoring hard drop.

    Ties keep the first placement found.
    """
    best = MovePlan()
    for rotations, translation, candidate in candidate_placements(piece, board):
        score = evaluate_board(simulate_drop(candidate, board), candidate.shape)
        if score > best.score:
            best = MovePlan(rotations, translation, score)
    return best
