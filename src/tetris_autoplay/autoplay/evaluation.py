"""Board evaluation heuristic used by the autoplay planner.

``evaluate_board`` scores a hypothetical board right after a piece has been
merged (before any line clear is applied). Higher is better. The weights are
fixed; changing any of them changes which placement the planner picks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from tetris_autoplay.game.grid import GameGrid


LINE_SCORE = 100
RUN_BONUS = {4: 600, 3: 300, 2: 200}

HOLE_PENALTY = 60
ADJACENT_HOLE_PENALTY = 30
HOLE_DEPTH_PENALTY = 20
BLOCK_ABOVE_HOLE_PENALTY = 15

HEIGHT_PENALTY = 5
MAX_HEIGHT_PENALTY = 4
MAX_HEIGHT_EXPONENT = 1.5
BUMPINESS_PENALTY = 8
NEIGHBOR_BONUS = 5

I_PIECE_TETRIS_BONUS = 200
BASIN_BONUS = 50


@dataclass
class BoardFeatures:
    completed_lines: int
    last_run: int
    holes: int
    column_holes: List[int]
    adjacent_holes: int
    hole_depth: int
    blocks_above_holes: int
    column_tops: List[int]
    total_height: int
    max_height: int
    bumpiness: int
    neighbor_count: int


def _line_runs(filled: np.ndarray) -> tuple[int, int]:
    """Count full rows and the length of the last run of adjacent full rows."""
    completed = 0
    run = 0
    previous_full = False
    for row in filled:
        if np.all(row):
            completed += 1
            run = run + 1 if previous_full else 1
            previous_full = True
        else:
            previous_full = False
    return completed, run


def _neighbor_count(filled: np.ndarray, x: int, y: int) -> int:
    height, width = filled.shape
    count = 0
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            nx, ny = x + dx, y + dy
            if 0 <= nx < width and 0 <= ny < height and filled[ny, nx]:
                count += 1
    return count


def board_features(board: GameGrid) -> BoardFeatures:
    filled = board.grid != 0
    height, width = filled.shape

    completed, last_run = _line_runs(filled)

    column_holes = [0] * width
    blocks_above_holes = 0
    for x in range(width):
        column = filled[:, x]
        blocks_seen = 0
        for y in range(height):
            if column[y]:
                blocks_seen += 1
            elif blocks_seen:
                column_holes[x] += 1
                blocks_above_holes += blocks_seen
    holes = sum(column_holes)
    adjacent_holes = sum(
        min(column_holes[x], column_holes[x + 1])
        for x in range(width - 1)
        if column_holes[x] > 0 and column_holes[x + 1] > 0
    )

    tops = [board.column_height(x) for x in range(width)]
    stack_heights = [height - top for top in tops]
    bumpiness = sum(abs(tops[x] - tops[x + 1]) for x in range(width - 1))
    neighbors = sum(_neighbor_count(filled, x, tops[x]) for x in range(width))

    return BoardFeatures(
        completed_lines=completed,
        last_run=last_run,
        holes=holes,
        column_holes=column_holes,
        adjacent_holes=adjacent_holes,
        hole_depth=holes,
        blocks_above_holes=blocks_above_holes,
        column_tops=tops,
        total_height=sum(stack_heights),
        max_height=max(stack_heights),
        bumpiness=bumpiness,
        neighbor_count=neighbors,
    )


def is_basin(tops: List[int]) -> bool:
    width = len(tops)
    if width < 5:
        return False
    if not (tops[0] < tops[1] and tops[-1] < tops[-2]):
        return False
    center = sum(tops[2:width - 2]) / (width - 4)
    return center > tops[0] and center > tops[-1]


def evaluate_board(board: GameGrid, placed_shape: Optional[np.ndarray] = None) -> float:
    f = board_features(board)
    score = 0.0

    if f.last_run in RUN_BONUS:
        score += RUN_BONUS[f.last_run]
    else:
        score += f.completed_lines * LINE_SCORE

    score -= f.holes * HOLE_PENALTY
    score -= f.adjacent_holes * ADJACENT_HOLE_PENALTY
    score -= f.hole_depth * HOLE_DEPTH_PENALTY
    score -= f.blocks_above_holes * BLOCK_ABOVE_HOLE_PENALTY

    score -= f.total_height * HEIGHT_PENALTY
    score -= (f.max_height ** MAX_HEIGHT_EXPONENT) * MAX_HEIGHT_PENALTY

    score -= f.bumpiness * BUMPINESS_PENALTY
    score += f.neighbor_count * NEIGHBOR_BONUS

    if f.completed_lines == 4 and placed_shape is not None and placed_shape.shape == (1, 4):
        score += I_PIECE_TETRIS_BONUS

    if is_basin(f.column_tops):
        score += BASIN_BONUS

    return score
