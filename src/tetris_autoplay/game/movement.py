"""Collision checks and piece movement.

All functions are pure with respect to the board: they only read it, except
``merge_piece`` which writes the piece's color token into it.
"""

from __future__ import annotations

from typing import Optional, Tuple

from .grid import GameGrid
from .pieces import ActivePiece, Shape, rotate_cw


def can_occupy(piece: ActivePiece, dx: int, dy: int, board: GameGrid, shape: Optional[Shape] = None) -> bool:
    for x, y in piece.cells(dx, dy, shape):
        if x < 0 or x >= board.width or y >= board.height:
            return False
        # Rows above the board are open space
        if y >= 0 and board.is_filled(x, y):
            return False
    return True


def try_move(piece: ActivePiece, dx: int, dy: int, board: GameGrid) -> bool:
    if not can_occupy(piece, dx, dy, board):
        return False
    piece.x += dx
    piece.y += dy
    return True


def try_rotate(piece: ActivePiece, board: GameGrid) -> bool:
    """Rotate clockwise in place if the rotated shape fits at the same anchor."""
    rotated = rotate_cw(piece.shape)
    if not can_occupy(piece, 0, 0, board, shape=rotated):
        return False
    piece.shape = rotated
    return True


def drop_distance(piece: ActivePiece, board: GameGrid) -> int:
    distance = 0
    while can_occupy(piece, 0, distance + 1, board):
        distance += 1
    return distance


def hard_drop(piece: ActivePiece, board: GameGrid) -> int:
    distance = drop_distance(piece, board)
    piece.y += distance
    return distance


def ghost_position(piece: ActivePiece, board: GameGrid) -> Tuple[int, int]:
    return piece.x, piece.y + drop_distance(piece, board)


def merge_piece(piece: ActivePiece, board: GameGrid) -> int:
    """Write the piece into the board and return the number of cells written."""
    written = 0
    for x, y in piece.cells():
        if board.is_inside(x, y):
            board.fill(x, y, piece.token)
            written += 1
    return written
