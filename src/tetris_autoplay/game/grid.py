from __future__ import annotations

from typing import List

import numpy as np


BOARD_WIDTH = 10
BOARD_HEIGHT = 20

EMPTY = 0


class GameGrid:
    """Fixed-size playfield of empty/filled cells.

    The grid uses 0 for empty cells and positive integers for filled cells.
    The integer is an opaque color token (the tetromino id of the piece that
    filled it). Row 0 is the top of the board.
    """

    def __init__(self, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"board dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(EMPTY)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_filled(self, x: int, y: int) -> bool:
        return bool(self.grid[y, x] != EMPTY)

    def fill(self, x: int, y: int, token: int) -> None:
        self.grid[y, x] = token

    def is_row_full(self, y: int) -> bool:
        return bool(np.all(self.grid[y] != EMPTY))

    def full_rows(self) -> List[int]:
        return [int(y) for y in np.where(np.all(self.grid != EMPTY, axis=1))[0]]

    def remove_row(self, y: int) -> None:
        self.grid = np.delete(self.grid, y, axis=0)

    def prepend_empty_row(self) -> None:
        new_row = np.zeros((1, self.width), dtype=np.int8)
        self.grid = np.vstack((new_row, self.grid))

    def column_height(self, x: int) -> int:
        """Row index of the topmost filled cell in column ``x``.

        Returns ``height`` for an empty column, so ``height - column_height(x)``
        is the stack height of the column.
        """
        filled = np.flatnonzero(self.grid[:, x] != EMPTY)
        if filled.size == 0:
            return self.height
        return int(filled[0])

    def occupancy(self) -> np.ndarray:
        return (self.grid != EMPTY).astype(np.int8)

    def copy(self) -> "GameGrid":
        new_grid = GameGrid(self.width, self.height)
        new_grid.grid = self.grid.copy()
        return new_grid

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
