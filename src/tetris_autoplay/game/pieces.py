from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np

from .grid import BOARD_WIDTH


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def rotate_cw(shape: Shape) -> Shape:
    """Rotate a shape matrix 90 degrees clockwise.

    Row ``i`` of the result is column ``i`` of the input read bottom-to-top,
    so an R x C matrix becomes C x R. The result never shares memory with
    the input.
    """
    return np.rot90(shape, 1, axes=(1, 0)).copy()


@dataclass(frozen=True)
class Tetromino:
    kind: TetrominoType
    shape: Shape
    color: str


def _catalog_entry(kind: TetrominoType, rows: List[List[int]], color: str) -> Tetromino:
    shape = np.array(rows, dtype=np.int8)
    shape.flags.writeable = False
    return Tetromino(kind, shape, color)


TETROMINOES: Tuple[Tetromino, ...] = (
    _catalog_entry(TetrominoType.I, [[1, 1, 1, 1]], "#00f0f0"),
    _catalog_entry(TetrominoType.O, [[1, 1], [1, 1]], "#f0f000"),
    _catalog_entry(TetrominoType.T, [[0, 1, 0], [1, 1, 1]], "#a000f0"),
    _catalog_entry(TetrominoType.S, [[1, 1, 0], [0, 1, 1]], "#00ff00"),
    _catalog_entry(TetrominoType.Z, [[0, 1, 1], [1, 1, 0]], "#ff0000"),
    _catalog_entry(TetrominoType.J, [[1, 0, 0], [1, 1, 1]], "#0000ff"),
    _catalog_entry(TetrominoType.L, [[0, 0, 1], [1, 1, 1]], "#ffa500"),
)

CATALOG: Dict[TetrominoType, Tetromino] = {t.kind: t for t in TETROMINOES}


def color_for_token(token: int) -> str:
    return CATALOG[TetrominoType(abs(int(token)))].color


@dataclass
class ActivePiece:
    """The falling piece: its own shape copy, color token and anchor.

    ``x``/``y`` locate the top-left cell of ``shape`` on the board; ``y`` may
    be negative while the piece is partly above the visible board.
    """

    kind: TetrominoType
    shape: Shape
    x: int
    y: int = 0
    token: int = 0

    def __post_init__(self) -> None:
        if not self.token:
            self.token = int(self.kind)

    @property
    def color(self) -> str:
        return CATALOG[self.kind].color

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    def cells(self, dx: int = 0, dy: int = 0, shape: Shape | None = None) -> List[Tuple[int, int]]:
        s = self.shape if shape is None else shape
        h, w = s.shape
        cells: List[Tuple[int, int]] = []
        for sy in range(h):
            for sx in range(w):
                if s[sy, sx]:
                    cells.append((self.x + sx + dx, self.y + sy + dy))
        return cells

    def copy(self, **changes) -> "ActivePiece":
        piece = ActivePiece(self.kind, self.shape.copy(), self.x, self.y, self.token)
        for name, value in changes.items():
            setattr(piece, name, value)
        return piece


def spawn_x(shape_width: int, board_width: int = BOARD_WIDTH) -> int:
    return board_width // 2 - shape_width // 2


def new_piece(kind: TetrominoType, board_width: int = BOARD_WIDTH) -> ActivePiece:
    entry = CATALOG[kind]
    shape = entry.shape.copy()
    return ActivePiece(kind=kind, shape=shape, x=spawn_x(shape.shape[1], board_width), y=0)


def spawn_piece(rng: random.Random, board_width: int = BOARD_WIDTH) -> ActivePiece:
    """Pick a catalog entry uniformly at random and place it at the spawn anchor."""
    entry = rng.choice(TETROMINOES)
    return new_piece(entry.kind, board_width)
