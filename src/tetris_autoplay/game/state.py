from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .grid import GameGrid
from .pieces import ActivePiece


@dataclass
class GameState:
    """Everything that changes during a game.

    Gravity and player input are suspended while ``clearing_rows`` is
    non-empty.
    """

    board: GameGrid = field(default_factory=GameGrid)
    piece: Optional[ActivePiece] = None
    score: int = 0
    level: int = 1
    clearing_rows: List[int] = field(default_factory=list)
    autoplay: bool = False
    game_over: bool = False
    lines_cleared_total: int = 0

    @property
    def is_clearing(self) -> bool:
        return bool(self.clearing_rows)

    def reset(self) -> None:
        self.board.reset()
        self.piece = None
        self.score = 0
        self.level = 1
        self.clearing_rows = []
        self.game_over = False
        self.lines_cleared_total = 0
