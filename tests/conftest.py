from __future__ import annotations

from typing import List, Optional, Sequence

import pytest

from tetris_autoplay.game import GameConfig, GameGrid, GameListener, TetrisGame
from tetris_autoplay.game.line_clear import ClearResult


class RecordingListener(GameListener):
    def __init__(self) -> None:
        self.redraws = 0
        self.clear_started: List[List[int]] = []
        self.clear_steps: List[tuple[int, Optional[str]]] = []
        self.clear_results: List[ClearResult] = []
        self.levels: List[int] = []
        self.game_overs: List[int] = []

    def on_redraw(self, game: TetrisGame) -> None:
        self.redraws += 1

    def on_clear_started(self, rows: Sequence[int]) -> None:
        self.clear_started.append(list(rows))

    def on_clear_step(self, step: int, color: Optional[str]) -> None:
        self.clear_steps.append((step, color))

    def on_clear_finished(self, result: ClearResult) -> None:
        self.clear_results.append(result)

    def on_level_changed(self, level: int) -> None:
        self.levels.append(level)

    def on_game_over(self, score: int) -> None:
        self.game_overs.append(score)


def fill_row(board: GameGrid, y: int, token: int = 1, except_columns: Sequence[int] = ()) -> None:
    for x in range(board.width):
        if x not in except_columns:
            board.fill(x, y, token)


@pytest.fixture
def board() -> GameGrid:
    return GameGrid()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def game(listener: RecordingListener) -> TetrisGame:
    g = TetrisGame(GameConfig(random_seed=1234), listener=listener)
    g.start()
    return g
