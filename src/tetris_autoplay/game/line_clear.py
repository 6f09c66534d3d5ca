from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .rules import ScoringRules
from .state import GameState


logger = logging.getLogger(__name__)

FLASH_COLORS = (
    "#FFFFFF",
    "#FF0000",
    "#FFFF00",
    "#00FF00",
    "#0000FF",
    "#FF00FF",
)


class ClearPhase(Enum):
    IDLE = "idle"
    ANIMATING = "animating"
    COMPACTING = "compacting"


@dataclass
class ClearResult:
    lines: int
    score_gained: int
    level: int


class LineClearController:
    """Detects full rows after a merge and runs the timed clear sequence.

    The owner calls ``detect`` after every merge and, while ``phase`` is
    ``ANIMATING``, calls ``tick`` from a fixed-cadence timer. The tick after
    the last animation step compacts the board and returns a ``ClearResult``.
    """

    def __init__(self, rules: Optional[ScoringRules] = None, animation_steps: int = 10) -> None:
        self.rules = rules or ScoringRules()
        self.animation_steps = animation_steps
        self.phase = ClearPhase.IDLE
        self.step = 0

    def reset(self) -> None:
        self.phase = ClearPhase.IDLE
        self.step = 0

    @property
    def flash_color(self) -> Optional[str]:
        if self.phase is not ClearPhase.ANIMATING or self.step < 1:
            return None
        return FLASH_COLORS[(self.step - 1) % len(FLASH_COLORS)]

    def detect(self, state: GameState) -> bool:
        if state.clearing_rows:
            return True
        rows = state.board.full_rows()
        if not rows:
            return False
        state.clearing_rows = rows
        self.phase = ClearPhase.ANIMATING
        self.step = 0
        logger.debug("clearing rows %s", rows)
        return True

    def tick(self, state: GameState) -> Optional[ClearResult]:
        if self.phase is not ClearPhase.ANIMATING:
            return None
        self.step += 1
        if self.step <= self.animation_steps:
            return None
        return self.compact(state)

    def compact(self, state: GameState) -> ClearResult:
        self.phase = ClearPhase.COMPACTING
        rows = sorted(state.clearing_rows)
        lines = len(rows)
        gained = self.rules.score_for_lines(lines) * state.level
        state.score += gained
        state.level = self.rules.level_for_score(state.score)
        state.lines_cleared_total += lines

        # Removing a row and prepending an empty one leaves every row below
        # it at its old index, so ascending indices stay valid as-is.
        for y in rows:
            state.board.remove_row(y)
            state.board.prepend_empty_row()

        state.clearing_rows = []
        self.reset()
        return ClearResult(lines=lines, score_gained=gained, level=state.level)
