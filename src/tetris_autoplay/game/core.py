from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional, Sequence, Tuple

from .grid import BOARD_HEIGHT, BOARD_WIDTH, GameGrid
from .line_clear import ClearResult, LineClearController
from .movement import can_occupy, ghost_position, hard_drop, merge_piece, try_move, try_rotate
from .pieces import ActivePiece, spawn_piece
from .rules import ScoringRules
from .scheduler import ScheduledTask, Scheduler
from .state import GameState


logger = logging.getLogger(__name__)


class Intent(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    SOFT_DROP = 2
    HARD_DROP = 3
    ROTATE = 4
    TOGGLE_AUTOPLAY = 5


REPEATABLE_INTENTS = (Intent.MOVE_LEFT, Intent.MOVE_RIGHT, Intent.SOFT_DROP)

_MOVE_DELTAS = {
    Intent.MOVE_LEFT: (-1, 0),
    Intent.MOVE_RIGHT: (1, 0),
    Intent.SOFT_DROP: (0, 1),
}


class GamePhase(Enum):
    SPAWNING = "spawning"
    FALLING = "falling"
    LOCKING = "locking"
    CLEARING = "clearing"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = BOARD_WIDTH
    height: int = BOARD_HEIGHT
    random_seed: Optional[int] = None
    gravity_base_ms: float = 1000.0
    clear_tick_ms: float = 100.0
    clear_animation_steps: int = 10
    autoplay_interval_ms: float = 500.0
    autoplay_step_ms: float = 50.0
    input_repeat_ms: float = 100.0
    restart_delay_ms: float = 100.0
    refresh_gravity_on_level_up: bool = True

    def __post_init__(self) -> None:
        for name in ("gravity_base_ms", "clear_tick_ms", "autoplay_interval_ms",
                     "autoplay_step_ms", "input_repeat_ms"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.restart_delay_ms < 0:
            raise ValueError(f"restart_delay_ms must not be negative, got {self.restart_delay_ms}")
        if self.clear_animation_steps < 0:
            raise ValueError(f"clear_animation_steps must not be negative, got {self.clear_animation_steps}")


class GameListener:
    """Receives notifications from the game. Every hook is optional."""

    def on_redraw(self, game: "TetrisGame") -> None:
        pass

    def on_clear_started(self, rows: Sequence[int]) -> None:
        pass

    def on_clear_step(self, step: int, color: Optional[str]) -> None:
        pass

    def on_clear_finished(self, result: ClearResult) -> None:
        pass

    def on_level_changed(self, level: int) -> None:
        pass

    def on_game_over(self, score: int) -> None:
        pass


class TetrisGame:
    """Owns the game state and every timer that drives it.

    Time only moves when ``scheduler.advance`` is called, so the pygame loop,
    the tests and any other driver share the same behaviour.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None,
                 listener: Optional[GameListener] = None, scheduler: Optional[Scheduler] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.listener = listener or GameListener()
        self.scheduler = scheduler or Scheduler()
        self.rng = random.Random(self.config.random_seed)
        self.state = GameState(board=GameGrid(self.config.width, self.config.height))
        self.line_clear = LineClearController(self.rules, self.config.clear_animation_steps)
        self.phase = GamePhase.SPAWNING
        self.games_played = 0
        self.last_final_score: Optional[int] = None
        self._held: List[Intent] = []

        self._gravity_task: Optional[ScheduledTask] = None
        self._clear_task: Optional[ScheduledTask] = None
        self._autoplay_task: Optional[ScheduledTask] = None
        self._autoplay_move_task: Optional[ScheduledTask] = None
        self._repeat_task: Optional[ScheduledTask] = None
        self._restart_task: Optional[ScheduledTask] = None

    # ---------- Accessors ----------
    @property
    def board(self) -> GameGrid:
        return self.state.board

    @property
    def piece(self) -> Optional[ActivePiece]:
        return self.state.piece

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def level(self) -> int:
        return self.state.level

    @property
    def autoplay(self) -> bool:
        return self.state.autoplay

    @property
    def fall_interval_ms(self) -> float:
        return self.rules.fall_interval_ms(self.state.level, self.config.gravity_base_ms)

    def ghost_position(self) -> Optional[Tuple[int, int]]:
        if self.state.piece is None or self.state.is_clearing:
            return None
        return ghost_position(self.state.piece, self.state.board)

    def active_tasks(self) -> List[ScheduledTask]:
        tasks = (self._gravity_task, self._clear_task, self._autoplay_task,
                 self._autoplay_move_task, self._repeat_task, self._restart_task)
        return [task for task in tasks if task is not None and task.active]

    # ---------- Lifecycle ----------
    def start(self) -> None:
        """Reset everything and begin a new game."""
        self._cancel_timers()
        self.state.reset()
        self.line_clear.reset()
        self._held.clear()
        self.games_played += 1

        if not self._spawn():
            return
        self._restart_gravity()
        self._repeat_task = self.scheduler.call_every(self.config.input_repeat_ms, self._repeat_tick, "input-repeat")
        if self.state.autoplay:
            self._start_autoplay()
        self._redraw()

    reset = start

    def stop(self) -> None:
        self._cancel_timers()

    def _cancel_timers(self) -> None:
        for task in self.active_tasks():
            task.cancel()
        self._gravity_task = None
        self._clear_task = None
        self._autoplay_task = None
        self._autoplay_move_task = None
        self._repeat_task = None
        self._restart_task = None

    def _restart_gravity(self) -> None:
        if self._gravity_task is not None:
            self._gravity_task.cancel()
        self._gravity_task = self.scheduler.call_every(self.fall_interval_ms, self._gravity_tick, "gravity")

    def _spawn(self) -> bool:
        self.phase = GamePhase.SPAWNING
        piece = spawn_piece(self.rng, self.state.board.width)
        self.state.piece = piece
        if not can_occupy(piece, 0, 0, self.state.board):
            self._game_over()
            return False
        self.phase = GamePhase.FALLING
        return True

    def _game_over(self) -> None:
        final_score = self.state.score
        self.phase = GamePhase.GAME_OVER
        self.state.game_over = True
        self._cancel_timers()
        self.line_clear.reset()
        self.last_final_score = final_score
        logger.info("game over with score %d at level %d", final_score, self.state.level)
        self.listener.on_game_over(final_score)
        self._restart_task = self.scheduler.call_later(self.config.restart_delay_ms, self.start, "restart")

    # ---------- Gravity, locking and line clears ----------
    def _blocked(self) -> bool:
        return self.state.game_over or self.state.is_clearing or self.state.piece is None

    def _gravity_tick(self) -> None:
        if self._blocked():
            return
        if not try_move(self.state.piece, 0, 1, self.state.board):
            self._lock_piece()
        self._redraw()

    def _lock_piece(self) -> None:
        self.phase = GamePhase.LOCKING
        merge_piece(self.state.piece, self.state.board)
        self.state.piece = None
        if self.line_clear.detect(self.state):
            self._start_clear_animation()
        else:
            self._spawn()

    def _start_clear_animation(self) -> None:
        self.phase = GamePhase.CLEARING
        if self._clear_task is not None:
            self._clear_task.cancel()
        self.listener.on_clear_started(list(self.state.clearing_rows))
        self._clear_task = self.scheduler.call_every(self.config.clear_tick_ms, self._clear_tick, "line-clear")

    def _clear_tick(self) -> None:
        previous_level = self.state.level
        result = self.line_clear.tick(self.state)
        if result is None:
            self.listener.on_clear_step(self.line_clear.step, self.line_clear.flash_color)
            self._redraw()
            return

        if self._clear_task is not None:
            self._clear_task.cancel()
            self._clear_task = None
        logger.debug("cleared %d lines for %d points", result.lines, result.score_gained)
        self.listener.on_clear_finished(result)
        if result.level != previous_level:
            self._level_changed(result.level)
        self._spawn()
        self._redraw()

    def _level_changed(self, level: int) -> None:
        logger.debug("level %d, fall interval %.1fms", level, self.fall_interval_ms)
        self.listener.on_level_changed(level)
        if self.config.refresh_gravity_on_level_up and self._gravity_task is not None:
            self._restart_gravity()

    def _hard_drop(self) -> None:
        if self._blocked():
            return
        hard_drop(self.state.piece, self.state.board)
        self._lock_piece()
        self._redraw()

    # ---------- Player input ----------
    def handle_intent(self, intent: Intent) -> None:
        """Apply one discrete intent. Intents that cannot apply are ignored."""
        if self.state.is_clearing or self.state.game_over:
            return
        if intent == Intent.TOGGLE_AUTOPLAY:
            self.toggle_autoplay()
            return
        if self.state.autoplay:
            return
        self._apply(intent)

    def press(self, intent: Intent) -> None:
        if intent not in REPEATABLE_INTENTS:
            self.handle_intent(intent)
            return
        if self.state.autoplay or self.state.is_clearing or intent in self._held:
            return
        self._held.append(intent)
        self._apply(intent)

    def release(self, intent: Intent) -> None:
        if intent in self._held:
            self._held.remove(intent)

    def _repeat_tick(self) -> None:
        if self.state.autoplay or not self._held:
            return
        for intent in list(self._held):
            self._apply(intent)

    def _apply(self, intent: Intent) -> None:
        if self._blocked():
            return
        piece = self.state.piece
        if intent in _MOVE_DELTAS:
            dx, dy = _MOVE_DELTAS[intent]
            try_move(piece, dx, dy, self.state.board)
        elif intent == Intent.ROTATE:
            try_rotate(piece, self.state.board)
        elif intent == Intent.HARD_DROP:
            self._hard_drop()
            return
        self._redraw()

    # ---------- Autoplay ----------
    def toggle_autoplay(self) -> bool:
        self.state.autoplay = not self.state.autoplay
        if self.state.autoplay:
            self._held.clear()
            if not self.state.game_over:
                self._start_autoplay()
        else:
            self._stop_autoplay()
        logger.debug("autoplay %s", "on" if self.state.autoplay else "off")
        self._redraw()
        return self.state.autoplay

    def _start_autoplay(self) -> None:
        if self._autoplay_task is None:
            self._autoplay_task = self.scheduler.call_every(
                self.config.autoplay_interval_ms, self._autoplay_tick, "autoplay")

    def _stop_autoplay(self) -> None:
        for task in (self._autoplay_task, self._autoplay_move_task):
            if task is not None:
                task.cancel()
        self._autoplay_task = None
        self._autoplay_move_task = None

    def _autoplay_tick(self) -> None:
        # Imported here: the planner depends on this package.
        from tetris_autoplay.autoplay.planner import plan_move

        if not self.state.autoplay or self._blocked():
            return
        if self._autoplay_move_task is not None and self._autoplay_move_task.active:
            return
        piece = self.state.piece
        plan = plan_move(piece, self.state.board)
        for _ in range(plan.rotations):
            try_rotate(piece, self.state.board)
        target_x = piece.x + plan.translation
        self._autoplay_move_task = self.scheduler.call_every(
            self.config.autoplay_step_ms, lambda: self._autoplay_step(target_x), "autoplay-move")
        self._redraw()

    def _autoplay_step(self, target_x: int) -> None:
        if self._blocked():
            self._finish_autoplay_move()
            return
        piece = self.state.piece
        board = self.state.board
        if piece.x < target_x and try_move(piece, 1, 0, board):
            self._redraw()
        elif piece.x > target_x and try_move(piece, -1, 0, board):
            self._redraw()
        else:
            self._finish_autoplay_move()
            self._hard_drop()

    def _finish_autoplay_move(self) -> None:
        if self._autoplay_move_task is not None:
            self._autoplay_move_task.cancel()
            self._autoplay_move_task = None

    def _redraw(self) -> None:
        self.listener.on_redraw(self)
