"""Game module for tetris_autoplay.

Exports the core game engine and supporting classes:
- GameGrid: Board representation (row tests, row removal, column scans)
- ActivePiece, TetrominoType, TETROMINOES: Piece model and catalog
- can_occupy and friends: Collision and movement rules
- LineClearController: Timed line-clear sequence
- ScoringRules: Line bonuses, levels and fall speed
- Scheduler: Virtual-clock timers
- TetrisGame: Orchestrator tying it all together
"""

from .grid import BOARD_HEIGHT, BOARD_WIDTH, GameGrid
from .pieces import TETROMINOES, ActivePiece, Tetromino, TetrominoType, rotate_cw, spawn_piece
from .movement import can_occupy, drop_distance, ghost_position, hard_drop, merge_piece, try_move, try_rotate
from .rules import ScoringRules
from .state import GameState
from .line_clear import FLASH_COLORS, ClearPhase, ClearResult, LineClearController
from .scheduler import ScheduledTask, Scheduler
from .core import GameConfig, GameListener, GamePhase, Intent, TetrisGame

__all__ = [
    "BOARD_HEIGHT",
    "BOARD_WIDTH",
    "GameGrid",
    "TETROMINOES",
    "ActivePiece",
    "Tetromino",
    "TetrominoType",
    "rotate_cw",
    "spawn_piece",
    "can_occupy",
    "drop_distance",
    "ghost_position",
    "hard_drop",
    "merge_piece",
    "try_move",
    "try_rotate",
    "ScoringRules",
    "GameState",
    "FLASH_COLORS",
    "ClearPhase",
    "ClearResult",
    "LineClearController",
    "ScheduledTask",
    "Scheduler",
    "GameConfig",
    "GameListener",
    "GamePhase",
    "Intent",
    "TetrisGame",
]
