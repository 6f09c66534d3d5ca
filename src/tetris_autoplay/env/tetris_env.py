from __future__ import annotations

import random
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_autoplay.autoplay.planner import MovePlan
from tetris_autoplay.game import (
    GameConfig,
    GameGrid,
    GameState,
    LineClearController,
    ScoringRules,
    can_occupy,
    hard_drop,
    merge_piece,
    rotate_cw,
    spawn_piece,
)


def _compute_action_mask(state: GameState) -> np.ndarray:
    """Mask of shape (4, width): rotation count x target column."""
    board = state.board
    mask = np.zeros((4, board.width), dtype=np.bool_)
    piece = state.piece
    if piece is None:
        return mask
    shape = piece.shape.copy()
    for r in range(4):
        if r:
            shape = rotate_cw(shape)
        for column in range(board.width):
            candidate = piece.copy(shape=shape.copy(), x=column)
            mask[r, column] = can_occupy(candidate, 0, 0, board)
    return mask


class TetrisPlacementEnv(gym.Env):
    """One hard-dropped piece per step.

    Action: (rotations, target column). Rotations are applied in place and
    the piece then jumps to the target column and drops, so this env does not
    model the path the piece would take. Line clears compact immediately.
    Reward is the engine score gained by the placement.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None,
                 render_mode: Optional[str] = None, invalid_action_penalty: float = 0.0,
                 max_pieces: int = 10000) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.render_mode = render_mode
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.max_pieces = int(max_pieces)

        self.state = GameState(board=GameGrid(self.config.width, self.config.height))
        self.line_clear = LineClearController(self.rules)
        self.rng = random.Random(self.config.random_seed)
        self.pieces_placed = 0

        width, height = self.config.width, self.config.height
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0, high=1, shape=(height, width), dtype=np.int8),
                "piece": spaces.Discrete(8),
            }
        )
        self.action_space = spaces.MultiDiscrete((4, width))

    def _spawn(self) -> bool:
        self.state.piece = spawn_piece(self.rng, self.state.board.width)
        if not can_occupy(self.state.piece, 0, 0, self.state.board):
            self.state.game_over = True
            return False
        return True

    def _get_obs(self) -> Dict[str, Any]:
        piece = self.state.piece
        return {
            "board": self.state.board.occupancy(),
            "piece": int(piece.kind) if piece is not None and not self.state.game_over else 0,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.state),
            "score": self.state.score,
            "level": self.state.level,
            "lines_cleared": self.state.lines_cleared_total,
            "pieces_placed": self.pieces_placed,
        }

    def plan_to_action(self, plan: MovePlan) -> Tuple[int, int]:
        """Convert a planner move (relative translation) to an env action."""
        piece = self.state.piece
        if piece is None:
            raise ValueError("no active piece")
        return plan.rotations, piece.x + plan.translation

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.rng.seed(seed)
        self.state.reset()
        self.line_clear.reset()
        self.pieces_placed = 0
        self._spawn()
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int]):
        rotations, column = map(int, action)
        if not (0 <= rotations < 4 and 0 <= column < self.state.board.width):
            raise ValueError(f"action {tuple(action)} is outside the action space")
        if self.state.game_over or self.state.piece is None:
            return self._get_obs(), 0.0, True, False, self._get_info()

        piece = self.state.piece
        shape = piece.shape.copy()
        for _ in range(rotations):
            shape = rotate_cw(shape)
        candidate = piece.copy(shape=shape, x=column)

        if not can_occupy(candidate, 0, 0, self.state.board):
            info = self._get_info()
            info["invalid_action"] = True
            return self._get_obs(), self.invalid_action_penalty, False, False, info

        score_before = self.state.score
        hard_drop(candidate, self.state.board)
        merge_piece(candidate, self.state.board)
        self.state.piece = None
        self.pieces_placed += 1

        lines = 0
        if self.line_clear.detect(self.state):
            lines = self.line_clear.compact(self.state).lines
        terminated = not self._spawn()
        truncated = self.pieces_placed >= self.max_pieces

        reward = float(self.state.score - score_before)
        info = self._get_info()
        info["lines"] = lines
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        cell = 12
        board = self.state.board.occupancy()
        h, w = board.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                color = (70, 200, 120) if board[y, x] else (30, 30, 36)
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        piece = self.state.piece
        if piece is not None and not self.state.game_over:
            for x, y in piece.cells():
                if 0 <= y < h and 0 <= x < w:
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = (240, 240, 240)
        return img

    def close(self) -> None:
        pass
