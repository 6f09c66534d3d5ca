"""Gymnasium environments for tetris_autoplay."""

from __future__ import annotations

from gymnasium.envs.registration import register

# One placement (rotation + target column) per step
register(
    id="Tetris-10x20-v0",
    entry_point="tetris_autoplay.env.tetris_env:TetrisPlacementEnv",
)

__all__ = ["Tetris-10x20-v0"]
