import gymnasium as gym
import numpy as np
import pytest

import tetris_autoplay.env  # noqa: F401
from tetris_autoplay.autoplay import plan_move
from tetris_autoplay.env.tetris_env import TetrisPlacementEnv
from tetris_autoplay.game import GameConfig, TetrominoType
from tetris_autoplay.game.pieces import new_piece

from conftest import fill_row


@pytest.fixture
def env():
    e = TetrisPlacementEnv(GameConfig(random_seed=0))
    e.reset(seed=0)
    yield e
    e.close()


def test_reset_observation(env):
    obs, info = env.reset(seed=3)
    assert obs["board"].shape == (20, 10)
    assert not obs["board"].any()
    assert 1 <= obs["piece"] <= 7
    assert info["action_mask"].shape == (4, 10)
    assert info["action_mask"].any()
    assert env.observation_space.contains(obs)


def test_action_mask_for_i_piece(env):
    env.state.piece = new_piece(TetrominoType.I)
    mask = env._get_info()["action_mask"]
    assert mask[0].tolist() == [True] * 7 + [False] * 3
    assert mask[1].all()


def test_step_with_planner_places_piece(env):
    state = env.state
    action = env.plan_to_action(plan_move(state.piece, state.board))
    obs, reward, terminated, truncated, info = env.step(action)
    assert not terminated and not truncated
    assert int(obs["board"].sum()) == 4
    assert info["pieces_placed"] == 1
    assert reward == 0.0


def test_line_clear_rewards_score(env):
    fill_row(env.state.board, 19, except_columns=[0, 1])
    env.state.piece = new_piece(TetrominoType.O)
    obs, reward, terminated, truncated, info = env.step((0, 0))
    assert reward == 100.0
    assert info["lines"] == 1
    assert info["score"] == 100
    assert obs["board"][19].tolist() == [1, 1] + [0] * 8


def test_invalid_placement_is_rejected(env):
    env.state.piece = new_piece(TetrominoType.I)
    obs, reward, terminated, truncated, info = env.step((0, 8))
    assert info.get("invalid_action")
    assert not obs["board"].any()
    assert env.pieces_placed == 0


def test_action_outside_space_raises(env):
    with pytest.raises(ValueError):
        env.step((4, 0))


def test_blocked_spawn_terminates(env):
    for y in range(2, 20):
        fill_row(env.state.board, y, except_columns=[0])
    env.state.piece = new_piece(TetrominoType.O)
    # O lands on rows 0-1 over the spawn area, so no next piece fits
    obs, reward, terminated, truncated, info = env.step((0, 4))
    assert terminated
    assert obs["piece"] == 0
    assert env.state.game_over


def test_registered_env_runs_planner_episode():
    env = gym.make("Tetris-10x20-v0", max_pieces=25)
    obs, info = env.reset(seed=1)
    done = False
    steps = 0
    while not done:
        state = env.unwrapped.state
        action = env.unwrapped.plan_to_action(plan_move(state.piece, state.board))
        obs, reward, terminated, truncated, info = env.step(np.array(action))
        done = terminated or truncated
        steps += 1
    assert steps == 25
    assert info["pieces_placed"] == 25
    env.close()


def test_rgb_render():
    env = TetrisPlacementEnv(render_mode="rgb_array")
    env.reset(seed=2)
    img = env.render()
    assert img.shape == (240, 120, 3)


def test_random_baseline_collects_reward(capsys):
    from tetris_autoplay.rl.random_agent import run_random

    total = run_random(steps=30, seed=0)
    assert total >= 0.0
    assert "Random agent total reward" in capsys.readouterr().out
