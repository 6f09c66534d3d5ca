import numpy as np
import pytest

from tetris_autoplay.game import FLASH_COLORS, BOARD_HEIGHT, BOARD_WIDTH, ClearPhase, GameState, LineClearController

from conftest import fill_row


@pytest.fixture
def state(board):
    return GameState(board=board)


def _run_animation(controller, state):
    result = None
    ticks = 0
    while result is None:
        result = controller.tick(state)
        ticks += 1
    return result, ticks


def test_no_full_rows_stays_idle(state):
    controller = LineClearController()
    state.board.fill(0, 19, 1)
    assert not controller.detect(state)
    assert controller.phase is ClearPhase.IDLE
    assert state.clearing_rows == []
    assert controller.tick(state) is None


def test_detect_collects_full_rows(state):
    fill_row(state.board, 18)
    fill_row(state.board, 19)
    controller = LineClearController()
    assert controller.detect(state)
    assert sorted(state.clearing_rows) == [18, 19]
    assert controller.phase is ClearPhase.ANIMATING


def test_animation_cycles_flash_palette_then_compacts(state):
    fill_row(state.board, 19)
    controller = LineClearController()
    controller.detect(state)
    colors = []
    for _ in range(10):
        assert controller.tick(state) is None
        colors.append(controller.flash_color)
    assert colors == [FLASH_COLORS[i % 6] for i in range(10)]
    result = controller.tick(state)
    assert result is not None and result.lines == 1
    assert controller.phase is ClearPhase.IDLE
    assert state.clearing_rows == []


@pytest.mark.parametrize("k", [1, 2, 3, 4])
@pytest.mark.parametrize("level", [1, 3])
def test_clearing_k_rows_scores_and_shifts(state, k, level):
    board = state.board
    state.level = level
    state.score = (level - 1) * 1000
    # Marker rows above the full rows, full rows at the bottom
    board.fill(0, 10, 2)
    board.fill(9, 19 - k, 3)
    for y in range(20 - k, 20):
        fill_row(board, y)
    remaining = board.grid[: 20 - k].copy()

    controller = LineClearController()
    controller.detect(state)
    result, ticks = _run_animation(controller, state)

    bonus = {1: 100, 2: 300, 3: 500, 4: 800}[k]
    assert ticks == 11
    assert result.score_gained == bonus * level
    assert state.score == (level - 1) * 1000 + bonus * level
    assert board.grid.shape == (BOARD_HEIGHT, BOARD_WIDTH)
    assert not board.grid[:k].any()
    assert np.array_equal(board.grid[k:], remaining)


def test_non_adjacent_rows_compact_correctly(state):
    board = state.board
    fill_row(board, 15)
    board.fill(3, 16, 4)
    fill_row(board, 17)
    board.fill(5, 18, 6)
    fill_row(board, 19)

    controller = LineClearController()
    controller.detect(state)
    result = controller.compact(state)

    assert result.lines == 3
    assert board.grid.shape == (BOARD_HEIGHT, BOARD_WIDTH)
    assert board.grid[18, 3] == 4
    assert board.grid[19, 5] == 6
    assert board.full_rows() == []
    assert int((board.grid != 0).sum()) == 2


def test_level_is_derived_from_new_score(state):
    state.score = 900
    fill_row(state.board, 19)
    controller = LineClearController()
    controller.detect(state)
    result = controller.compact(state)
    assert state.score == 1000
    assert result.level == state.level == 2
    assert state.lines_cleared_total == 1
