import random

import numpy as np
import pytest

from tetris_autoplay.game import TETROMINOES, TetrominoType, rotate_cw, spawn_piece
from tetris_autoplay.game.pieces import CATALOG, color_for_token, new_piece


def test_catalog_has_seven_four_cell_pieces():
    assert len(TETROMINOES) == 7
    assert {t.kind for t in TETROMINOES} == set(TetrominoType)
    for entry in TETROMINOES:
        assert int(entry.shape.sum()) == 4


def test_rotate_cw_reads_columns_bottom_to_top():
    shape = np.array([[1, 2, 3], [4, 5, 6]])
    assert rotate_cw(shape).tolist() == [[4, 1], [5, 2], [6, 3]]


@pytest.mark.parametrize("entry", TETROMINOES, ids=lambda t: t.kind.name)
def test_four_rotations_are_identity(entry):
    shape = entry.shape
    for _ in range(4):
        shape = rotate_cw(shape)
    assert np.array_equal(shape, entry.shape)


def test_rotation_never_touches_catalog():
    piece = new_piece(TetrominoType.T)
    piece.shape[0, 0] = 1
    rotate_cw(piece.shape)
    assert CATALOG[TetrominoType.T].shape.tolist() == [[0, 1, 0], [1, 1, 1]]


def test_catalog_shapes_are_read_only():
    with pytest.raises(ValueError):
        CATALOG[TetrominoType.O].shape[0, 0] = 0


def test_spawn_position_is_centered_at_top():
    i_piece = new_piece(TetrominoType.I)
    assert (i_piece.x, i_piece.y) == (3, 0)
    o_piece = new_piece(TetrominoType.O)
    assert (o_piece.x, o_piece.y) == (4, 0)
    t_piece = new_piece(TetrominoType.T)
    assert (t_piece.x, t_piece.y) == (4, 0)


def test_spawn_piece_copies_shape_and_color():
    piece = spawn_piece(random.Random(7))
    entry = CATALOG[piece.kind]
    assert np.array_equal(piece.shape, entry.shape)
    assert not np.shares_memory(piece.shape, entry.shape)
    assert piece.color == entry.color
    assert color_for_token(piece.token) == entry.color


def test_spawn_piece_draws_every_kind():
    rng = random.Random(0)
    kinds = {spawn_piece(rng).kind for _ in range(200)}
    assert kinds == set(TetrominoType)


def test_cells_apply_anchor_and_delta():
    piece = new_piece(TetrominoType.O)
    assert sorted(piece.cells(dy=2)) == [(4, 2), (4, 3), (5, 2), (5, 3)]
