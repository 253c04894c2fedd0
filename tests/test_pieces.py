import pytest

from perfect_clear import ConfigurationError, Orientation, PieceType, Placement
from perfect_clear.game import cells_of, format_order, kicks_of, parse_order
from perfect_clear.game.pieces import shape_masks


def test_every_orientation_has_four_distinct_cells():
    for piece in PieceType:
        for orientation in Orientation:
            cells = cells_of(piece, orientation)
            assert len(set(cells)) == 4


def test_t_and_i_east_cells():
    assert set(cells_of(PieceType.T, Orientation.EAST)) == {(0, 1), (0, 0), (0, -1), (1, 0)}
    assert set(cells_of(PieceType.I, Orientation.EAST)) == {(1, 1), (1, 0), (1, -1), (1, -2)}
    assert set(cells_of(PieceType.I, Orientation.WEST)) == {(0, 1), (0, 0), (0, -1), (0, -2)}


def test_o_rotation_keeps_its_cells():
    north = set(cells_of(PieceType.O, Orientation.NORTH))
    for orientation in Orientation:
        assert set(cells_of(PieceType.O, orientation)) == north


def test_jlstz_kicks_match_srs():
    for piece in (PieceType.J, PieceType.L, PieceType.S, PieceType.T, PieceType.Z):
        assert kicks_of(piece, Orientation.NORTH, Orientation.EAST) == (
            (0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2))
        assert kicks_of(piece, Orientation.EAST, Orientation.NORTH) == (
            (0, 0), (1, 0), (1, -1), (0, 2), (1, 2))
        assert kicks_of(piece, Orientation.NORTH, Orientation.WEST) == (
            (0, 0), (1, 0), (1, 1), (0, -2), (1, -2))


def test_i_kicks_match_srs():
    assert kicks_of(PieceType.I, Orientation.NORTH, Orientation.EAST) == (
        (0, 0), (-2, 0), (1, 0), (-2, -1), (1, 2))
    assert kicks_of(PieceType.I, Orientation.EAST, Orientation.NORTH) == (
        (0, 0), (2, 0), (-1, 0), (2, 1), (-1, -2))
    assert kicks_of(PieceType.I, Orientation.EAST, Orientation.SOUTH) == (
        (0, 0), (-1, 0), (2, 0), (-1, 2), (2, -1))


def test_o_has_a_single_kick():
    for src in Orientation:
        assert kicks_of(PieceType.O, src, src.rotated(1)) == ((0, 0),)


def test_shape_masks_cover_the_cells():
    masks = shape_masks(PieceType.T, 10)
    north = masks[Orientation.NORTH]
    # Bottom row of three plus the centre cell of the row above.
    assert north.mask == 0b111 | (0b010 << 10)
    assert (north.min_dx, north.max_dx, north.min_dy, north.max_dy) == (-1, 1, 0, 1)


def test_parse_and_format_order():
    order = parse_order("tIo")
    assert order == (PieceType.T, PieceType.I, PieceType.O)
    assert format_order(order) == "TIO"
    assert parse_order([PieceType.S, "z"]) == (PieceType.S, PieceType.Z)


def test_unknown_symbol():
    with pytest.raises(ConfigurationError):
        parse_order("TXQ")


def test_placement_cells():
    placement = Placement(PieceType.O, Orientation.NORTH, 2, 0)
    assert sorted(placement.cells()) == [(2, 0), (2, 1), (3, 0), (3, 1)]
    assert str(placement) == "O-NORTH@(2, 0)"
