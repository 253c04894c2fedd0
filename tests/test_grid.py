import numpy as np
import pytest

from perfect_clear import Board, ConfigurationError, Orientation, PieceType, Placement, PlacementError, apply
from perfect_clear.game import is_perfect_clear


def test_text_round_trip():
    text = "....\n...#\n#..#"
    board = Board.from_text(text)
    assert (board.width, board.height) == (4, 3)
    assert board.to_text() == text
    assert board.is_filled(0, 0)
    assert board.is_filled(3, 1)
    assert not board.is_filled(1, 0)
    assert board.filled_count == 3


def test_array_rows_are_top_down():
    board = Board.from_array(np.array([[0, 0, 1], [1, 0, 0]]))
    assert board.is_filled(0, 0)
    assert board.is_filled(2, 1)
    assert board.filled_count == 2
    np.testing.assert_array_equal(board.to_array(), np.array([[0, 0, 1], [1, 0, 0]], dtype=np.int8))


@pytest.mark.parametrize("width,height", [(0, 4), (4, 0), (-1, 2)])
def test_rejects_degenerate_size(width, height):
    with pytest.raises(ConfigurationError):
        Board.empty(width, height)


def test_rejects_cells_outside():
    with pytest.raises(ConfigurationError):
        Board.from_cells(4, 2, [(4, 0)])
    with pytest.raises(ConfigurationError):
        Board.from_text("##.\n#.")


def test_apply_without_clear():
    board = Board.empty(4, 2)
    after, cleared = apply(board, Placement(PieceType.O, Orientation.NORTH, 0, 0))
    assert cleared == 0
    assert after.filled_count == 4
    assert after.to_text() == "##..\n##.."
    # The input board is untouched.
    assert board.is_empty()


def test_apply_clears_to_empty():
    board = Board.from_text("##..\n##..")
    after, cleared = apply(board, Placement(PieceType.O, Orientation.NORTH, 2, 0))
    assert cleared == 2
    assert is_perfect_clear(after)


def test_apply_compacts_rows_above_a_clear():
    board = Board.from_text(
        """
        ....
        ....
        #...
        ###.
        """
    )
    after, cleared = apply(board, Placement(PieceType.I, Orientation.EAST, 2, 2))
    assert cleared == 1
    assert after.to_text() == "....\n...#\n...#\n#..#"
    assert after.filled_count == board.filled_count + 4 - cleared * board.width


def test_apply_overlap_raises():
    board = Board.from_text("#...\n....")
    placement = Placement(PieceType.O, Orientation.NORTH, 0, 0)
    with pytest.raises(PlacementError) as info:
        apply(board, placement)
    assert info.value.placement == placement
    assert info.value.board == board


def test_apply_outside_raises():
    with pytest.raises(PlacementError):
        apply(Board.empty(4, 2), Placement(PieceType.I, Orientation.NORTH, 3, 0))
    with pytest.raises(PlacementError):
        apply(Board.empty(4, 2), Placement(PieceType.I, Orientation.EAST, 0, 1))


def test_full_rows_in_the_initial_board_clear_with_the_next_lock():
    board = Board.from_text("....\n####")
    after, cleared = apply(board, Placement(PieceType.I, Orientation.NORTH, 1, 1))
    assert cleared == 2
    assert after.is_empty()


def test_clear_lines_and_stack_height():
    board = Board.from_text(
        """
        ....
        #...
        ####
        ##.#
        """
    )
    assert board.stack_height == 3
    cleared, lines = board.clear_lines()
    assert lines == 1
    assert cleared.to_text() == "....\n....\n#...\n##.#"
    assert cleared.stack_height == 2
    assert Board.empty(4, 3).stack_height == 0
