import pytest

from perfect_clear import (
    Board,
    CancellationToken,
    ConfigurationError,
    MoveGenerator,
    MoveMode,
    MoveRules,
    Orientation,
    PcSearcher,
    PieceType,
    Placement,
    PlacementError,
    SearchConfig,
    SearchStatus,
    apply,
    is_pc_possible,
    search,
)
from perfect_clear.search import SearchCache, pc_heights, starting_board

NO_HOLD = SearchConfig(allows_hold=False)


def _replay(board, witness):
    for placement in witness:
        board, _cleared = apply(board, placement)
    return board


def test_single_o_clears_a_two_by_two_field():
    result = search(Board.empty(2, 2), "O")
    assert result.status is SearchStatus.SUCCESS
    assert result.feasible
    assert len(result.witness) == 1
    assert result.witness[0].piece is PieceType.O


def test_single_i_clears_one_row():
    assert is_pc_possible(Board.empty(4, 1), "I", NO_HOLD)
    assert not is_pc_possible(Board.empty(4, 1), "O", NO_HOLD)


def test_isolated_cell_is_infeasible_not_an_error():
    board = Board.from_cells(4, 4, [(0, 0)])
    result = search(board, "IIII")
    assert result.status is SearchStatus.FAILURE
    assert not result.feasible
    assert result.witness is None


def test_hold_changes_the_verdict():
    board = Board.empty(4, 2)
    assert search(board, "TOO", NO_HOLD).status is SearchStatus.FAILURE

    result = search(board, "TOO")
    assert result.feasible
    assert [p.piece for p in result.witness] == [PieceType.O, PieceType.O]
    assert _replay(board, result.witness).is_empty()


def test_pieces_left_over_after_the_clear_are_fine():
    result = search(Board.empty(4, 2), "IO", NO_HOLD)
    assert result.feasible
    assert [p.piece for p in result.witness] == [PieceType.I]
    assert not is_pc_possible(Board.empty(4, 2), "OI", NO_HOLD)
    assert is_pc_possible(Board.empty(4, 2), "OI")


def test_fixed_orders_on_a_three_row_field():
    board = Board.from_text(
        """
        ####....##
        #####..###
        #####..###
        """
    )
    assert is_pc_possible(board, "JOI")
    assert not is_pc_possible(board, "JTI")


def test_filled_line_below_the_ceiling(filled_line_board):
    for order, expected in [("OIT", True), ("STZ", True), ("TLJ", True), ("SOL", False)]:
        assert is_pc_possible(filled_line_board, order) is expected, order


def test_full_rows_are_cleared_before_searching(filled_line_board):
    start, top = starting_board(filled_line_board)
    assert top == 3
    assert start.filled_count == filled_line_board.filled_count - 10
    for order in ("TLJ", "LJT", "JLT"):
        result = search(filled_line_board, order)
        assert result.feasible, order
        assert _replay(start, result.witness).is_empty()


def test_board_of_full_rows_is_rejected():
    with pytest.raises(ConfigurationError):
        search(Board.from_text("####\n####"), "I")


def test_clearing_below_the_board_height_on_a_wide_board():
    board = Board.from_cells(10, 2, [(0, 0), (1, 0)])
    assert pc_heights(board, 2) == [1]
    result = search(board, "II", NO_HOLD)
    assert result.feasible
    assert _replay(board, result.witness).is_empty()


def test_lowest_ceiling_is_tried_first():
    assert pc_heights(Board.empty(4, 4), 4) == [1, 2, 3, 4]
    result = search(Board.empty(4, 4), "III")
    assert [p.piece for p in result.witness] == [PieceType.I]


def test_verdicts_are_deterministic(pco_board):
    first = search(pco_board, "TSZO")
    second = search(pco_board, "TSZO")
    assert first == second


def test_searcher_reuses_its_cache():
    searcher = PcSearcher(Board.empty(4, 2))
    first = searcher.search("TOO")
    explored = len(searcher.cache)
    assert explored > 0
    assert searcher.search("TOO") == first
    assert len(searcher.cache) == explored


def test_harddrop_rules():
    config = SearchConfig(allows_hold=False, rules=MoveRules.srs(MoveMode.HARDDROP))
    assert is_pc_possible(Board.empty(2, 2), "O", config)
    assert is_pc_possible(Board.empty(4, 2), "OO", config)


def test_cancelled_token_aborts():
    token = CancellationToken()
    token.cancel()
    result = search(Board.empty(4, 2), "TOO", cancel=token)
    assert result.status is SearchStatus.ABORTED
    assert not result.feasible
    assert token.cancelled


def test_empty_order_is_rejected():
    with pytest.raises(ConfigurationError):
        search(Board.empty(2, 2), "")


def test_short_order_is_rejected():
    board = Board.from_text("######....\n######....")
    with pytest.raises(ConfigurationError):
        search(board, "O")


def test_cache_is_tied_to_one_config():
    board = Board.empty(4, 2)
    cache = SearchCache()
    search(board, "TOO", cache=cache)
    assert search(board, "TOO", cache=cache).feasible
    harddrop = SearchConfig(rules=MoveRules.srs(MoveMode.HARDDROP))
    with pytest.raises(ConfigurationError):
        search(board, "TOO", harddrop, cache=cache)
    cache.clear()
    assert search(board, "TOO", harddrop, cache=cache).feasible


def test_placement_error_is_not_turned_into_failure(monkeypatch):
    def broken(self, board, piece, ceiling=None):
        return [Placement(PieceType.O, Orientation.NORTH, 0, 0)]

    monkeypatch.setattr(MoveGenerator, "generate_minimized", broken)
    with pytest.raises(PlacementError):
        search(Board.from_text("##..\n##.."), "O")
