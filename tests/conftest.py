import pytest

from perfect_clear import Board


@pytest.fixture
def pco_board() -> Board:
    # Four-row opener remainder: 12 free cells, three pieces to finish.
    return Board.from_text(
        """
        XXXX....XX
        XXXX...XXX
        XXXX..XXXX
        XXXX...XXX
        """
    )


@pytest.fixture
def filled_line_board() -> Board:
    return Board.from_text(
        """
        ####....##
        #####..###
        ##########
        #####..###
        """
    )
