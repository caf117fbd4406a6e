import pytest

from conftest import mv
from chesslink.exceptions import IllegalMove
from chesslink.models import START_POSITION
from chesslink.rules import ChessRules

PROMOTION_FEN = '8/P7/8/8/8/8/8/k6K w - - 0 1'


@pytest.fixture()
def rules():
    return ChessRules()


def test_apply_move_returns_new_position(rules):
    fen = rules.apply_move(START_POSITION, mv('e2e4'))
    assert fen != START_POSITION
    assert rules.side_to_move(fen) == 'b'
    assert rules.piece_at(fen, 'e4') == ('w', 'p')
    assert rules.piece_at(fen, 'e2') is None


def test_apply_move_rejects_unreachable_square(rules):
    with pytest.raises(IllegalMove):
        rules.apply_move(START_POSITION, mv('b1b3'))
    with pytest.raises(IllegalMove):
        rules.apply_move(START_POSITION, mv('e7e5'))


def test_promotion_defaults_to_queen(rules):
    fen = rules.apply_move(PROMOTION_FEN, mv('a7a8'))
    assert rules.piece_at(fen, 'a8') == ('w', 'q')


def test_promotion_honours_requested_piece(rules):
    fen = rules.apply_move(PROMOTION_FEN, mv('a7a8n'))
    assert rules.piece_at(fen, 'a8') == ('w', 'n')


def test_promotion_to_pawn_is_illegal(rules):
    with pytest.raises(IllegalMove):
        rules.apply_move(PROMOTION_FEN, mv('a7a8p'))


def test_promotion_letter_ignored_on_ordinary_move(rules):
    assert rules.apply_move(START_POSITION, mv('e2e4q')) == rules.apply_move(START_POSITION, mv('e2e4'))


def test_terminal_inspection(rules):
    fen = START_POSITION
    for uci in ('f2f3', 'e7e5', 'g2g4', 'd8h4'):
        fen = rules.apply_move(fen, mv(uci))
    assert rules.is_checkmate(fen)
    assert rules.is_check(fen)
    assert not rules.is_draw(fen)


@pytest.mark.parametrize('fen', [
    '7k/5Q2/6K1/8/8/8/8/8 b - - 0 1',        # stalemate
    '8/8/8/4k3/8/8/8/4K3 w - - 0 1',         # bare kings
    '4k3/8/8/8/8/8/4P3/4K3 w - - 100 80',    # fifty-move counter
])
def test_draws(rules, fen):
    assert rules.is_draw(fen)
    assert not rules.is_checkmate(fen)


def test_board_occupancy_and_targets(rules):
    occupancy = rules.board_occupancy(START_POSITION)
    assert len(occupancy) == 32
    assert occupancy['e1'] == ('w', 'k')
    assert occupancy['d8'] == ('b', 'q')
    assert rules.legal_targets(START_POSITION, 'g1') == ['f3', 'h3']
    assert rules.legal_targets(START_POSITION, 'e4') == []
