"""Request boundary: selection, submission and promotion completion."""

import random

import pytest

from chess3d.core.board import Board
from chess3d.core.engine import (
    MoveOutcome,
    complete_promotion,
    legal_destinations,
    submit_move,
)
from chess3d.core.enums import Color, PieceType, StatusKind
from chess3d.core.errors import IllegalMoveError, InvariantViolation
from chess3d.core.executor import PendingPromotion
from chess3d.core.move_generator import MoveGenerator
from chess3d.core.piece import PROMOTION_TYPES, Piece
from chess3d.core.rules import GameStatus, Rules
from chess3d.core.types import make_square

PAWN_FROM = make_square(3, 2, 6)
PAWN_TO = make_square(3, 2, 7)


def _promotion_board() -> Board:
    board = Board()
    board[PAWN_FROM] = Piece(Color.WHITE, PieceType.PAWN, True)
    board[make_square(0, 7, 0)] = Piece(Color.WHITE, PieceType.KING)
    board[make_square(7, 7, 3)] = Piece(Color.BLACK, PieceType.KING)
    return board


class TestSelection:
    def test_knight_destinations(self, initial_board: Board) -> None:
        dests = legal_destinations(initial_board, Color.WHITE, make_square(1, 0, 0))
        assert dests == {
            make_square(0, 2, 0),
            make_square(2, 2, 0),
            make_square(3, 1, 0),
            make_square(0, 0, 2),
            make_square(2, 0, 2),
            make_square(1, 1, 2),
            make_square(1, 2, 1),
        }

    def test_wrong_side(self, initial_board: Board) -> None:
        with pytest.raises(IllegalMoveError):
            legal_destinations(initial_board, Color.BLACK, make_square(1, 0, 0))

    def test_empty_square(self, initial_board: Board) -> None:
        with pytest.raises(IllegalMoveError):
            legal_destinations(initial_board, Color.WHITE, make_square(3, 3, 3))

    def test_piece_mismatch(self, initial_board: Board) -> None:
        claimed = Piece(Color.WHITE, PieceType.QUEEN)
        with pytest.raises(InvariantViolation):
            legal_destinations(
                initial_board, Color.WHITE, make_square(1, 0, 0), claimed
            )

    def test_board_not_modified(self, initial_board: Board) -> None:
        before = initial_board.copy()
        legal_destinations(initial_board, Color.WHITE, make_square(3, 0, 0))
        assert initial_board == before


class TestSubmit:
    def test_pawn_double_step(self, initial_board: Board) -> None:
        outcome = submit_move(
            initial_board, Color.WHITE, make_square(4, 0, 1), make_square(4, 0, 3)
        )
        assert isinstance(outcome, MoveOutcome)
        assert outcome.board[make_square(4, 0, 3)].has_moved
        assert outcome.status == GameStatus.active()
        assert initial_board[make_square(4, 0, 1)] is not None

    def test_illegal_destination(self, initial_board: Board) -> None:
        with pytest.raises(IllegalMoveError, match="not legal"):
            submit_move(
                initial_board, Color.WHITE, make_square(4, 0, 1), make_square(4, 0, 4)
            )

    def test_wrong_side(self, initial_board: Board) -> None:
        with pytest.raises(IllegalMoveError):
            submit_move(
                initial_board, Color.WHITE, make_square(4, 0, 6), make_square(4, 0, 5)
            )

    def test_capture_outcome(self) -> None:
        board = Board()
        board[make_square(0, 3, 3)] = Piece(Color.WHITE, PieceType.ROOK)
        board[make_square(0, 3, 6)] = Piece(Color.BLACK, PieceType.KNIGHT)
        board[make_square(7, 0, 0)] = Piece(Color.WHITE, PieceType.KING)
        board[make_square(7, 7, 7)] = Piece(Color.BLACK, PieceType.KING)
        outcome = submit_move(
            board, Color.WHITE, make_square(0, 3, 3), make_square(0, 3, 6)
        )
        assert outcome.captured == Piece(Color.BLACK, PieceType.KNIGHT)
        assert outcome.move.capture

    def test_mate_status(self) -> None:
        board = Board()
        board[make_square(0, 0, 0)] = Piece(Color.BLACK, PieceType.KING)
        board[make_square(1, 5, 0)] = Piece(Color.WHITE, PieceType.QUEEN)
        board[make_square(2, 2, 0)] = Piece(Color.WHITE, PieceType.KING)
        board[make_square(0, 7, 1)] = Piece(Color.WHITE, PieceType.ROOK)
        outcome = submit_move(
            board, Color.WHITE, make_square(1, 5, 0), make_square(1, 1, 0)
        )
        assert outcome.status == GameStatus.checkmate(Color.WHITE)


class TestPromotionBoundary:
    def test_pending_then_complete(self) -> None:
        token = submit_move(_promotion_board(), Color.WHITE, PAWN_FROM, PAWN_TO)
        assert isinstance(token, PendingPromotion)
        outcome = complete_promotion(token, PieceType.QUEEN)
        assert outcome.board[PAWN_TO] == Piece(Color.WHITE, PieceType.QUEEN, True)

    def test_choice_given_upfront(self) -> None:
        outcome = submit_move(
            _promotion_board(), Color.WHITE, PAWN_FROM, PAWN_TO, PieceType.BISHOP
        )
        assert isinstance(outcome, MoveOutcome)
        assert outcome.board[PAWN_TO].piece_type == PieceType.BISHOP

    def test_bad_choice(self) -> None:
        token = submit_move(_promotion_board(), Color.WHITE, PAWN_FROM, PAWN_TO)
        with pytest.raises(IllegalMoveError):
            complete_promotion(token, PieceType.KING)

    def test_status_is_for_the_opponent_of_the_pawn(self) -> None:
        board = Board()
        board[PAWN_FROM] = Piece(Color.WHITE, PieceType.PAWN, True)
        board[make_square(0, 7, 0)] = Piece(Color.WHITE, PieceType.KING)
        board[make_square(3, 7, 7)] = Piece(Color.BLACK, PieceType.KING)
        token = submit_move(board, Color.WHITE, PAWN_FROM, PAWN_TO)
        assert isinstance(token, PendingPromotion)
        outcome = complete_promotion(token, PieceType.QUEEN)
        assert outcome.status == GameStatus.check(Color.BLACK)

    def test_black_promotion_checks_white(self) -> None:
        board = Board()
        board[make_square(3, 2, 1)] = Piece(Color.BLACK, PieceType.PAWN, True)
        board[make_square(3, 7, 0)] = Piece(Color.WHITE, PieceType.KING)
        board[make_square(7, 7, 7)] = Piece(Color.BLACK, PieceType.KING)
        token = submit_move(
            board, Color.BLACK, make_square(3, 2, 1), make_square(3, 2, 0)
        )
        assert isinstance(token, PendingPromotion)
        outcome = complete_promotion(token, PieceType.ROOK)
        assert outcome.status == GameStatus.check(Color.WHITE)

    def test_token_without_pawn(self) -> None:
        token = submit_move(_promotion_board(), Color.WHITE, PAWN_FROM, PAWN_TO)
        assert isinstance(token, PendingPromotion)
        token.board.remove(PAWN_FROM)
        with pytest.raises(InvariantViolation):
            complete_promotion(token, PieceType.QUEEN)

    def test_choice_on_normal_move(self, initial_board: Board) -> None:
        with pytest.raises(IllegalMoveError, match="does not promote"):
            submit_move(
                initial_board,
                Color.WHITE,
                make_square(4, 0, 1),
                make_square(4, 0, 2),
                PieceType.QUEEN,
            )


@pytest.mark.slow
@pytest.mark.parametrize("seed", [1, 7, 42])
def test_random_playout_keeps_invariants(seed: int) -> None:
    rng = random.Random(seed)
    board = Board.initial()
    side = Color.WHITE
    captured = 0
    for _ in range(120):
        status = Rules.game_status(board, side)
        if status.is_terminal:
            break
        moves = MoveGenerator(board).all_legal_moves(side)
        move = rng.choice(moves)
        result = submit_move(board, side, move.from_sq, move.to_sq)
        if isinstance(result, PendingPromotion):
            result = complete_promotion(result, rng.choice(PROMOTION_TYPES))
        if result.captured is not None:
            captured += 1
            assert result.captured.color == side.opposite
            assert result.captured.piece_type != PieceType.KING
        board = result.board
        assert not Rules.is_in_check(board, side)
        assert board.piece_count() == 32 - captured
        if result.status.kind == StatusKind.CHECK:
            assert result.status.color == side.opposite
        side = side.opposite
