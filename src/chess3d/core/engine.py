"""Request/command boundary used by UI and session collaborators.

Every function takes the caller's current board and returns fresh objects;
the board passed in is never modified.
"""

from __future__ import annotations

from dataclasses import dataclass

from chess3d.core.board import Board
from chess3d.core.enums import Color, PieceType
from chess3d.core.errors import IllegalMoveError, InvariantViolation
from chess3d.core.executor import (
    MoveResult,
    PendingPromotion,
    propose_move,
    resolve_promotion,
)
from chess3d.core.move import Move
from chess3d.core.move_generator import MoveGenerator
from chess3d.core.piece import Piece
from chess3d.core.rules import GameStatus, Rules
from chess3d.core.types import Square, square_name


@dataclass(frozen=True, slots=True)
class MoveOutcome:
    """Completed move: successor board, captured piece and next status."""

    board: Board
    move: Move
    captured: Piece | None
    status: GameStatus


def _checked_piece(
    board: Board, side_to_move: Color, sq: Square, piece: Piece | None
) -> Piece:
    occupant = board[sq]
    if piece is not None and occupant != piece:
        raise InvariantViolation(
            f"{piece!s} is not on {square_name(sq)} (found {occupant!s})"
        )
    if occupant is None:
        raise IllegalMoveError(f"No piece on {square_name(sq)}")
    if occupant.color != side_to_move:
        raise IllegalMoveError(
            f"{square_name(sq)} holds a {occupant.color} piece; {side_to_move} to move"
        )
    return occupant


def legal_moves(
    board: Board, side_to_move: Color, sq: Square, piece: Piece | None = None
) -> list[Move]:
    """Legal moves of the selected piece."""
    _checked_piece(board, side_to_move, sq, piece)
    return MoveGenerator(board).legal_moves(sq)


def legal_destinations(
    board: Board, side_to_move: Color, sq: Square, piece: Piece | None = None
) -> set[Square]:
    """Destination squares to highlight for the selected piece."""
    return {m.to_sq for m in legal_moves(board, side_to_move, sq, piece)}


def _finish(result: MoveResult, side_to_move: Color) -> MoveOutcome:
    return MoveOutcome(
        board=result.board,
        move=result.move,
        captured=result.captured,
        status=Rules.game_status(result.board, side_to_move.opposite),
    )


def submit_move(
    board: Board,
    side_to_move: Color,
    from_sq: Square,
    to_sq: Square,
    promotion: PieceType | None = None,
    piece: Piece | None = None,
) -> MoveOutcome | PendingPromotion:
    """Validate and execute a move, or defer it pending a promotion choice."""
    for candidate in legal_moves(board, side_to_move, from_sq, piece):
        if candidate.to_sq == to_sq:
            move = candidate
            break
    else:
        raise IllegalMoveError(
            f"{square_name(from_sq)} -> {square_name(to_sq)} is not legal"
        )

    if promotion is not None:
        if not move.is_promotion:
            raise IllegalMoveError(f"{move} does not promote")
        token = propose_move(board, move)
        assert isinstance(token, PendingPromotion)
        return complete_promotion(token, promotion)

    result = propose_move(board, move)
    if isinstance(result, PendingPromotion):
        return result
    return _finish(result, side_to_move)


def complete_promotion(token: PendingPromotion, piece_type: PieceType) -> MoveOutcome:
    """Finish a deferred promotion with the chosen *piece_type*.

    The mover is the owner of the pawn on the token's source square; the
    returned status is evaluated for the other side.
    """
    pawn = token.board[token.move.from_sq]
    if pawn is None:
        raise InvariantViolation(
            f"No piece on {square_name(token.move.from_sq)} for pending {token.move}"
        )
    try:
        result = resolve_promotion(token, piece_type)
    except ValueError as exc:
        raise IllegalMoveError(str(exc)) from exc
    return _finish(result, pawn.color)
