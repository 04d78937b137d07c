"""Move execution and the two-phase promotion protocol."""

from __future__ import annotations

from dataclasses import dataclass

from chess3d.core.board import Board
from chess3d.core.enums import Color, MoveFlag, PieceType
from chess3d.core.errors import InvariantViolation
from chess3d.core.move import Move
from chess3d.core.piece import PROMOTION_TYPES, Piece
from chess3d.core.types import (
    BOARD_SIZE,
    Square,
    file_of,
    layer_of,
    make_square,
    rank_of,
    square_name,
)

# Pawns advance along z: white towards layer 7, black towards layer 0.
PAWN_DIRECTION: tuple[int, int] = (1, -1)
PAWN_START_LAYER: tuple[int, int] = (1, BOARD_SIZE - 2)
PROMOTION_LAYER: tuple[int, int] = (BOARD_SIZE - 1, 0)


def is_promotion_square(color: Color, sq: Square) -> bool:
    """Whether a *color* pawn arriving on *sq* must promote."""
    return layer_of(sq) == PROMOTION_LAYER[int(color)]


def castle_rook_squares(move: Move) -> tuple[Square, Square]:
    """``(rook_from, rook_to)`` for a castling *move*.

    The rook starts on the board edge of the king's line and ends on the
    cell the king passed over.
    """
    side = move.castle
    if side is None:
        raise ValueError(f"Not a castling move: {move}")
    y = rank_of(move.from_sq)
    z = layer_of(move.from_sq)
    rook_x = BOARD_SIZE - 1 if side > 0 else 0
    rook_to_x = file_of(move.to_sq) - int(side)
    return make_square(rook_x, y, z), make_square(rook_to_x, y, z)


# ── Result objects ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Successor board plus the piece removed by the move, if any."""

    board: Board
    move: Move
    captured: Piece | None = None


@dataclass(frozen=True, slots=True)
class PendingPromotion:
    """Deferred move awaiting the caller's promotion choice.

    ``board`` is the untouched pre-move board; pass the token to
    :func:`resolve_promotion` to finish the move.
    """

    board: Board
    move: Move
    choices: tuple[PieceType, ...] = PROMOTION_TYPES


# ── Board-level application ─────────────────────────────────────────────────


def apply_in_place(board: Board, move: Move) -> Piece | None:
    """Apply every side effect of *move* to *board*; return the captured piece.

    Used on scratch copies by the legality filter and by :func:`apply_move`.
    An unresolved promotion leaves the (moved) pawn on the destination.
    """
    piece = board[move.from_sq]
    if piece is None:
        raise InvariantViolation(f"No piece on {square_name(move.from_sq)}")

    board[move.from_sq] = None
    captured = board.remove(move.to_sq)

    placed = piece.moved()
    if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
        placed = piece.promoted(move.promotion)
    board[move.to_sq] = placed

    if move.castle is not None:
        rook_from, rook_to = castle_rook_squares(move)
        rook = board.remove(rook_from)
        if rook is None or rook.piece_type != PieceType.ROOK:
            raise InvariantViolation(
                f"No castling rook on {square_name(rook_from)} for {move}"
            )
        board[rook_to] = rook.moved()

    return captured


def apply_move(board: Board, move: Move) -> MoveResult:
    """Apply an already-legal, fully resolved *move* to a copy of *board*."""
    if move.flag == MoveFlag.PROMOTION and move.promotion is None:
        raise ValueError(f"Promotion choice required for {move}")
    successor = board.copy()
    captured = apply_in_place(successor, move)
    return MoveResult(board=successor, move=move, captured=captured)


def propose_move(board: Board, move: Move) -> MoveResult | PendingPromotion:
    """First phase: finish *move* or defer it until a promotion is chosen."""
    piece = board[move.from_sq]
    if piece is None:
        raise InvariantViolation(f"No piece on {square_name(move.from_sq)}")

    if (
        piece.piece_type == PieceType.PAWN
        and is_promotion_square(piece.color, move.to_sq)
        and move.promotion is None
    ):
        if move.flag != MoveFlag.PROMOTION:
            move = Move(
                move.from_sq, move.to_sq, MoveFlag.PROMOTION, None, move.capture
            )
        return PendingPromotion(board=board, move=move)

    return apply_move(board, move)


def resolve_promotion(token: PendingPromotion, piece_type: PieceType) -> MoveResult:
    """Second phase: complete a deferred move with the chosen *piece_type*."""
    if piece_type not in token.choices:
        raise ValueError(f"Cannot promote to {piece_type.name}")
    return apply_move(token.board, token.move.with_promotion(piece_type))
