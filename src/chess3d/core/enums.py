"""Core enumerations for the volumetric chess domain."""

from __future__ import annotations

from enum import IntEnum


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class MoveFlag(IntEnum):
    """Special move classification."""

    NORMAL = 0
    DOUBLE_PAWN = 1
    CASTLE_KINGSIDE = 2
    CASTLE_QUEENSIDE = 3
    PROMOTION = 4


class CastleSide(IntEnum):
    """Direction of a castling move along the x axis."""

    KINGSIDE = 1  # towards file h
    QUEENSIDE = -1  # towards file a


class StatusKind(IntEnum):
    """Classification of a position for the side to move."""

    ACTIVE = 0
    CHECK = 1
    CHECKMATE = 2
    STALEMATE = 3
