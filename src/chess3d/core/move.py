"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from chess3d.core.enums import CastleSide, MoveFlag, PieceType
from chess3d.core.types import Square, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single move.

    A ``PROMOTION`` move produced by the generator has ``promotion=None``;
    the piece type is chosen by the caller before the move is finalised.
    """

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None
    capture: bool = False

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def castle(self) -> CastleSide | None:
        if self.flag == MoveFlag.CASTLE_KINGSIDE:
            return CastleSide.KINGSIDE
        if self.flag == MoveFlag.CASTLE_QUEENSIDE:
            return CastleSide.QUEENSIDE
        return None

    @property
    def is_promotion(self) -> bool:
        return self.flag == MoveFlag.PROMOTION

    def with_promotion(self, piece_type: PieceType) -> Move:
        """Same move with the promotion choice resolved."""
        return Move(self.from_sq, self.to_sq, self.flag, piece_type, self.capture)

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        sep = "x" if self.capture else "-"
        base = f"{square_name(self.from_sq)}{sep}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += "=" + _PROMO_CHARS.get(self.promotion, "")
        return base
