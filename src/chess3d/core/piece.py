"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass, replace

from chess3d.core.enums import Color, PieceType

# Tags and glyphs in PieceType order; white tags are upper case.
_TAGS = {Color.WHITE: "PNBRQK", Color.BLACK: "pnbrqk"}
_GLYPHS = {Color.WHITE: "♙♘♗♖♕♔", Color.BLACK: "♟♞♝♜♛♚"}

_BY_TAG: dict[str, tuple[Color, PieceType]] = {
    tags[pt - 1]: (color, pt) for color, tags in _TAGS.items() for pt in PieceType
}

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece.

    The square a piece stands on is owned by the :class:`Board` cell holding
    it, so a piece carries only its identity and movement history.
    """

    color: Color
    piece_type: PieceType
    has_moved: bool = False

    # ── Tags ─────────────────────────────────────────────────────────────

    def __str__(self) -> str:
        """Tag character (uppercase = white, lowercase = black)."""
        return _TAGS[self.color][self.piece_type - 1]

    @classmethod
    def from_char(cls, char: str, has_moved: bool = False) -> Piece:
        """Create piece from tag character, e.g. 'N' → white knight."""
        try:
            color, ptype = _BY_TAG[char]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(color, ptype, has_moved)

    @property
    def symbol(self) -> str:
        """Unicode chess symbol, e.g. ♞."""
        return _GLYPHS[self.color][self.piece_type - 1]

    # ── Derived pieces ───────────────────────────────────────────────────

    def moved(self) -> Piece:
        """Same piece after its first relocation."""
        if self.has_moved:
            return self
        return replace(self, has_moved=True)

    def promoted(self, piece_type: PieceType) -> Piece:
        """Replacement for a promoting pawn (colour preserved)."""
        if piece_type not in PROMOTION_TYPES:
            raise ValueError(f"Cannot promote to {piece_type.name}")
        return Piece(self.color, piece_type, True)
