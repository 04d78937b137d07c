"""Board - piece placement on an 8x8x8 lattice."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from chess3d.core.enums import Color, PieceType
from chess3d.core.piece import Piece
from chess3d.core.types import BOARD_SIZE, SQUARE_COUNT, Square, make_square

BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

_KINDS: tuple[tuple[Color, PieceType], ...] = tuple(
    (color, pt) for color in Color for pt in PieceType
)


def bit_squares(bits: int) -> list[Square]:
    """Squares of the set bits of *bits*, lowest first."""
    out: list[Square] = []
    while bits:
        low = bits & -bits
        out.append(low.bit_length() - 1)
        bits ^= low
    return out


class Board:
    """Mutable 512-cell occupancy store with incremental piece indexes.

    Each cell holds at most one :class:`Piece`. Alongside the cells the board
    keeps an int bitset per (colour, type), one per colour and the square of
    each king, all updated on every write. No rule validation happens here.
    """

    __slots__ = ("_cells", "_kind_bits", "_side_bits", "_kings")

    def __init__(self) -> None:
        self._cells: list[Piece | None] = [None] * SQUARE_COUNT
        self._kind_bits: dict[tuple[Color, PieceType], int] = dict.fromkeys(_KINDS, 0)
        self._side_bits: list[int] = [0, 0]
        self._kings: list[Square | None] = [None, None]

    def _unindex(self, sq: Square, piece: Piece) -> None:
        clear = ~(1 << sq)
        self._kind_bits[piece.color, piece.piece_type] &= clear
        self._side_bits[piece.color] &= clear
        if piece.piece_type == PieceType.KING and self._kings[piece.color] == sq:
            self._kings[piece.color] = None

    def _index(self, sq: Square, piece: Piece) -> None:
        bit = 1 << sq
        self._kind_bits[piece.color, piece.piece_type] |= bit
        self._side_bits[piece.color] |= bit
        if piece.piece_type == PieceType.KING:
            self._kings[piece.color] = sq

    # -- Cell access ---------------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._cells[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        current = self._cells[sq]
        if current == piece:
            return
        if current is not None:
            self._unindex(sq, current)
        self._cells[sq] = piece
        if piece is not None:
            self._index(sq, piece)

    get = __getitem__

    def place(self, sq: Square, piece: Piece) -> None:
        """Put *piece* on *sq*, replacing any occupant."""
        self[sq] = piece

    def remove(self, sq: Square) -> Piece | None:
        """Empty *sq* and return the piece that stood there."""
        piece = self._cells[sq]
        if piece is not None:
            self[sq] = None
        return piece

    def is_empty(self, sq: Square) -> bool:
        return self._cells[sq] is None

    # -- Queries -------------------------------------------------------------

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        return self._kind_bits[color, piece_type]

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        return bit_squares(self._kind_bits[color, piece_type])

    def has_piece(self, color: Color, piece_type: PieceType) -> bool:
        return self._kind_bits[color, piece_type] != 0

    def all_pieces_bitboard(self, color: Color) -> int:
        return self._side_bits[color]

    def all_pieces(self, color: Color) -> list[Square]:
        """Squares holding a *color* piece, in square order."""
        return bit_squares(self._side_bits[color])

    def occupied(self) -> Iterator[tuple[Square, Piece]]:
        """Iterate ``(square, piece)`` pairs in square order."""
        cells = self._cells
        for sq in bit_squares(self._side_bits[0] | self._side_bits[1]):
            yield sq, cells[sq]  # type: ignore[misc]

    def piece_count(self) -> int:
        return (self._side_bits[0] | self._side_bits[1]).bit_count()

    def king_square(self, color: Color) -> Square:
        sq = self._kings[color]
        if sq is None:
            raise ValueError(f"No {color.name} king on board")
        return sq

    # -- Copying / reset -----------------------------------------------------

    def copy(self) -> Board:
        """Structural clone; pieces are immutable and shared."""
        twin = Board.__new__(Board)
        twin._cells = self._cells[:]
        twin._kind_bits = dict(self._kind_bits)
        twin._side_bits = self._side_bits[:]
        twin._kings = self._kings[:]
        return twin

    def clear(self) -> None:
        Board.__init__(self)

    # -- Construction --------------------------------------------------------

    @classmethod
    def initial(cls, home_rank: int = 0) -> Board:
        """Starting position: home layers z=0 (white) and z=7 (black).

        Back ranks run along x at ``y=home_rank``; pawns stand on the
        adjacent layers z=1 and z=6. Every other cell is empty.
        """
        if not 0 <= home_rank < BOARD_SIZE:
            raise ValueError(f"home_rank out of range: {home_rank}")
        board = cls()
        for x, pt in enumerate(BACK_RANK):
            board[make_square(x, home_rank, 0)] = Piece(Color.WHITE, pt)
            board[make_square(x, home_rank, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            board[make_square(x, home_rank, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            board[make_square(x, home_rank, 7)] = Piece(Color.BLACK, pt)
        return board

    @classmethod
    def from_pieces(cls, placement: Mapping[Square, Piece]) -> Board:
        board = cls()
        for sq, piece in placement.items():
            board[sq] = piece
        return board

    # -- Dunder helpers ------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        blocks = []
        for z in reversed(range(BOARD_SIZE)):
            lines = [f"layer {z + 1}"]
            for y in reversed(range(BOARD_SIZE)):
                row = [self._cells[make_square(x, y, z)] for x in range(BOARD_SIZE)]
                tags = " ".join(str(p) if p else "." for p in row)
                lines.append(f"{y + 1} {tags}")
            lines.append("  a b c d e f g h")
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks)
