"""Legal and pseudo-legal move generation + attack detection in three axes."""

from __future__ import annotations

from itertools import permutations, product

from chess3d.core.board import Board, bit_squares
from chess3d.core.enums import CastleSide, Color, MoveFlag, PieceType
from chess3d.core.errors import InvariantViolation
from chess3d.core.executor import (
    PAWN_DIRECTION,
    PAWN_START_LAYER,
    PROMOTION_LAYER,
    apply_in_place,
)
from chess3d.core.move import Move
from chess3d.core.types import (
    BOARD_SIZE,
    SQUARE_COUNT,
    Square,
    coord_of,
    is_valid_coord,
    make_square,
)

Offset = tuple[int, int, int]

# Move 2 along one axis and 1 along another: 4 sign pairs x 6 orderings.
KNIGHT_OFFSETS: tuple[Offset, ...] = tuple(
    sorted(
        {
            offset
            for a, b in product((-2, 2), (-1, 1))
            for offset in permutations((a, b, 0))
        }
    )
)

KING_OFFSETS: tuple[Offset, ...] = tuple(
    d for d in product((-1, 0, 1), repeat=3) if d != (0, 0, 0)
)

ROOK_DIRS: tuple[Offset, ...] = (
    (-1, 0, 0),
    (1, 0, 0),
    (0, -1, 0),
    (0, 1, 0),
    (0, 0, -1),
    (0, 0, 1),
)
# Planar diagonals only: exactly two non-zero components.
BISHOP_DIRS: tuple[Offset, ...] = tuple(
    d for d in product((-1, 0, 1), repeat=3) if sum(c != 0 for c in d) == 2
)
QUEEN_DIRS: tuple[Offset, ...] = BISHOP_DIRS + ROOK_DIRS

_COLOR_OPPOSITE: tuple[Color, Color] = (Color.BLACK, Color.WHITE)


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(offsets: tuple[Offset, ...]) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(SQUARE_COUNT):
        x, y, z = coord_of(sq)
        moves: list[Square] = []
        for dx, dy, dz in offsets:
            ax, ay, az = x + dx, y + dy, z + dz
            if is_valid_coord(ax, ay, az):
                moves.append(make_square(ax, ay, az))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_attack_masks(targets: tuple[tuple[Square, ...], ...]) -> tuple[int, ...]:
    masks: list[int] = [0] * SQUARE_COUNT
    for sq in range(SQUARE_COUNT):
        mask = 0
        for to_sq in targets[sq]:
            mask |= 1 << to_sq
        masks[sq] = mask
    return tuple(masks)


def _build_pawn_captures() -> tuple[tuple[tuple[Square, ...], ...], ...]:
    """[color][sq] -> squares a pawn standing on sq may capture on."""
    per_color: list[tuple[tuple[Square, ...], ...]] = []
    for color in Color:
        dz = PAWN_DIRECTION[int(color)]
        per_square = [
            tuple(
                make_square(x + dx, y, z + dz)
                for dx in (-1, 1)
                if is_valid_coord(x + dx, y, z + dz)
            )
            for x, y, z in map(coord_of, range(SQUARE_COUNT))
        ]
        per_color.append(tuple(per_square))
    return tuple(per_color)


def _build_pawn_attacker_masks() -> tuple[tuple[int, ...], tuple[int, ...]]:
    """[color][sq] -> bitset of squares from which a color pawn hits sq."""
    masks: list[list[int]] = [[0] * SQUARE_COUNT, [0] * SQUARE_COUNT]
    for color in Color:
        for from_sq, hits in enumerate(_PAWN_CAPTURES[int(color)]):
            for to_sq in hits:
                masks[int(color)][to_sq] |= 1 << from_sq
    return (tuple(masks[0]), tuple(masks[1]))


def _build_rays(
    directions: tuple[Offset, ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(SQUARE_COUNT):
        x, y, z = coord_of(sq)
        square_rays: list[tuple[Square, ...]] = []
        for dx, dy, dz in directions:
            ax, ay, az = x + dx, y + dy, z + dz
            ray: list[Square] = []
            while is_valid_coord(ax, ay, az):
                ray.append(make_square(ax, ay, az))
                ax += dx
                ay += dy
                az += dz
            if ray:
                square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_KNIGHT_ATTACK_MASKS = _build_attack_masks(_KNIGHT_TARGETS)
_KING_ATTACK_MASKS = _build_attack_masks(_KING_TARGETS)
_PAWN_CAPTURES = _build_pawn_captures()
_PAWN_ATTACKER_MASKS = _build_pawn_attacker_masks()

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_DIAGONAL_SLIDERS = (PieceType.BISHOP, PieceType.QUEEN)
_AXIAL_SLIDERS = (PieceType.ROOK, PieceType.QUEEN)


class MoveGenerator:
    """Generates moves for the pieces of a :class:`Board`.

    The generator never mutates its board; legality is decided by applying
    each candidate to a scratch copy and inspecting the mover's king there.
    """

    __slots__ = ("_board",)

    def __init__(self, board: Board) -> None:
        self._board = board

    # -- Public API ---------------------------------------------------------

    def legal_moves(self, sq: Square) -> list[Move]:
        """Strictly legal moves of the piece on *sq* (castling included)."""
        piece = self._board[sq]
        if piece is None:
            return []

        candidates = self.pseudo_legal_moves(sq)
        if piece.piece_type == PieceType.KING:
            self._gen_castling(sq, piece.color, candidates)
        return [m for m in candidates if self._is_safe(m, piece.color)]

    def all_legal_moves(self, color: Color) -> list[Move]:
        """All strictly legal moves for every piece of *color*."""
        legal: list[Move] = []
        for sq in self._board.all_pieces(color):
            legal.extend(self.legal_moves(sq))
        return legal

    def has_legal_move(self, color: Color) -> bool:
        """Whether any piece of *color* has at least one legal move."""
        return any(self.legal_moves(sq) for sq in self._board.all_pieces(color))

    def pseudo_legal_moves(self, sq: Square) -> list[Move]:
        """Moves of the piece on *sq* that may leave its own king in check.

        Castling is not included; it needs attack information and is added
        by :meth:`legal_moves`.
        """
        piece = self._board[sq]
        if piece is None:
            return []

        moves: list[Move] = []
        color = piece.color
        pt = piece.piece_type
        if pt == PieceType.PAWN:
            self._gen_pawn(sq, color, not piece.has_moved, moves)
        elif pt == PieceType.KNIGHT:
            self._gen_jumps(sq, color, _KNIGHT_TARGETS[sq], moves)
        elif pt == PieceType.BISHOP:
            self._gen_sliding(sq, color, _BISHOP_RAYS[sq], moves)
        elif pt == PieceType.ROOK:
            self._gen_sliding(sq, color, _ROOK_RAYS[sq], moves)
        elif pt == PieceType.QUEEN:
            self._gen_sliding(sq, color, _QUEEN_RAYS[sq], moves)
        else:
            self._gen_jumps(sq, color, _KING_TARGETS[sq], moves)
        return moves

    def all_pseudo_legal_moves(self, color: Color) -> list[Move]:
        """All pseudo-legal moves for *color*."""
        moves: list[Move] = []
        for sq in self._board.all_pieces(color):
            moves.extend(self.pseudo_legal_moves(sq))
        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        try:
            king_sq = self._board.king_square(color)
        except ValueError as exc:
            raise InvariantViolation(str(exc)) from exc
        return self.is_square_attacked(king_sq, _COLOR_OPPOSITE[int(color)])

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?

        Occupancy of *sq* is ignored, so a square holding one of *by_color*'s
        own pieces reports true when that piece is defended.
        """
        board = self._board
        by_idx = int(by_color)

        if (
            board.pieces_bitboard(by_color, PieceType.PAWN)
            & _PAWN_ATTACKER_MASKS[by_idx][sq]
        ):
            return True

        if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_ATTACK_MASKS[sq]:
            return True

        if board.pieces_bitboard(by_color, PieceType.KING) & _KING_ATTACK_MASKS[sq]:
            return True

        queens = board.has_piece(by_color, PieceType.QUEEN)
        if queens or board.has_piece(by_color, PieceType.BISHOP):
            if self._ray_hit(sq, by_color, _BISHOP_RAYS[sq], _DIAGONAL_SLIDERS):
                return True

        if queens or board.has_piece(by_color, PieceType.ROOK):
            if self._ray_hit(sq, by_color, _ROOK_RAYS[sq], _AXIAL_SLIDERS):
                return True

        return False

    def attackers_of(self, sq: Square, by_color: Color) -> list[Square]:
        """Squares of every *by_color* piece attacking *sq*."""
        board = self._board
        by_idx = int(by_color)
        mask = (
            board.pieces_bitboard(by_color, PieceType.PAWN)
            & _PAWN_ATTACKER_MASKS[by_idx][sq]
        )
        knights = board.pieces_bitboard(by_color, PieceType.KNIGHT)
        mask |= knights & _KNIGHT_ATTACK_MASKS[sq]
        mask |= board.pieces_bitboard(by_color, PieceType.KING) & _KING_ATTACK_MASKS[sq]
        for rays, kinds in (
            (_BISHOP_RAYS[sq], _DIAGONAL_SLIDERS),
            (_ROOK_RAYS[sq], _AXIAL_SLIDERS),
        ):
            for ray in rays:
                for to_sq in ray:
                    piece = board[to_sq]
                    if piece is None:
                        continue
                    if piece.color == by_color and piece.piece_type in kinds:
                        mask |= 1 << to_sq
                    break
        return bit_squares(mask)

    # -- Legality ----------------------------------------------------------

    def _is_safe(self, move: Move, color: Color) -> bool:
        scratch = self._board.copy()
        apply_in_place(scratch, move)
        return not MoveGenerator(scratch).is_in_check(color)

    def _ray_hit(
        self,
        sq: Square,
        by_color: Color,
        rays: tuple[tuple[Square, ...], ...],
        kinds: tuple[PieceType, ...],
    ) -> bool:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                piece = board[to_sq]
                if piece is None:
                    continue
                if piece.color == by_color and piece.piece_type in kinds:
                    return True
                break
        return False

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(
        self, sq: Square, color: Color, unmoved: bool, moves: list[Move]
    ) -> None:
        board = self._board
        x, y, z = coord_of(sq)
        idx = int(color)
        dz = PAWN_DIRECTION[idx]
        last_layer = PROMOTION_LAYER[idx]

        def flag_for(to_z: int) -> MoveFlag:
            return MoveFlag.PROMOTION if to_z == last_layer else MoveFlag.NORMAL

        one_z = z + dz
        if 0 <= one_z < BOARD_SIZE:
            one_step = make_square(x, y, one_z)
            if board.is_empty(one_step):
                moves.append(Move(sq, one_step, flag_for(one_z)))
                two_z = one_z + dz
                if unmoved and z == PAWN_START_LAYER[idx] and 0 <= two_z < BOARD_SIZE:
                    two_step = make_square(x, y, two_z)
                    if board.is_empty(two_step):
                        moves.append(Move(sq, two_step, MoveFlag.DOUBLE_PAWN))

        for cap_sq in _PAWN_CAPTURES[idx][sq]:
            target = board[cap_sq]
            if target is not None and target.color != color:
                moves.append(Move(sq, cap_sq, flag_for(one_z), capture=True))

    def _gen_jumps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None:
                moves.append(Move(sq, to_sq))
            elif target.color != color:
                moves.append(Move(sq, to_sq, capture=True))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq, capture=True))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        king = board[king_sq]
        if king is None or king.has_moved or self.is_in_check(color):
            return

        opponent = _COLOR_OPPOSITE[int(color)]
        x, y, z = coord_of(king_sq)

        for side, flag in (
            (CastleSide.KINGSIDE, MoveFlag.CASTLE_KINGSIDE),
            (CastleSide.QUEENSIDE, MoveFlag.CASTLE_QUEENSIDE),
        ):
            step = int(side)
            rook_x = BOARD_SIZE - 1 if step > 0 else 0
            if abs(rook_x - x) < 3:
                continue

            rook = board[make_square(rook_x, y, z)]
            if (
                rook is None
                or rook.color != color
                or rook.piece_type != PieceType.ROOK
                or rook.has_moved
            ):
                continue

            if any(
                not board.is_empty(make_square(bx, y, z))
                for bx in range(x + step, rook_x, step)
            ):
                continue

            pass_sq = make_square(x + step, y, z)
            dest_sq = make_square(x + 2 * step, y, z)
            if self.is_square_attacked(pass_sq, opponent) or self.is_square_attacked(
                dest_sq, opponent
            ):
                continue

            moves.append(Move(king_sq, dest_sq, flag))
