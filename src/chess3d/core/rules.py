"""High-level rules: check, checkmate and stalemate classification."""

from __future__ import annotations

from dataclasses import dataclass

from chess3d.core.board import Board
from chess3d.core.enums import Color, PieceType, StatusKind
from chess3d.core.move_generator import MoveGenerator


@dataclass(frozen=True, slots=True)
class GameStatus:
    """Classification of a position for the side about to move.

    ``color`` is the side in check for ``CHECK`` and the winner for
    ``CHECKMATE``; it is ``None`` otherwise.
    """

    kind: StatusKind
    color: Color | None = None

    @classmethod
    def active(cls) -> GameStatus:
        return cls(StatusKind.ACTIVE)

    @classmethod
    def check(cls, color: Color) -> GameStatus:
        return cls(StatusKind.CHECK, color)

    @classmethod
    def checkmate(cls, winner: Color) -> GameStatus:
        return cls(StatusKind.CHECKMATE, winner)

    @classmethod
    def stalemate(cls) -> GameStatus:
        return cls(StatusKind.STALEMATE)

    @property
    def is_terminal(self) -> bool:
        return self.kind in (StatusKind.CHECKMATE, StatusKind.STALEMATE)

    def __str__(self) -> str:
        if self.color is None:
            return self.kind.name.lower()
        return f"{self.kind.name.lower()}({self.color})"


class Rules:
    """Static rule-checker that operates on a :class:`Board` and side to move."""

    @staticmethod
    def is_in_check(board: Board, color: Color) -> bool:
        return MoveGenerator(board).is_in_check(color)

    @staticmethod
    def has_legal_move(board: Board, color: Color) -> bool:
        return MoveGenerator(board).has_legal_move(color)

    @staticmethod
    def is_checkmate(board: Board, color: Color) -> bool:
        gen = MoveGenerator(board)
        return gen.is_in_check(color) and not gen.has_legal_move(color)

    @staticmethod
    def is_stalemate(board: Board, color: Color) -> bool:
        gen = MoveGenerator(board)
        return not gen.is_in_check(color) and not gen.has_legal_move(color)

    @staticmethod
    def is_insufficient_material(board: Board) -> bool:
        """Only the two kings remain. Informational; never ends the game."""
        return board.piece_count() == 2 and all(
            board.has_piece(color, PieceType.KING) for color in Color
        )

    @staticmethod
    def game_status(board: Board, side_to_move: Color) -> GameStatus:
        """Classify the position, considering every piece of *side_to_move*."""
        gen = MoveGenerator(board)
        in_check = gen.is_in_check(side_to_move)
        any_legal = gen.has_legal_move(side_to_move)

        if not any_legal:
            if in_check:
                return GameStatus.checkmate(side_to_move.opposite)
            return GameStatus.stalemate()
        if in_check:
            return GameStatus.check(side_to_move)
        return GameStatus.active()
