"""Core domain layer: pure 3D chess logic with zero external dependencies.

Quick start::

    from chess3d.core import Board, Color, MoveGenerator, Rules, make_square

    board = Board.initial()
    gen = MoveGenerator(board)
    for move in gen.all_legal_moves(Color.WHITE):
        print(move)
    print(Rules.game_status(board, Color.WHITE))
"""

from chess3d.core.board import Board
from chess3d.core.engine import (
    MoveOutcome,
    complete_promotion,
    legal_destinations,
    legal_moves,
    submit_move,
)
from chess3d.core.enums import CastleSide, Color, MoveFlag, PieceType, StatusKind
from chess3d.core.errors import Chess3DError, IllegalMoveError, InvariantViolation
from chess3d.core.executor import (
    MoveResult,
    PendingPromotion,
    apply_move,
    propose_move,
    resolve_promotion,
)
from chess3d.core.move import Move
from chess3d.core.move_generator import MoveGenerator
from chess3d.core.piece import PROMOTION_TYPES, Piece
from chess3d.core.rules import GameStatus, Rules
from chess3d.core.types import (
    Coord,
    Square,
    coord_of,
    file_of,
    layer_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastleSide",
    "Color",
    "MoveFlag",
    "PieceType",
    "StatusKind",
    # Types / helpers
    "Coord",
    "Square",
    "coord_of",
    "file_of",
    "layer_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "GameStatus",
    "Move",
    "MoveGenerator",
    "PROMOTION_TYPES",
    "Piece",
    "Rules",
    # Execution
    "MoveResult",
    "PendingPromotion",
    "apply_move",
    "propose_move",
    "resolve_promotion",
    # Boundary
    "MoveOutcome",
    "complete_promotion",
    "legal_destinations",
    "legal_moves",
    "submit_move",
    # Errors
    "Chess3DError",
    "IllegalMoveError",
    "InvariantViolation",
]
