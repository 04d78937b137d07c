"""Caller-owned session state: board, side to move, captures, status, phase."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from chess3d.config import VariantConfig
from chess3d.core import engine
from chess3d.core.board import Board
from chess3d.core.enums import Color, PieceType, StatusKind
from chess3d.core.errors import IllegalMoveError
from chess3d.core.executor import PendingPromotion
from chess3d.core.move import Move
from chess3d.core.move_generator import MoveGenerator
from chess3d.core.piece import Piece
from chess3d.core.rules import GameStatus, Rules
from chess3d.core.types import Square
from chess3d.game.interfaces import GamePhase


@dataclass
class MoveRecord:
    """A single entry in the move log."""

    move: Move
    piece: Piece
    captured: Piece | None
    status_after: GameStatus

    @property
    def was_capture(self) -> bool:
        return self.captured is not None

    @property
    def was_check(self) -> bool:
        return self.status_after.kind in (StatusKind.CHECK, StatusKind.CHECKMATE)


def _empty_captured() -> dict[Color, list[Piece]]:
    return {Color.WHITE: [], Color.BLACK: []}


@dataclass
class GameState:
    """Caller-owned game data. The rules engine itself keeps no state.

    ``captured`` is keyed by the colour of the pieces that were lost.
    Plain data and logic, with no threading or UI.
    """

    config: VariantConfig = field(default_factory=VariantConfig)
    board: Board = field(init=False)
    side_to_move: Color = field(default=Color.WHITE, init=False)
    status: GameStatus = field(default_factory=GameStatus.active, init=False)
    phase: GamePhase = field(default=GamePhase.NOT_STARTED, init=False)
    captured: dict[Color, list[Piece]] = field(
        default_factory=_empty_captured, init=False
    )
    pending_promotion: PendingPromotion | None = field(default=None, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.board = Board.initial(self.config.home_rank)

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        captured: dict[Color, list[Piece]] | None = None,
    ) -> None:
        """Initialise (or reset) the game."""
        self.board = (
            board.copy() if board is not None else Board.initial(self.config.home_rank)
        )
        self.side_to_move = side_to_move
        self.captured = _empty_captured()
        if captured:
            for color, pieces in captured.items():
                self.captured[color].extend(pieces)
        self.pending_promotion = None
        self.move_history.clear()
        self._refresh_status()

    # ── Move application ─────────────────────────────────────────────────

    def legal_destinations(self, sq: Square) -> set[Square]:
        """Destinations for the piece on *sq*; raises ``IllegalMoveError``."""
        self._ensure_accepting_moves()
        return engine.legal_destinations(self.board, self.side_to_move, sq)

    def apply_move(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> MoveRecord | PendingPromotion:
        """Validate and play a move.

        Returns the history record, or the pending token when the caller
        must still choose a promotion piece.
        """
        self._ensure_accepting_moves()
        if promotion is not None:
            self._check_choice(promotion)

        piece = self.board[from_sq]
        outcome = engine.submit_move(
            self.board, self.side_to_move, from_sq, to_sq, promotion
        )
        if isinstance(outcome, PendingPromotion):
            token = replace(outcome, choices=self.config.promotion_choices)
            self.pending_promotion = token
            self.phase = GamePhase.AWAITING_PROMOTION
            return token

        assert piece is not None
        return self._commit(outcome, piece)

    def resolve_promotion(self, piece_type: PieceType) -> MoveRecord:
        """Finish the pending promotion with *piece_type*."""
        token = self.pending_promotion
        if token is None:
            raise IllegalMoveError("No promotion is pending")
        self._check_choice(piece_type)

        piece = token.board[token.move.from_sq]
        outcome = engine.complete_promotion(token, piece_type)
        self.pending_promotion = None
        assert piece is not None
        return self._commit(outcome, piece)

    def cancel_promotion(self) -> None:
        """Drop a pending promotion; the board was never changed."""
        if self.pending_promotion is not None:
            self.pending_promotion = None
            self.phase = GamePhase.AWAITING_MOVE

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    @property
    def king_in_check(self) -> Color | None:
        """Side whose king is attacked, if any."""
        if self.status.kind in (StatusKind.CHECK, StatusKind.CHECKMATE):
            return self.side_to_move
        return None

    def legal_moves(self) -> list[Move]:
        """Legal moves for every piece of the side to move."""
        return MoveGenerator(self.board).all_legal_moves(self.side_to_move)

    # ── Internal ─────────────────────────────────────────────────────────

    def _ensure_accepting_moves(self) -> None:
        if self.phase == GamePhase.NOT_STARTED:
            raise IllegalMoveError("Game has not started")
        if self.phase == GamePhase.GAME_OVER:
            raise IllegalMoveError(f"Game is over ({self.status})")
        if self.phase == GamePhase.AWAITING_PROMOTION:
            raise IllegalMoveError("A promotion choice is pending")

    def _check_choice(self, piece_type: PieceType) -> None:
        if piece_type not in self.config.promotion_choices:
            raise IllegalMoveError(f"Cannot promote to {piece_type.name}")

    def _commit(self, outcome: engine.MoveOutcome, piece: Piece) -> MoveRecord:
        self.board = outcome.board
        if outcome.captured is not None:
            self.captured[outcome.captured.color].append(outcome.captured)
        self.side_to_move = self.side_to_move.opposite
        self.status = outcome.status
        self.phase = (
            GamePhase.GAME_OVER if self.status.is_terminal else GamePhase.AWAITING_MOVE
        )

        record = MoveRecord(
            move=outcome.move,
            piece=piece,
            captured=outcome.captured,
            status_after=outcome.status,
        )
        self.move_history.append(record)
        return record

    def _refresh_status(self) -> None:
        self.status = Rules.game_status(self.board, self.side_to_move)
        self.phase = (
            GamePhase.GAME_OVER if self.status.is_terminal else GamePhase.AWAITING_MOVE
        )
