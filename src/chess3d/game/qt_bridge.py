"""Qt bridge exposing a game session to a rendering/UI layer."""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from chess3d.core.enums import PieceType
from chess3d.core.executor import PendingPromotion
from chess3d.core.rules import GameStatus
from chess3d.game.controller import GameController
from chess3d.game.state import GameState, MoveRecord


class GameBridge(QObject):
    """Thread-affine adapter that turns controller callbacks into signals.

    The UI never touches engine state directly: it calls the slots and
    redraws from the emitted board snapshots and target sets.
    """

    legal_targets = pyqtSignal(int, object)  # square, set[Square]
    move_applied = pyqtSignal(object, object)  # MoveRecord, Board
    promotion_pending = pyqtSignal(int, int, object)  # from, to, choices
    status_changed = pyqtSignal(object)  # GameStatus
    move_rejected = pyqtSignal(int, int, str)  # from, to, reason

    def __init__(self, controller: GameController | None = None) -> None:
        super().__init__()
        self._controller = controller if controller is not None else GameController()
        events = self._controller.events
        events.on_move.append(self._on_move)
        events.on_promotion_pending.append(self._on_promotion_pending)
        events.on_status_changed.append(self._on_status_changed)

    @property
    def controller(self) -> GameController:
        return self._controller

    @pyqtSlot()
    def new_game(self) -> None:
        self._controller.new_game()

    @pyqtSlot(int)
    def select(self, sq: int) -> None:
        """Emit the legal destinations of the piece on *sq*."""
        self.legal_targets.emit(sq, self._controller.select(sq))

    @pyqtSlot(int, int)
    def submit(self, from_sq: int, to_sq: int) -> None:
        if not self._controller.submit_move(from_sq, to_sq):
            self.move_rejected.emit(from_sq, to_sq, self._controller.last_error or "")

    @pyqtSlot(int)
    def promote(self, piece_type: int) -> None:
        """Resolve the pending promotion with the chosen piece type value."""
        pending = self._controller.state.pending_promotion
        try:
            choice = PieceType(piece_type)
        except ValueError:
            choice = None
        if choice is None or not self._controller.resolve_promotion(choice):
            from_sq = pending.move.from_sq if pending is not None else -1
            to_sq = pending.move.to_sq if pending is not None else -1
            reason = self._controller.last_error or f"Invalid piece type {piece_type}"
            self.move_rejected.emit(from_sq, to_sq, reason)

    # ── Controller callbacks ─────────────────────────────────────────────

    def _on_move(self, record: MoveRecord, state: GameState) -> None:
        self.move_applied.emit(record, state.board.copy())

    def _on_promotion_pending(self, token: PendingPromotion) -> None:
        self.promotion_pending.emit(token.move.from_sq, token.move.to_sq, token.choices)

    def _on_status_changed(self, status: GameStatus) -> None:
        self.status_changed.emit(status)
