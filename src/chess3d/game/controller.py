"""GameController: the orchestrator of a single game session.

Drives a GameState through the rules engine and pushes snapshots to sync sinks.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from chess3d.config import VariantConfig
from chess3d.core.board import Board
from chess3d.core.enums import Color, PieceType
from chess3d.core.errors import IllegalMoveError
from chess3d.core.executor import PendingPromotion
from chess3d.core.rules import GameStatus
from chess3d.core.types import Square, square_name
from chess3d.game import snapshot
from chess3d.game.interfaces import GamePhase, IGameController, IStateSync
from chess3d.game.state import GameState, MoveRecord

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord, GameState], None]
PromotionCallback = Callable[[PendingPromotion], None]
StatusCallback = Callable[[GameStatus], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_promotion_pending: list[PromotionCallback] = field(default_factory=list)
    on_status_changed: list[StatusCallback] = field(default_factory=list)
    on_game_over: list[StatusCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Orchestrates a game session: validates moves, switches turns,
    notifies listeners and pushes snapshots to sync sinks.

    Thread-safety: methods are designed to be called from a single thread.
    Callers sharing a session must serialise move submission themselves.
    """

    __slots__ = ("_config", "_state", "_sinks", "last_error", "events")

    def __init__(
        self,
        config: VariantConfig | None = None,
        sinks: Iterable[IStateSync] = (),
    ) -> None:
        self._config = config if config is not None else VariantConfig()
        self._state = GameState(self._config)
        self._sinks: list[IStateSync] = list(sinks)
        self.last_error: str | None = None
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def config(self) -> VariantConfig:
        return self._config

    def add_sink(self, sink: IStateSync) -> None:
        self._sinks.append(sink)

    # ── IGameController impl ─────────────────────────────────────────────

    def new_game(
        self,
        board: Board | None = None,
        side_to_move: Color | None = None,
    ) -> None:
        self._state = GameState(self._config)
        self._state.setup(board, side_to_move or Color.WHITE)
        self.last_error = None
        _LOGGER.info(
            "New game, %s to move (%s)", self._state.side_to_move, self._state.status
        )
        self._after_position_change()

    def select(self, sq: Square) -> set[Square]:
        try:
            return self._state.legal_destinations(sq)
        except IllegalMoveError as exc:
            _LOGGER.debug("Selection of %s ignored: %s", square_name(sq), exc)
            return set()

    def submit_move(
        self, from_sq: Square, to_sq: Square, promotion: PieceType | None = None
    ) -> bool:
        try:
            outcome = self._state.apply_move(from_sq, to_sq, promotion)
        except IllegalMoveError as exc:
            self._reject(exc)
            return False

        self.last_error = None
        if isinstance(outcome, PendingPromotion):
            _LOGGER.info("Promotion pending for %s", outcome.move)
            for cb in self.events.on_promotion_pending:
                cb(outcome)
            return True

        self._after_move(outcome)
        return True

    def resolve_promotion(self, piece_type: PieceType) -> bool:
        try:
            record = self._state.resolve_promotion(piece_type)
        except IllegalMoveError as exc:
            self._reject(exc)
            return False

        self.last_error = None
        self._after_move(record)
        return True

    def cancel_promotion(self) -> None:
        self._state.cancel_promotion()

    def load_snapshot(self, data: Any) -> None:
        """Adopt an authoritative snapshot received from the sync backend.

        Sinks are not notified: the snapshot came from them. Malformed data
        raises ``ValueError`` and leaves the current game untouched.
        """
        decoded = snapshot.from_dict(data)
        self._state = GameState(self._config)
        snapshot.load_into(self._state, decoded)
        self.last_error = None
        _LOGGER.debug("Loaded snapshot, %s to move", self._state.side_to_move)
        self._emit_status()

    # ── Internal helpers ─────────────────────────────────────────────────

    def _reject(self, exc: IllegalMoveError) -> None:
        self.last_error = str(exc)
        _LOGGER.warning("Move rejected: %s", exc)

    def _after_move(self, record: MoveRecord) -> None:
        _LOGGER.debug(
            "Applied %s%s -> %s",
            record.move,
            f" capturing {record.captured}" if record.captured else "",
            record.status_after,
        )
        for cb in self.events.on_move:
            cb(record, self._state)
        self._after_position_change()

    def _after_position_change(self) -> None:
        self._publish()
        self._emit_status()

    def _emit_status(self) -> None:
        status = self._state.status
        for cb in self.events.on_status_changed:
            cb(status)
        if self._state.phase == GamePhase.GAME_OVER:
            _LOGGER.info("Game over: %s", status)
            for cb in self.events.on_game_over:
                cb(status)

    def _publish(self) -> None:
        if not self._sinks:
            return
        data = snapshot.to_dict(self._state)
        for sink in self._sinks:
            sink.push(data)
