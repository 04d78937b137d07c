"""Abstract interfaces for the session layer.

Follows Dependency Inversion: the GameController depends on these ABCs,
not on a concrete transport or UI.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from chess3d.core.board import Board
    from chess3d.core.enums import Color, PieceType
    from chess3d.core.types import Square


# ── Session phase FSM states ─────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a game session."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    AWAITING_PROMOTION = auto()
    GAME_OVER = auto()


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IStateSync(ABC):
    """Receives the authoritative session snapshot after every executed move.

    Implementations fan the snapshot out to other viewers; how it is
    transported or persisted is their concern.
    """

    @abstractmethod
    def push(self, snapshot: dict[str, Any]) -> None:
        """Publish *snapshot* (see :mod:`chess3d.game.snapshot`)."""


class IGameController(ABC):
    """Interface for the session orchestrator."""

    @abstractmethod
    def new_game(
        self,
        board: Board | None = None,
        side_to_move: Color | None = None,
    ) -> None:
        """Set up a new game."""

    @abstractmethod
    def select(self, sq: Square) -> set[Square]:
        """Legal destinations of the piece on *sq* (empty if none)."""

    @abstractmethod
    def submit_move(
        self, from_sq: Square, to_sq: Square, promotion: PieceType | None = None
    ) -> bool:
        """Submit a move. Returns True if it was accepted."""

    @abstractmethod
    def resolve_promotion(self, piece_type: PieceType) -> bool:
        """Complete a pending promotion. Returns True on success."""
