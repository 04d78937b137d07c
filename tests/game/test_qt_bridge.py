"""Tests for the Qt game bridge."""

from __future__ import annotations

import pytest

pytest.importorskip("PyQt6.QtCore")

from PyQt6.QtTest import QSignalSpy  # noqa: E402

from chess3d.core.board import Board  # noqa: E402
from chess3d.core.enums import Color, PieceType  # noqa: E402
from chess3d.core.piece import Piece  # noqa: E402
from chess3d.core.rules import GameStatus  # noqa: E402
from chess3d.core.types import make_square  # noqa: E402
from chess3d.game.controller import GameController  # noqa: E402
from chess3d.game.qt_bridge import GameBridge  # noqa: E402

E2 = make_square(4, 0, 1)
E4 = make_square(4, 0, 3)
PAWN_FROM = make_square(3, 2, 6)
PAWN_TO = make_square(3, 2, 7)

pytestmark = pytest.mark.usefixtures("qapp")


def _promotion_bridge() -> GameBridge:
    board = Board()
    board[PAWN_FROM] = Piece(Color.WHITE, PieceType.PAWN, True)
    board[make_square(0, 7, 0)] = Piece(Color.WHITE, PieceType.KING)
    board[make_square(7, 7, 3)] = Piece(Color.BLACK, PieceType.KING)
    controller = GameController()
    controller.new_game(board)
    return GameBridge(controller)


class TestGameBridge:
    def test_select_emits_targets(self) -> None:
        bridge = GameBridge()
        bridge.new_game()
        targets = QSignalSpy(bridge.legal_targets)

        bridge.select(E2)

        assert len(targets) == 1
        assert targets[0][0] == E2
        assert targets[0][1] == {make_square(4, 0, 2), E4}

    def test_submit_emits_move_and_status(self) -> None:
        bridge = GameBridge()
        bridge.new_game()
        applied = QSignalSpy(bridge.move_applied)
        statuses = QSignalSpy(bridge.status_changed)
        rejected = QSignalSpy(bridge.move_rejected)

        bridge.submit(E2, E4)

        assert len(applied) == 1
        record, board = applied[0]
        assert record.move.to_sq == E4
        assert board[E4] is not None
        assert len(statuses) == 1
        assert statuses[0][0] == GameStatus.active()
        assert len(rejected) == 0

    def test_illegal_submit_emits_rejection(self) -> None:
        bridge = GameBridge()
        bridge.new_game()
        rejected = QSignalSpy(bridge.move_rejected)

        bridge.submit(E2, make_square(4, 0, 5))

        assert len(rejected) == 1
        assert rejected[0][0] == E2
        assert "not legal" in rejected[0][2]

    def test_promotion_round_trip(self) -> None:
        bridge = _promotion_bridge()
        pending = QSignalSpy(bridge.promotion_pending)
        applied = QSignalSpy(bridge.move_applied)

        bridge.submit(PAWN_FROM, PAWN_TO)
        assert len(pending) == 1
        assert pending[0][1] == PAWN_TO
        assert PieceType.QUEEN in pending[0][2]
        assert len(applied) == 0

        bridge.promote(int(PieceType.QUEEN))
        assert len(applied) == 1
        assert bridge.controller.state.board[PAWN_TO].piece_type == PieceType.QUEEN

    def test_promote_with_invalid_value(self) -> None:
        bridge = _promotion_bridge()
        rejected = QSignalSpy(bridge.move_rejected)
        bridge.submit(PAWN_FROM, PAWN_TO)

        bridge.promote(99)

        assert len(rejected) == 1
        assert rejected[0][0] == PAWN_FROM
        assert rejected[0][1] == PAWN_TO
