"""Session layer: game state, controller and sync snapshots.

Quick start::

    from chess3d.core import make_square
    from chess3d.game import GameController

    ctrl = GameController()
    ctrl.new_game()
    targets = ctrl.select(make_square(4, 0, 1))
    ctrl.submit_move(make_square(4, 0, 1), make_square(4, 0, 3))
"""

from chess3d.game.controller import GameController, GameEvents
from chess3d.game.interfaces import GamePhase, IGameController, IStateSync
from chess3d.game.snapshot import Snapshot
from chess3d.game.state import GameState, MoveRecord

__all__ = [
    # Interfaces
    "GamePhase",
    "IGameController",
    "IStateSync",
    # Concrete
    "GameController",
    "GameEvents",
    "GameState",
    "MoveRecord",
    "Snapshot",
]
