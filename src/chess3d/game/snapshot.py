"""JSON-compatible session snapshots for the state-sync collaborator.

Schema (version 1)::

    {
        "version": 1,
        "turn": "white",
        "board": [
            {"type": "K", "color": "white", "x": 4, "y": 0, "z": 0,
             "has_moved": false},
            ...
        ],
        "captured": {"white": [{"type": "P", "has_moved": true}], "black": []},
        "status": {"kind": "check", "color": "white"},
        "king_in_check": "white"
    }

``captured`` is keyed by the colour of the pieces that were lost. Every piece
keeps its ``has_moved`` flag; dropping it would corrupt castling and pawn
double-step legality after a reload. ``status`` and ``king_in_check`` are
informational: they are recomputed from the board when a snapshot is read.

Snapshots written by the browser client use camelCase keys (``hasMoved``,
``capturedPieces``, ``kingInCheck``); both spellings are accepted on input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    ValidationError,
    model_validator,
)

from chess3d.core.board import Board
from chess3d.core.enums import Color, PieceType
from chess3d.core.piece import Piece
from chess3d.core.rules import GameStatus, Rules
from chess3d.core.types import BOARD_SIZE, coord_of, make_square
from chess3d.game.state import GameState

SNAPSHOT_VERSION = 1

ColorName = Literal["white", "black"]
TypeTag = Literal["P", "N", "B", "R", "Q", "K"]
StatusName = Literal["active", "check", "checkmate", "stalemate"]
Coordinate = Annotated[StrictInt, Field(ge=0, lt=BOARD_SIZE)]

_TAGS: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_TYPES_BY_TAG: dict[str, PieceType] = {v: k for k, v in _TAGS.items()}


def _color_name(color: Color) -> ColorName:
    return "white" if color == Color.WHITE else "black"


# ── Wire models ─────────────────────────────────────────────────────────────


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class CellModel(_WireModel):
    """One occupied board cell."""

    type: TypeTag
    color: ColorName
    x: Coordinate
    y: Coordinate
    z: Coordinate
    has_moved: StrictBool = Field(
        validation_alias=AliasChoices("has_moved", "hasMoved")
    )

    def to_piece(self) -> Piece:
        color = Color[self.color.upper()]
        return Piece(color, _TYPES_BY_TAG[self.type], self.has_moved)


class CapturedModel(_WireModel):
    """A captured piece; its colour is the key it is filed under."""

    type: TypeTag
    has_moved: StrictBool = Field(
        True, validation_alias=AliasChoices("has_moved", "hasMoved")
    )


class StatusModel(_WireModel):
    kind: StatusName
    color: ColorName | None = None


class SnapshotModel(_WireModel):
    """Full session snapshot as exchanged with sync collaborators."""

    version: Literal[1] = SNAPSHOT_VERSION
    turn: ColorName
    board: list[CellModel]
    captured: dict[ColorName, list[CapturedModel]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("captured", "capturedPieces"),
    )
    status: StatusModel | None = None
    king_in_check: ColorName | None = Field(
        None, validation_alias=AliasChoices("king_in_check", "kingInCheck")
    )

    @model_validator(mode="after")
    def _check_board(self) -> SnapshotModel:
        seen: set[tuple[int, int, int]] = set()
        for cell in self.board:
            key = (cell.x, cell.y, cell.z)
            if key in seen:
                raise ValueError(f"Two pieces on {key}")
            seen.add(key)
        for color in ("white", "black"):
            kings = sum(1 for c in self.board if c.type == "K" and c.color == color)
            if kings != 1:
                raise ValueError(f"Expected one {color} king, found {kings}")
        return self


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Decoded snapshot, ready to be loaded into a :class:`GameState`."""

    board: Board
    side_to_move: Color
    captured: dict[Color, list[Piece]]
    status: GameStatus


# ── Encoding ────────────────────────────────────────────────────────────────


def to_model(state: GameState) -> SnapshotModel:
    cells: list[CellModel] = []
    for sq, piece in state.board.occupied():
        x, y, z = coord_of(sq)
        cells.append(
            CellModel(
                type=_TAGS[piece.piece_type],
                color=_color_name(piece.color),
                x=x,
                y=y,
                z=z,
                has_moved=piece.has_moved,
            )
        )

    status = state.status
    king_in_check = state.king_in_check
    return SnapshotModel(
        version=SNAPSHOT_VERSION,
        turn=_color_name(state.side_to_move),
        board=cells,
        captured={
            _color_name(color): [
                CapturedModel(type=_TAGS[p.piece_type], has_moved=p.has_moved)
                for p in pieces
            ]
            for color, pieces in state.captured.items()
        },
        status=StatusModel(
            kind=status.kind.name.lower(),
            color=None if status.color is None else _color_name(status.color),
        ),
        king_in_check=None if king_in_check is None else _color_name(king_in_check),
    )


def to_dict(state: GameState) -> dict[str, Any]:
    """Encode *state* as plain JSON-compatible data."""
    return to_model(state).model_dump(mode="json")


def dumps(state: GameState) -> str:
    """Encode *state* as a JSON string."""
    return to_model(state).model_dump_json()


# ── Decoding ────────────────────────────────────────────────────────────────


def _decode(model: SnapshotModel) -> Snapshot:
    board = Board()
    for cell in model.board:
        board[make_square(cell.x, cell.y, cell.z)] = cell.to_piece()

    captured: dict[Color, list[Piece]] = {Color.WHITE: [], Color.BLACK: []}
    for name, entries in model.captured.items():
        color = Color[name.upper()]
        captured[color].extend(
            Piece(color, _TYPES_BY_TAG[e.type], e.has_moved) for e in entries
        )

    side_to_move = Color[model.turn.upper()]
    return Snapshot(
        board=board,
        side_to_move=side_to_move,
        captured=captured,
        status=Rules.game_status(board, side_to_move),
    )


def from_dict(data: Any) -> Snapshot:
    """Decode and validate snapshot *data*; raises ``ValueError``."""
    try:
        model = SnapshotModel.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid snapshot: {exc}") from exc
    return _decode(model)


def loads(text: str | bytes) -> Snapshot:
    """Decode a JSON snapshot string; raises ``ValueError``."""
    try:
        model = SnapshotModel.model_validate_json(text)
    except ValidationError as exc:
        raise ValueError(f"Invalid snapshot JSON: {exc}") from exc
    return _decode(model)


def load_into(state: GameState, snapshot: Snapshot) -> None:
    """Replace *state*'s game with *snapshot*."""
    state.setup(snapshot.board, snapshot.side_to_move, snapshot.captured)
