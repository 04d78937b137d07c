"""Square type alias and coordinate helpers.

Board layout (layer-major, then rank, then file):
    (x, y, z) -> z * 64 + y * 8 + x

    a1:1 = (0, 0, 0) = 0, b1:1 = 1, ..., h1:1 = 7
    a2:1 = (0, 1, 0) = 8, ...
    a1:2 = (0, 0, 1) = 64, ...
    h8:8 = (7, 7, 7) = 511

x is the file (a–h), y the rank (1–8) and z the layer (1–8 in names).
"""

from __future__ import annotations

from typing import TypeAlias

Square: TypeAlias = int  # 0–511
Coord: TypeAlias = tuple[int, int, int]

BOARD_SIZE = 8
SQUARE_COUNT = BOARD_SIZE**3


def file_of(sq: Square) -> int:
    """File index 0–7 (x axis)."""
    return sq & 7


def rank_of(sq: Square) -> int:
    """Rank index 0–7 (y axis)."""
    return (sq >> 3) & 7


def layer_of(sq: Square) -> int:
    """Layer index 0–7 (z axis)."""
    return sq >> 6


def make_square(x: int, y: int, z: int) -> Square:
    """Create square from file, rank and layer (each 0–7)."""
    return (z << 6) | (y << 3) | x


def coord_of(sq: Square) -> Coord:
    """Square as an ``(x, y, z)`` triple."""
    return (sq & 7, (sq >> 3) & 7, sq >> 6)


def is_valid_coord(x: int, y: int, z: int) -> bool:
    """Whether every component lies on the board."""
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE and 0 <= z < BOARD_SIZE


def is_valid_square(sq: int) -> bool:
    """Check whether integer is a valid square index."""
    return 0 <= sq < SQUARE_COUNT


def square_name(sq: Square) -> str:
    """Human-readable name, e.g. 0 → 'a1:1', 511 → 'h8:8'."""
    return f"{chr(ord('a') + file_of(sq))}{rank_of(sq) + 1}:{layer_of(sq) + 1}"


def parse_square(name: str) -> Square:
    """Parse square name, e.g. 'e1:2' → (4, 0, 1)."""
    if (
        len(name) != 4
        or name[0] not in "abcdefgh"
        or name[1] not in "12345678"
        or name[2] != ":"
        or name[3] not in "12345678"
    ):
        raise ValueError(f"Invalid square name: {name!r}")
    return make_square(ord(name[0]) - ord("a"), int(name[1]) - 1, int(name[3]) - 1)
