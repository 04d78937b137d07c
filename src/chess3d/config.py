"""Variant configuration loaded from TOML."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from chess3d.core.enums import PieceType
from chess3d.core.piece import PROMOTION_TYPES

CONFIG_ENV_VAR = "CHESS3D_CONFIG"
_SECTION = "chess3d"


@dataclass(frozen=True, slots=True)
class VariantConfig:
    """Knobs of a game session.

    Args:
        home_rank: y coordinate of both back ranks in the initial setup.
        promotion_choices: Piece types offered when a pawn promotes.
        log_level: Level applied to the ``chess3d`` logger.
    """

    home_rank: int = 0
    promotion_choices: tuple[PieceType, ...] = PROMOTION_TYPES
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if not 0 <= self.home_rank < 8:
            raise ValueError(f"home_rank must be in 0..7, got {self.home_rank}")
        if not self.promotion_choices:
            raise ValueError("promotion_choices must not be empty")
        bad = [pt for pt in self.promotion_choices if pt not in PROMOTION_TYPES]
        if bad:
            raise ValueError(f"Invalid promotion choices: {bad}")


def _parse_table(table: dict[str, Any]) -> VariantConfig:
    known = {f.name for f in fields(VariantConfig)}
    unknown = set(table) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {sorted(unknown)}")

    kwargs: dict[str, Any] = dict(table)
    if "promotion_choices" in kwargs:
        try:
            kwargs["promotion_choices"] = tuple(
                PieceType[name.upper()] for name in kwargs["promotion_choices"]
            )
        except (KeyError, AttributeError) as exc:
            raise ValueError(
                f"Invalid promotion_choices: {table['promotion_choices']!r}"
            ) from exc
    if "log_level" in kwargs:
        kwargs["log_level"] = str(kwargs["log_level"]).upper()
    return VariantConfig(**kwargs)


def load_config(path: str | Path | None = None) -> VariantConfig:
    """Read the ``[chess3d]`` table of a TOML file.

    Without *path*, the ``CHESS3D_CONFIG`` environment variable is consulted;
    if neither is set, defaults are returned.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
        if not path:
            return VariantConfig()

    with open(path, "rb") as fh:
        data = tomllib.load(fh)
    return _parse_table(data.get(_SECTION, {}))


def configure_logging(config: VariantConfig) -> None:
    """Apply *config*'s level to the package logger."""
    logging.getLogger("chess3d").setLevel(config.log_level)
