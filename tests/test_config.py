"""Tests for TOML variant configuration."""

import logging
from pathlib import Path

import pytest

from chess3d.config import (
    CONFIG_ENV_VAR,
    VariantConfig,
    configure_logging,
    load_config,
)
from chess3d.core.enums import PieceType
from chess3d.core.piece import PROMOTION_TYPES


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "chess3d.toml"
    path.write_text(body, encoding="utf-8")
    return path


class TestDefaults:
    def test_defaults(self) -> None:
        cfg = VariantConfig()
        assert cfg.home_rank == 0
        assert cfg.promotion_choices == PROMOTION_TYPES
        assert cfg.log_level == "WARNING"

    def test_no_path_no_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert load_config() == VariantConfig()

    @pytest.mark.parametrize("rank", [-1, 8])
    def test_home_rank_range(self, rank: int) -> None:
        with pytest.raises(ValueError, match="home_rank"):
            VariantConfig(home_rank=rank)

    def test_empty_choices(self) -> None:
        with pytest.raises(ValueError):
            VariantConfig(promotion_choices=())

    def test_king_not_a_choice(self) -> None:
        with pytest.raises(ValueError):
            VariantConfig(promotion_choices=(PieceType.QUEEN, PieceType.KING))


class TestLoad:
    def test_reads_table(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            '[chess3d]\nhome_rank = 2\npromotion_choices = ["queen", "Knight"]\n'
            'log_level = "debug"\n',
        )
        cfg = load_config(path)
        assert cfg.home_rank == 2
        assert cfg.promotion_choices == (PieceType.QUEEN, PieceType.KNIGHT)
        assert cfg.log_level == "DEBUG"

    def test_missing_table_gives_defaults(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[other]\nvalue = 1\n")
        assert load_config(path) == VariantConfig()

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = _write(tmp_path, "[chess3d]\nhome_rank = 5\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_config().home_rank == 5

    def test_unknown_key(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[chess3d]\nboard_size = 10\n")
        with pytest.raises(ValueError, match="board_size"):
            load_config(path)

    def test_bad_choice(self, tmp_path: Path) -> None:
        path = _write(tmp_path, '[chess3d]\npromotion_choices = ["wizard"]\n')
        with pytest.raises(ValueError, match="promotion_choices"):
            load_config(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.toml")


def test_configure_logging() -> None:
    logger = logging.getLogger("chess3d")
    previous = logger.level
    try:
        configure_logging(VariantConfig(log_level="DEBUG"))
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(previous)
