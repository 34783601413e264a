"""
Tests for configuration, backend selection and logging setup.
"""

import logging
import os
from pathlib import Path

import pytest

from tsdb import (
    InvalidArgumentError,
    KeyEncoding,
    LMDBConfig,
    LMDBStore,
    TimeEntry,
    configure_logging,
    open_db,
)
from tsdb.config import DEFAULT_MAP_SIZE, DEFAULT_MAX_DBS, DEFAULT_MODE


class TestLMDBConfig:
    def test_defaults(self):
        config = LMDBConfig(path="data/series.mdb")
        assert config.mode == 0
        assert config.file_mode == DEFAULT_MODE == 0o600
        assert config.map_size == DEFAULT_MAP_SIZE
        assert config.max_dbs == DEFAULT_MAX_DBS
        assert config.key_encoding is KeyEncoding.UNSIGNED

    def test_explicit_mode(self):
        assert LMDBConfig(path="x", mode=0o640).file_mode == 0o640

    def test_pathlike(self, temp_dir):
        config = LMDBConfig(path=Path(temp_dir) / "series.mdb")
        assert config.path == os.path.join(temp_dir, "series.mdb")

    def test_encoding_string_is_coerced(self):
        config = LMDBConfig(path="x", key_encoding="order_preserving")
        assert config.key_encoding is KeyEncoding.ORDER_PRESERVING

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"path": ""},
            {"path": "   "},
            {"path": "x", "mode": -1},
            {"path": "x", "mode": 0o1000},
            {"path": "x", "map_size": 0},
            {"path": "x", "max_dbs": 0},
            {"path": "x", "key_encoding": "zigzag"},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidArgumentError):
            LMDBConfig(**kwargs)

    def test_invalid_is_value_error(self):
        with pytest.raises(ValueError):
            LMDBConfig(path="")


class TestOpenDB:
    async def test_lmdb_config_opens_lmdb_store(self, db_path):
        async with open_db(LMDBConfig(path=db_path)) as db:
            assert isinstance(db, LMDBStore)
            assert db.path == os.path.abspath(db_path)
            await db.add("s", [TimeEntry(1, b"x")])
            assert await db.get("s") == [TimeEntry(1, b"x")]

    def test_unsupported_config(self):
        with pytest.raises(InvalidArgumentError, match="Unsupported storage configuration"):
            open_db({"path": "x"})


class TestConfigureLogging:
    def test_level_from_environment(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        monkeypatch.setenv("LOG_LEVEL", "debug")

        configure_logging()

        assert calls[0]["level"] == "DEBUG"
        assert "%(levelname)s" in calls[0]["format"]

    def test_default_level(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        configure_logging()

        assert calls[0]["level"] == "INFO"

    def test_explicit_level(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))

        configure_logging(logging.WARNING)

        assert calls[0]["level"] == logging.WARNING
