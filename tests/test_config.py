"""
Unit tests for engine settings read from the environment.
"""

from pathlib import Path

import pytest

from kingdom_engine.config import EngineSettings

ENV_VARS = ["KINGDOM_SEED", "KINGDOM_LOG_LEVEL", "KINGDOM_STRICT_CATALOG", "KINGDOM_HISTORY_DIR", "KINGDOM_NAME"]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestEngineSettings:
    """Tests for EngineSettings.from_env."""

    def test_defaults(self, clean_env):
        settings = EngineSettings.from_env()
        assert settings.seed is None
        assert settings.log_level == "WARNING"
        assert settings.strict_catalog
        assert settings.kingdom_name == "Stolen Lands"
        assert settings.history_dir == Path.home() / ".kingdom_engine"

    def test_overrides(self, clean_env, tmp_path):
        clean_env.setenv("KINGDOM_SEED", "1234")
        clean_env.setenv("KINGDOM_LOG_LEVEL", "debug")
        clean_env.setenv("KINGDOM_STRICT_CATALOG", "no")
        clean_env.setenv("KINGDOM_HISTORY_DIR", str(tmp_path))
        clean_env.setenv("KINGDOM_NAME", "Restov Marches")
        settings = EngineSettings.from_env()
        assert settings.seed == 1234
        assert settings.log_level == "DEBUG"
        assert not settings.strict_catalog
        assert settings.history_dir == tmp_path
        assert settings.kingdom_name == "Restov Marches"

    @pytest.mark.parametrize("value,expected", [("1", True), ("TRUE", True), ("off", False), ("  ", True)])
    def test_strict_flag(self, clean_env, value, expected):
        clean_env.setenv("KINGDOM_STRICT_CATALOG", value)
        assert EngineSettings.from_env().strict_catalog is expected

    def test_bad_seed(self, clean_env):
        clean_env.setenv("KINGDOM_SEED", "lucky")
        with pytest.raises(ValueError):
            EngineSettings.from_env()
