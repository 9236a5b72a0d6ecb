"""
Tests for configuration module.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from ostn02.core.config import Settings


class TestSettings:
    """Tests for Settings class."""

    def test_default_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that default values are set correctly."""
        monkeypatch.delenv("OSTN02_GRID_PATH", raising=False)
        monkeypatch.delenv("OSTN02_LOOKUP_STRATEGY", raising=False)

        settings = Settings(_env_file=None)

        assert settings.grid_path is None
        assert settings.lookup_strategy == "indexed"
        assert settings.suspect_threshold == 2
        assert settings.log_level == "INFO"
        assert settings.json_logs is False

    def test_environment_variables(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test settings are read from OSTN02_ prefixed variables."""
        grid = tmp_path / "OSTN02_OSGM02_GB.txt"
        monkeypatch.setenv("OSTN02_GRID_PATH", str(grid))
        monkeypatch.setenv("OSTN02_LOOKUP_STRATEGY", "streaming")
        monkeypatch.setenv("OSTN02_SUSPECT_THRESHOLD", "3")

        settings = Settings(_env_file=None)

        assert settings.grid_path == grid
        assert settings.lookup_strategy == "streaming"
        assert settings.suspect_threshold == 3

    def test_log_level_normalized(self) -> None:
        """Test log level names are upper-cased."""
        assert Settings(log_level=" debug ").log_level == "DEBUG"

    def test_invalid_strategy(self) -> None:
        """Test unknown lookup strategies are rejected."""
        with pytest.raises(ValidationError):
            Settings(lookup_strategy="random")

    def test_invalid_threshold(self) -> None:
        """Test thresholds below one are rejected."""
        with pytest.raises(ValidationError):
            Settings(suspect_threshold=0)
