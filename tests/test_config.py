"""Tests for spendwise.config."""

import stat
import tomllib
from decimal import Decimal

import pytest

from spendwise.config import (
    create_default_config,
    default_settings,
    get_config_path,
    get_db_path_override,
    load_config,
    load_config_or_default,
)
from spendwise.domain.settings import Settings


class TestConfigFile:
    """Tests for reading and writing the config file."""

    def test_config_path_follows_xdg(self, tmp_path, monkeypatch) -> None:
        """Should place the config under XDG_CONFIG_HOME."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert get_config_path() == tmp_path / "spendwise" / "config.toml"

    def test_create_default_config(self, tmp_path) -> None:
        """Should write a readable config with private permissions."""
        path = tmp_path / "spendwise" / "config.toml"

        create_default_config(path)

        config = load_config(path)
        assert config["log_level"] == "WARNING"
        assert config["settings"]["base_currency"] == "USD"
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_missing_config(self, tmp_path) -> None:
        """Should raise for a missing file unless defaults are requested."""
        path = tmp_path / "missing.toml"

        with pytest.raises(FileNotFoundError):
            load_config(path)
        assert load_config_or_default(path) == {}

    def test_invalid_toml(self, tmp_path) -> None:
        """Should raise TOMLDecodeError for broken files."""
        path = tmp_path / "config.toml"
        path.write_text("log_level = ")

        with pytest.raises(tomllib.TOMLDecodeError):
            load_config(path)


class TestConfigValues:
    """Tests for values derived from the config."""

    def test_db_path_override(self, tmp_path) -> None:
        """Should return the configured database path."""
        assert get_db_path_override({"db_path": str(tmp_path / "x.db")}) == tmp_path / "x.db"
        assert get_db_path_override({}) is None

    def test_default_settings_empty_config(self) -> None:
        """Should use built-in defaults for an empty config."""
        assert default_settings({}) == Settings()

    def test_default_settings_from_config(self) -> None:
        """Should layer configured values over the built-in defaults."""
        settings = default_settings(
            {"settings": {"base_currency": "RWF", "monthly_budget": 150000, "conversion_rates": {"RWF": 1300}}}
        )

        assert settings.base_currency == "RWF"
        assert settings.monthly_budget == 15000000
        assert settings.conversion_rates["RWF"] == Decimal("1300")
        assert settings.conversion_rates["EUR"] == Decimal("0.92")

    def test_default_settings_bad_budget(self) -> None:
        """Should raise ValueError for non-numeric budgets."""
        with pytest.raises(ValueError):
            default_settings({"settings": {"monthly_budget": "lots"}})
