"""TOML configuration for spendwise.

The config file lives at ``$XDG_CONFIG_HOME/spendwise/config.toml``::

    log_level = "WARNING"
    db_path = "~/finance/spendwise.db"   # optional

    [settings]
    base_currency = "USD"
    monthly_budget = 0

    [settings.conversion_rates]
    EUR = 0.92

The ``[settings]`` table provides the defaults a fresh or cleared ledger
starts from.
"""

import os
import tomllib
from decimal import Decimal
from pathlib import Path
from typing import Any

import tomli_w

from spendwise.domain.models import CurrencyCode
from spendwise.domain.settings import DEFAULT_CONVERSION_RATES, REFERENCE_CURRENCY, Settings
from spendwise.domain.transactions import parse_amount


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")


def get_config_path() -> Path:
    """Get the config file path (XDG compliant)."""
    return get_xdg_config_home() / "spendwise" / "config.toml"


def default_config() -> dict[str, Any]:
    """Build the configuration written by 'spendwise init'."""
    return {
        "log_level": "WARNING",
        "settings": {
            "base_currency": str(REFERENCE_CURRENCY),
            "monthly_budget": 0,
            "conversion_rates": {code: float(rate) for code, rate in DEFAULT_CONVERSION_RATES.items()},
        },
    }


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Write config as TOML, readable only by the owner."""
    config_path = config_path or get_config_path()
    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)
    os.chmod(config_path, 0o600)


def create_default_config(config_path: Path | None = None) -> None:
    """Write the default config, creating its directory if needed."""
    config_path = config_path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    save_config(default_config(), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Read the config file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    with open(config_path or get_config_path(), "rb") as f:
        return tomllib.load(f)


def load_config_or_default(config_path: Path | None = None) -> dict[str, Any]:
    """Read the config file, or return an empty config when there is none."""
    try:
        return load_config(config_path)
    except FileNotFoundError:
        return {}


def get_db_path_override(config: dict[str, Any]) -> Path | None:
    """Database path set with 'db_path', if any."""
    db_path = config.get("db_path")
    return Path(db_path).expanduser() if db_path else None


def default_settings(config: dict[str, Any]) -> Settings:
    """Build the default Settings from the [settings] table of a config.

    Values in the table are layered over the built-in currency table.

    Raises:
        ValueError: If monthly_budget is not a number.
    """
    section = config.get("settings", {})

    rates = dict(DEFAULT_CONVERSION_RATES)
    for code, rate in section.get("conversion_rates", {}).items():
        rates[CurrencyCode(code)] = Decimal(str(rate))

    return Settings(
        base_currency=CurrencyCode(section.get("base_currency", REFERENCE_CURRENCY)),
        conversion_rates=rates,
        monthly_budget=parse_amount(section.get("monthly_budget", 0)),
    )
