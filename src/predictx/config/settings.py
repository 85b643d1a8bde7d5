"""TOML config loading, profiles and environment overrides."""

from __future__ import annotations

import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Any, Mapping

from dotenv import load_dotenv

from predictx.errors import ConfigurationError

# Default config search path (project root or cwd)
_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"
_CWD_CONFIG = Path.cwd() / "config"

# Environment variable -> (section, key). Env wins over TOML.
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "PREDICTX_REST_URL": ("chain", "rest_url"),
    "PREDICTX_CONTRACT_ADDRESS": ("chain", "contract_address"),
    "PREDICTX_CHAIN_ID": ("chain", "chain_id"),
    "PREDICTX_COIN_DENOM": ("chain", "coin_denom"),
    "PREDICTX_WALLET_MNEMONIC": ("wallet", "mnemonic"),
    "PREDICTX_LOG_LEVEL": ("logging", "level"),
}


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override values take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir(config_dir: Path | None = None) -> Path:
    if config_dir is not None:
        return config_dir
    if _CWD_CONFIG.exists():
        return _CWD_CONFIG
    return _CONFIG_DIR


def _env_overlay(environ: Mapping[str, str]) -> dict[str, Any]:
    overlay: dict[str, Any] = {}
    for var, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            overlay.setdefault(section, {})[key] = value
    return overlay


def load_config(profile: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """Load merged config from default.toml and optional profile overlay."""
    config_dir = _find_config_dir(config_dir)
    default_path = config_dir / "default.toml"
    base = _load_toml(default_path) if default_path.exists() else {}
    if profile:
        profile_path = config_dir / f"{profile}.toml"
        if not profile_path.exists():
            raise ConfigurationError(f"Config profile not found: {profile_path}")
        base = _deep_merge(base, _load_toml(profile_path))
    return base


def get_settings(profile: str | None = None, config_dir: Path | None = None) -> Settings:
    """Return Settings from merged TOML config with PREDICTX_* environment overrides applied."""
    load_dotenv()
    raw = load_config(profile, config_dir)
    raw = _deep_merge(raw, _env_overlay(os.environ))
    return Settings.from_dict(raw)


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        chain: dict[str, Any] | None = None,
        wallet: dict[str, Any] | None = None,
        api: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.chain = chain or {}
        self.wallet = wallet or {}
        self.api = api or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(
            chain=raw.get("chain"),
            wallet=raw.get("wallet"),
            api=raw.get("api"),
            logging=raw.get("logging"),
        )

    # Convenience accessors with defaults
    @property
    def rest_url(self) -> str:
        return str(self.chain.get("rest_url") or "").rstrip("/")

    @property
    def chain_id(self) -> str:
        return str(self.chain.get("chain_id") or "")

    @property
    def contract_address(self) -> str:
        return str(self.chain.get("contract_address") or "")

    @property
    def coin_denom(self) -> str:
        return self.chain.get("coin_denom", "ucmdx")

    @property
    def display_denom(self) -> str:
        return self.chain.get("display_denom", "CMDX")

    @property
    def gas_price(self) -> float:
        return float(self.chain.get("gas_price", 0.025))

    @property
    def request_timeout_sec(self) -> float:
        return float(self.chain.get("request_timeout_sec", 30.0))

    @property
    def page_limit(self) -> int:
        return int(self.chain.get("page_limit", 30))

    @property
    def bech32_prefix(self) -> str:
        return self.wallet.get("bech32_prefix", "comdex")

    @property
    def mnemonic(self) -> str | None:
        return self.wallet.get("mnemonic") or None

    @property
    def wait_for_inclusion(self) -> bool:
        return bool(self.wallet.get("wait_for_inclusion", True))

    @property
    def api_host(self) -> str:
        return self.api.get("host", "127.0.0.1")

    @property
    def api_port(self) -> int:
        return int(self.api.get("port", 3001))

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)

    def require_chain(self, *, signing: bool = False) -> None:
        """Raise ConfigurationError listing every chain setting needed for queries (and signing)."""
        required = {
            "chain.rest_url (PREDICTX_REST_URL)": self.rest_url,
            "chain.contract_address (PREDICTX_CONTRACT_ADDRESS)": self.contract_address,
        }
        if signing:
            required["chain.chain_id (PREDICTX_CHAIN_ID)"] = self.chain_id
            required["wallet.mnemonic (PREDICTX_WALLET_MNEMONIC)"] = self.mnemonic or ""
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigurationError("Missing configuration: " + ", ".join(missing))


def configure_logging(settings: Settings) -> None:
    """Configure structlog with settings. Call once at application entry."""
    import structlog

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.logging_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )
