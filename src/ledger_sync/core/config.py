#!/usr/bin/env python3
"""
Configuration Management for Ledger Sync

Handles environment-based configuration with secure defaults and validation.
Supports multiple environments (development, test, production); credentials
are only mandatory in production so that tests and dry runs can start without them.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class PaseliConfig:
    """PASELI account configuration."""

    user_id: str | None = None
    password: str | None = None
    base_url: str = "https://paseli.konami.net/charge"
    login_url: str = "https://account.konami.net/auth/login.html"
    timeout: int = 30


@dataclass
class MoneyForwardConfig:
    """Money Forward ME configuration."""

    wallet_id: str | None = None
    cookies_file: Path | None = None  # Netscape cookies.txt exported from a browser
    base_url: str = "https://moneyforward.com"
    id_url: str = "https://id.moneyforward.com/me"
    timeout: int = 30


@dataclass
class Config:
    """
    Main configuration class for ledger sync.

    Loads configuration from environment variables with secure defaults
    and validation for each environment type.
    """

    environment: Environment

    # Where sync reports are written
    data_dir: Path

    # Component configurations
    paseli: PaseliConfig
    moneyforward: MoneyForwardConfig

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("LEDGER_SYNC_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_ledger_sync"
            data_dir = Path(os.getenv("LEDGER_SYNC_DATA_DIR", str(default_test_dir)))
        else:
            data_dir = Path(os.getenv("LEDGER_SYNC_DATA_DIR", "./data")).expanduser().resolve()

        data_dir.mkdir(parents=True, exist_ok=True)

        cookies = os.getenv("MONEYFORWARD_COOKIES")

        paseli = PaseliConfig(
            user_id=os.getenv("PASELI_ID"),
            password=os.getenv("PASELI_PASSWORD"),
            timeout=int(os.getenv("PASELI_TIMEOUT", "30")),
        )

        moneyforward = MoneyForwardConfig(
            wallet_id=os.getenv("MONEYFORWARD_WALLET_ID"),
            cookies_file=Path(cookies).expanduser() if cookies else None,
            timeout=int(os.getenv("MONEYFORWARD_TIMEOUT", "30")),
        )

        return cls(
            environment=env,
            data_dir=data_dir,
            paseli=paseli,
            moneyforward=moneyforward,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.data_dir.exists():
            errors.append(f"data_dir does not exist: {self.data_dir}")

        if self.environment == Environment.PRODUCTION:
            for env_var, value in [
                ("PASELI_ID", self.paseli.user_id),
                ("PASELI_PASSWORD", self.paseli.password),
                ("MONEYFORWARD_WALLET_ID", self.moneyforward.wallet_id),
                ("MONEYFORWARD_COOKIES", self.moneyforward.cookies_file),
            ]:
                if not value:
                    errors.append(f"{env_var} is required in production")

        if self.paseli.user_id and not self.paseli.password:
            errors.append("PASELI_PASSWORD is required when PASELI_ID is provided")

        if self.paseli.timeout <= 0:
            errors.append("PASELI timeout must be positive")
        if self.moneyforward.timeout <= 0:
            errors.append("Money Forward timeout must be positive")

        return errors

    def missing_sync_settings(self) -> list[str]:
        """Environment variables that must be set before a sync can run."""
        missing = []
        for env_var, value in [
            ("PASELI_ID", self.paseli.user_id),
            ("PASELI_PASSWORD", self.paseli.password),
            ("MONEYFORWARD_WALLET_ID", self.moneyforward.wallet_id),
            ("MONEYFORWARD_COOKIES", self.moneyforward.cookies_file),
        ]:
            if not value:
                missing.append(env_var)
        return missing

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

        # Reduce noise from external libraries in production
        if self.environment == Environment.PRODUCTION:
            logging.getLogger("urllib3").setLevel(logging.WARNING)
            logging.getLogger("requests").setLevel(logging.WARNING)

    def get_sensitive_fields(self) -> list:
        """Get list of field names that contain sensitive data."""
        return [
            "paseli.user_id",
            "paseli.password",
            "moneyforward.cookies_file",
        ]

    def to_dict(self, include_sensitive: bool = False) -> dict[str, Any]:
        """Convert configuration to dictionary, optionally excluding sensitive data."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if hasattr(field_value, "__dict__") and not isinstance(field_value, (Path, Enum)):
                nested_dict: dict[str, Any] = {}
                for nested_name, nested_value in field_value.__dict__.items():
                    full_field_name = f"{field_name}.{nested_name}"

                    if not include_sensitive and full_field_name in self.get_sensitive_fields():
                        nested_dict[nested_name] = "***REDACTED***" if nested_value else None
                    elif isinstance(nested_value, Path):
                        nested_dict[nested_name] = str(nested_value)
                    else:
                        nested_dict[nested_name] = nested_value

                result[field_name] = nested_dict
            elif isinstance(field_value, Path):
                result[field_name] = str(field_value)
            elif isinstance(field_value, Enum):
                result[field_name] = field_value.value
            else:
                result[field_name] = field_value

        return result


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        config = Config.from_environment()

        errors = config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        config.setup_logging()
        _config = config

    return _config
