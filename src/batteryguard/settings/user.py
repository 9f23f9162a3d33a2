"""User-configurable settings loaded from config.yaml."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import ClassVar

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from batteryguard.advice.api import DEFAULT_MODEL

# Load environment variables from .env file(s)
load_dotenv()

# Environment variables consulted for the advice key, in order
API_KEY_ENV_VARS: tuple[str, ...] = ("GEMINI_API_KEY", "API_KEY")


def _interpolate_env(content: str) -> str:
    return re.sub(r"\$\{(\w+)\}", lambda m: os.getenv(m.group(1), ""), content)


class UserSettings(BaseModel):
    """User settings for storage location and the advice service.

    Every field has a default, so the application runs without any
    config.yaml at all.
    """

    # Default search paths for configuration
    DEFAULT_CONFIG_PATHS: ClassVar[list[Path]] = [
        Path("config.yaml"),
        Path("~/.config/batteryguard/config.yaml").expanduser(),
        Path("/etc/batteryguard/config.yaml"),
    ]

    # Storage
    data_dir: Path = Field(
        default_factory=lambda: Path("~/.local/share/batteryguard").expanduser(),
        description="Directory holding the battery and log JSON blobs",
    )
    seed_demo_data: bool = Field(
        True, description="Write a demo inventory the first time the store is opened"
    )

    # Advice service
    advice_api_key: str | None = Field(
        None, description="Generative Language API key; empty disables advice"
    )
    advice_model: str = Field(DEFAULT_MODEL, min_length=1, description="Model used for advice")
    advice_timeout: float = Field(20, gt=0, description="Advice request timeout (seconds)")

    # ---- validators ----
    @field_validator("data_dir")
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        return v.expanduser()

    @field_validator("advice_api_key")
    @classmethod
    def blank_key_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    # ---- convenience methods ----
    def resolve_api_key(self) -> str | None:
        """Get the advice API key from settings or the environment.

        Returns:
            The configured key, the first non-empty environment key, or None
        """
        if self.advice_api_key:
            return self.advice_api_key
        for name in API_KEY_ENV_VARS:
            value = os.getenv(name)
            if value:
                return value
        return None

    @property
    def advice_enabled(self) -> bool:
        """Whether an advice API key is available."""
        return self.resolve_api_key() is not None

    @classmethod
    def load(cls, path: Path | None = None) -> UserSettings:
        """Load configuration from a YAML file.

        Args:
            path: Path to config file (optional, searches default locations if None)

        Returns:
            Validated UserSettings object (defaults if no file is found)

        Raises:
            FileNotFoundError: If an explicitly requested config file is missing
            RuntimeError: If the config file cannot be parsed or is invalid
        """
        if path is None:
            # Check environment variable first
            env_path = os.environ.get("BATTERYGUARD_CONFIG")
            if env_path:
                path = Path(env_path)
                if not path.exists():
                    raise FileNotFoundError(f"Config file from BATTERYGUARD_CONFIG not found: {path}")
            else:
                for default_path in cls.DEFAULT_CONFIG_PATHS:
                    if default_path.exists():
                        path = default_path
                        break
                else:
                    return cls()
        elif not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            raw = _interpolate_env(path.read_text())
            data = yaml.safe_load(raw) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise RuntimeError(f"Unable to read config YAML: {exc}") from exc

        try:
            return cls.model_validate(data)
        except ValidationError as err:
            raise RuntimeError(f"Invalid configuration:\n{err}") from err
