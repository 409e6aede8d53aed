"""Configuration system for Hooks Lab."""

import re
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings

from hooks_lab.core.errors import ConfigurationError


class Settings(BaseSettings):
    """Hooks Lab Configuration."""

    # Storage
    base_dir: Path = Field(
        default=Path.home() / ".claude" / "hooks-lab",
        description="Base directory for logs, sessions and usage records",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    color: bool | None = Field(
        default=None,
        description="Force colored console output on/off (None = detect terminal)",
    )
    show_learning: bool = Field(
        default=True,
        description="Emit the explanatory LEARNING lines for each hook",
    )
    show_banner: bool = Field(
        default=True,
        description="Emit the closing banner on stderr",
    )
    log_prompt_preview: bool = Field(
        default=True,
        description="Write a prompt preview to the log (never to prompts.jsonl)",
    )
    preview_chars: int = Field(
        default=150,
        ge=0,
        description="Characters of prompt/output shown in previews",
    )

    # PreToolUse enforcement
    enforce_blocking: bool = Field(
        default=False,
        description="Exit non-zero on BLOCKED decisions (default: log only)",
    )
    block_protected_paths: bool = Field(
        default=False,
        description="Treat writes to protected system paths as BLOCKED instead of WARNING",
    )
    dangerous_command_patterns: list[str] = Field(
        default_factory=lambda: [r"rm -rf /", r"mkfs", r"dd if="],
        description="Regexes matched against Bash commands",
    )
    protected_path_patterns: list[str] = Field(
        default_factory=lambda: [r"/etc/", r"/sys/", r"/proc/"],
        description="Regexes matched against Write/Edit target paths",
    )

    # PostToolUse analysis
    moderate_threshold_ms: int = Field(
        default=1000,
        ge=0,
        description="Durations above this are 'moderate'",
    )
    slow_threshold_ms: int = Field(
        default=5000,
        ge=0,
        description="Durations above this are 'slow'",
    )
    large_match_threshold: int = Field(
        default=10,
        ge=0,
        description="Grep results above this many lines are 'large'",
    )

    # Input
    max_stdin_bytes: int = Field(
        default=524_288,
        ge=1,
        description="Maximum bytes read from stdin per invocation",
    )

    model_config = {
        "env_prefix": "HOOKS_LAB_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("dangerous_command_patterns", "protected_path_patterns")
    @classmethod
    def _check_patterns(cls, value: list[str], info: ValidationInfo) -> list[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ConfigurationError(
                    f"{info.field_name} contains an invalid regex {pattern!r}: {e}"
                ) from e
        return value

    @model_validator(mode="after")
    def _check_thresholds(self) -> "Settings":
        if self.moderate_threshold_ms >= self.slow_threshold_ms:
            raise ConfigurationError(
                "moderate_threshold_ms must be lower than slow_threshold_ms "
                f"({self.moderate_threshold_ms} >= {self.slow_threshold_ms})"
            )
        return self


# Settings singleton with dependency injection support
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the settings instance (lazy-loaded singleton).

    Returns:
        The Settings instance.

    Example:
        from hooks_lab.config import get_settings
        settings = get_settings()
        print(settings.base_dir)
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """Override the settings instance (for testing).

    Args:
        new_settings: The new Settings instance to use.
    """
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to None (forces reload on next get_settings call)."""
    global _settings
    _settings = None


class _SettingsProxy:
    """Proxy object exposing the current settings as a module global."""

    def __getattr__(self, name: str) -> Any:
        return getattr(get_settings(), name)

    def __repr__(self) -> str:
        return repr(get_settings())


settings = _SettingsProxy()
