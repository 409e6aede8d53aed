"""Unit tests for hooks_lab.config.

Tests cover:
1. Defaults — storage location, thresholds, pattern lists, log-only mode
2. Environment overrides — HOOKS_LAB_ prefix, list fields as JSON
3. Validation — threshold ordering, non-negative bounds, regex pattern lists
4. Singleton helpers — get/override/reset and the module-level proxy
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from hooks_lab.config import (
    Settings,
    get_settings,
    override_settings,
    reset_settings,
    settings,
)
from hooks_lab.core.errors import ConfigurationError

# =============================================================================
# Defaults
# =============================================================================


@pytest.mark.unit
class TestDefaults:
    """Test default values."""

    def test_base_dir_under_home(self) -> None:
        s = Settings()
        assert s.base_dir == Path.home() / ".claude" / "hooks-lab"

    def test_log_only_by_default(self) -> None:
        s = Settings()
        assert s.enforce_blocking is False
        assert s.block_protected_paths is False

    def test_dangerous_patterns(self) -> None:
        s = Settings()
        assert s.dangerous_command_patterns == [r"rm -rf /", r"mkfs", r"dd if="]

    def test_protected_paths(self) -> None:
        s = Settings()
        assert s.protected_path_patterns == [r"/etc/", r"/sys/", r"/proc/"]

    def test_thresholds(self) -> None:
        s = Settings()
        assert s.moderate_threshold_ms == 1000
        assert s.slow_threshold_ms == 5000
        assert s.large_match_threshold == 10

    def test_preview_and_learning(self) -> None:
        s = Settings()
        assert s.preview_chars == 150
        assert s.show_learning is True
        assert s.show_banner is True
        assert s.log_prompt_preview is True
        assert s.color is None


# =============================================================================
# Environment overrides
# =============================================================================


@pytest.mark.unit
class TestEnvironment:
    """Test HOOKS_LAB_* environment variables."""

    def test_base_dir_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HOOKS_LAB_BASE_DIR", str(tmp_path))
        assert Settings().base_dir == tmp_path

    def test_enforce_blocking_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOOKS_LAB_ENFORCE_BLOCKING", "true")
        assert Settings().enforce_blocking is True

    def test_pattern_list_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOOKS_LAB_DANGEROUS_COMMAND_PATTERNS", '["shutdown"]')
        assert Settings().dangerous_command_patterns == ["shutdown"]

    def test_unrelated_env_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOOKS_LAB_NOT_A_FIELD", "x")
        Settings()


# =============================================================================
# Validation
# =============================================================================


@pytest.mark.unit
class TestValidation:
    """Test field validation."""

    def test_moderate_must_be_below_slow(self) -> None:
        with pytest.raises(ConfigurationError, match="moderate_threshold_ms"):
            Settings(moderate_threshold_ms=5000, slow_threshold_ms=5000)

    def test_custom_thresholds_accepted(self) -> None:
        s = Settings(moderate_threshold_ms=200, slow_threshold_ms=800)
        assert (s.moderate_threshold_ms, s.slow_threshold_ms) == (200, 800)

    def test_negative_preview_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(preview_chars=-1)

    def test_zero_stdin_limit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(max_stdin_bytes=0)

    def test_invalid_dangerous_pattern_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="dangerous_command_patterns"):
            Settings(dangerous_command_patterns=["rm -rf (", "mkfs"])

    def test_invalid_protected_path_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="protected_path_patterns"):
            Settings(protected_path_patterns=["/etc/[", "/sys/"])

    def test_invalid_pattern_from_env_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOOKS_LAB_DANGEROUS_COMMAND_PATTERNS", '["*rm"]')
        with pytest.raises(ConfigurationError, match="invalid regex"):
            Settings()


# =============================================================================
# Singleton helpers
# =============================================================================


@pytest.mark.unit
class TestSingleton:
    """Test get_settings / override_settings / reset_settings."""

    def test_get_settings_cached(self) -> None:
        reset_settings()
        try:
            assert get_settings() is get_settings()
        finally:
            reset_settings()

    def test_override(self, tmp_path: Path) -> None:
        custom = Settings(base_dir=tmp_path)
        override_settings(custom)
        try:
            assert get_settings() is custom
            assert settings.base_dir == tmp_path
        finally:
            reset_settings()

    def test_reset_forces_reload(self, tmp_path: Path) -> None:
        override_settings(Settings(base_dir=tmp_path))
        reset_settings()
        try:
            assert get_settings().base_dir != tmp_path
        finally:
            reset_settings()
