"""Tests for passoff.settings module."""

import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from passoff.settings import (
    PassoffSettings,
    ZeroDenominatorPolicy,
    get_settings,
    reload_settings,
)

_ENV_VARS = [
    "PASSOFF_LOG_LEVEL",
    "PASSOFF_ARTIFACTS_DIR",
    "PASSOFF_ZERO_DENOMINATOR_POLICY",
    "PASSOFF_MAX_LATE_DAYS",
    "PASSOFF_PER_DAY_LATE_PENALTY",
    "PASSOFF_REQUIRED_COMMITS",
]


class TestPassoffSettings:
    """Test the PassoffSettings class."""

    def test_default_values(self) -> None:
        """Test that default values are set correctly."""
        env_backup = {v: os.environ.pop(v) for v in _ENV_VARS if v in os.environ}

        # Change to temp directory to avoid loading .env file
        with tempfile.TemporaryDirectory() as tmpdir:
            original_cwd = os.getcwd()
            try:
                os.chdir(tmpdir)
                settings = PassoffSettings()

                assert settings.log_level == "INFO"
                assert settings.artifacts_dir == "grading/artifacts"
                assert settings.zero_denominator_policy is ZeroDenominatorPolicy.full_credit
                assert settings.max_tree_depth == 128

                # Late penalty
                assert settings.max_late_days == 5
                assert settings.per_day_late_penalty == 0.1

                # Commit requirements
                assert settings.required_commits == 10
                assert settings.required_days_with_commits == 3
                assert settings.minimum_changed_lines_per_commit == 5
                assert settings.commit_verification_penalty_pct == 10

                assert settings.extra == {}
            finally:
                os.chdir(original_cwd)
                os.environ.update(env_backup)

    def test_env_prefix(self) -> None:
        """Test that PASSOFF_ environment variables are loaded."""
        with patch.dict(
            os.environ,
            {
                "PASSOFF_LOG_LEVEL": "DEBUG",
                "PASSOFF_ARTIFACTS_DIR": "/custom/artifacts",
                "PASSOFF_ZERO_DENOMINATOR_POLICY": "zero",
                "PASSOFF_MAX_LATE_DAYS": "3",
            },
            clear=False,
        ):
            settings = PassoffSettings()

            assert settings.log_level == "DEBUG"
            assert settings.artifacts_dir == "/custom/artifacts"
            assert settings.zero_denominator_policy is ZeroDenominatorPolicy.zero
            assert settings.max_late_days == 3

    def test_env_file_loading(self) -> None:
        """Test that settings are loaded from .env file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            env_file = Path(tmpdir) / ".env"
            env_file.write_text("PASSOFF_LOG_LEVEL=DEBUG\nPASSOFF_REQUIRED_COMMITS=4\n")

            original_cwd = os.getcwd()
            env_backup = {v: os.environ.pop(v) for v in _ENV_VARS if v in os.environ}
            try:
                os.chdir(tmpdir)
                settings = PassoffSettings()

                assert settings.log_level == "DEBUG"
                assert settings.required_commits == 4
            finally:
                os.chdir(original_cwd)
                os.environ.update(env_backup)

    def test_env_var_overrides_env_file(self) -> None:
        """Test that environment variables override .env file values."""
        with tempfile.TemporaryDirectory() as tmpdir:
            env_file = Path(tmpdir) / ".env"
            env_file.write_text("PASSOFF_LOG_LEVEL=ERROR\n")

            with patch.dict(os.environ, {"PASSOFF_LOG_LEVEL": "WARNING"}, clear=False):
                original_cwd = os.getcwd()
                try:
                    os.chdir(tmpdir)
                    assert PassoffSettings().log_level == "WARNING"
                finally:
                    os.chdir(original_cwd)

    def test_extra_fields_ignored(self) -> None:
        """Test that unknown PASSOFF_ variables are ignored."""
        with patch.dict(os.environ, {"PASSOFF_UNKNOWN_FIELD": "x"}, clear=False):
            settings = PassoffSettings()
            assert not hasattr(settings, "unknown_field")

    def test_rejects_out_of_range_penalty(self) -> None:
        with pytest.raises(ValidationError):
            PassoffSettings(per_day_late_penalty=1.5)

    def test_rejects_tree_depth_past_serializable_limit(self) -> None:
        with pytest.raises(ValidationError):
            PassoffSettings(max_tree_depth=512)

    def test_rejects_unknown_policy(self) -> None:
        with pytest.raises(ValidationError):
            PassoffSettings(zero_denominator_policy="half")


class TestGetSettings:
    """Test the cached accessors."""

    def test_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_reload_picks_up_environment(self) -> None:
        with patch.dict(os.environ, {"PASSOFF_MAX_LATE_DAYS": "2"}, clear=False):
            assert reload_settings().max_late_days == 2
        reload_settings()
