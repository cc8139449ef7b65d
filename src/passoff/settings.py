# src/passoff/settings.py
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ZeroDenominatorPolicy(str, Enum):
    """What a category scores when its tree holds no scorable tests."""

    full_credit = "full_credit"
    zero = "zero"


class PassoffSettings(BaseSettings):
    """
    Centralized configuration for passoff.

    Convention:
      - All passoff-specific vars use the PASSOFF_ prefix.
      - Grading policy knobs (late penalty, commit requirements, the
        no-tests-run policy) live here so every grading run reads the same
        values without threading them through each call.
    """

    model_config = SettingsConfigDict(
        env_prefix="PASSOFF_",
        env_file=".env",
        extra="ignore",
    )

    # General
    log_level: str = "INFO"
    artifacts_dir: str = "grading/artifacts"

    # Scoring
    zero_denominator_policy: ZeroDenominatorPolicy = ZeroDenominatorPolicy.full_credit
    # JSON records of deeper trees exceed pydantic's serializer nesting limit
    max_tree_depth: int = Field(default=128, gt=0, le=200)

    # Late penalty (fraction of the score removed per day, capped in days)
    max_late_days: int = Field(default=5, ge=0)
    per_day_late_penalty: float = Field(default=0.1, ge=0.0, le=1.0)

    # Commit-history requirements
    required_commits: int = Field(default=10, ge=0)
    required_days_with_commits: int = Field(default=3, ge=0)
    minimum_changed_lines_per_commit: int = Field(default=5, ge=0)
    commit_verification_penalty_pct: int = Field(default=10, ge=0, le=100)

    extra: dict[str, Any] = Field(default_factory=dict)


@lru_cache(maxsize=1)
def get_settings() -> PassoffSettings:
    """
    Load settings once (env/.env) and cache.
    """
    return PassoffSettings()


def reload_settings() -> PassoffSettings:
    """
    Clear cache and reload; useful in tests.
    """
    get_settings.cache_clear()
    return get_settings()
