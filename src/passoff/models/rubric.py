# rubric.py

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from passoff.models.test_node import TestResult

# Current canonical record shape. Version 1 records carried the deprecated
# singular category slots next to (or instead of) the keyed items.
RUBRIC_VERSION = 2


class RubricType(str, Enum):
    """The four graded categories. Values double as persisted keys."""

    PASSOFF_TESTS = "PASSOFF_TESTS"
    UNIT_TESTS = "UNIT_TESTS"
    QUALITY = "QUALITY"
    GIT_COMMITS = "GIT_COMMITS"


_CAMEL = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

# ─────────────────────────────────────────────────────────────────────────────
# Rubric items
# ─────────────────────────────────────────────────────────────────────────────


class RubricItemResults(BaseModel):
    """Evidence and score for one category."""

    model_config = _CAMEL

    notes: str = ""
    score: float = Field(default=0.0, ge=0.0)
    possible_points: float = Field(default=0.0, ge=0.0)
    test_results: TestResult | None = None
    # for categories not backed by a test tree (manual quality review, commits)
    text_results: str | None = None

    @property
    def has_error(self) -> bool:
        return self.test_results is not None and self.test_results.has_error


class RubricItem(BaseModel):
    """One gradable category: labels plus results."""

    model_config = _CAMEL

    category: str
    criteria: str = ""
    results: RubricItemResults = Field(default_factory=RubricItemResults)

    def __repr__(self) -> str:  # pragma: no cover - trivial
        r = self.results
        return f"RubricItem(category={self.category!r}, score={r.score}/{r.possible_points})"


class RubricItems(BaseModel):
    """Category items keyed by `RubricType` value.

    Every slot is optional so historical records can be read; composing a new
    rubric requires all four (see `passoff.composer`).
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    passoff_tests: RubricItem | None = Field(default=None, alias="PASSOFF_TESTS")
    unit_tests: RubricItem | None = Field(default=None, alias="UNIT_TESTS")
    quality: RubricItem | None = Field(default=None, alias="QUALITY")
    git_commits: RubricItem | None = Field(default=None, alias="GIT_COMMITS")

    def get(self, rubric_type: RubricType) -> RubricItem | None:
        return getattr(self, _SLOTS[rubric_type])

    def present(self) -> Iterator[tuple[RubricType, RubricItem]]:
        """Present items in category declaration order."""
        for rubric_type in RubricType:
            item = self.get(rubric_type)
            if item is not None:
                yield rubric_type, item


_SLOTS: dict[RubricType, str] = {
    RubricType.PASSOFF_TESTS: "passoff_tests",
    RubricType.UNIT_TESTS: "unit_tests",
    RubricType.QUALITY: "quality",
    RubricType.GIT_COMMITS: "git_commits",
}

# Deprecated singular slots of version 1 records, accepted on read only.
LEGACY_FIELDS: dict[str, RubricType] = {
    "passoffTests": RubricType.PASSOFF_TESTS,
    "passoff_tests": RubricType.PASSOFF_TESTS,
    "unitTests": RubricType.UNIT_TESTS,
    "unit_tests": RubricType.UNIT_TESTS,
    "quality": RubricType.QUALITY,
}


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    return value


def _same_item(a: Any, b: Any) -> bool:
    """True when two item representations validate to the same item."""
    try:
        return RubricItem.model_validate(a) == RubricItem.model_validate(b)
    except PydanticValidationError:
        return _plain(a) == _plain(b)


def _item_score(value: Any) -> float:
    if isinstance(value, RubricItem):
        return value.results.score
    if isinstance(value, dict):
        return float((value.get("results") or {}).get("score") or 0.0)
    return 0.0


# ─────────────────────────────────────────────────────────────────────────────
# Rubric
# ─────────────────────────────────────────────────────────────────────────────


class Rubric(BaseModel):
    """
    The full scoring record of one submission.

    Only the keyed `items` shape is ever serialized. Version 1 records are
    migrated on read: their singular slots are folded into `items` and are
    then reachable through the read-only `passoff_tests` / `unit_tests` /
    `quality` properties.
    """

    model_config = _CAMEL

    items: RubricItems = Field(default_factory=RubricItems)
    total_score: float | None = Field(default=None, ge=0.0)
    passed: bool = False
    notes: str = ""
    version: int = RUBRIC_VERSION

    @model_validator(mode="before")
    @classmethod
    def _migrate_legacy(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        legacy = {k: data[k] for k in LEGACY_FIELDS if k in data}
        if not legacy:
            return data
        data = {k: v for k, v in data.items() if k not in LEGACY_FIELDS}
        items = data.get("items") or {}
        items = _plain(items) if isinstance(items, BaseModel) else dict(items)
        for key, value in legacy.items():
            if value is None:
                continue
            slot = LEGACY_FIELDS[key].value
            current = items.get(slot)
            if current is None:
                items[slot] = value
            elif not _same_item(current, value):
                raise ValueError(
                    f"conflicting rubric representations: legacy '{key}' differs from items.{slot}"
                )
        data["items"] = items
        if data.get("totalScore") is None and data.get("total_score") is None:
            data["totalScore"] = sum(_item_score(v) for v in items.values() if v is not None)
        data["version"] = RUBRIC_VERSION
        return data

    @field_validator("version")
    @classmethod
    def _known_version(cls, v: int) -> int:
        if v > RUBRIC_VERSION:
            raise ValueError(f"unsupported rubric record version {v} (max {RUBRIC_VERSION})")
        return RUBRIC_VERSION

    @model_validator(mode="after")
    def _fill_total(self) -> Rubric:
        if self.total_score is None:
            self.total_score = sum(item.results.score for _, item in self.items.present())
        return self

    # read-only compatibility view of the version 1 singular slots
    @property
    def passoff_tests(self) -> RubricItem | None:
        return self.items.passoff_tests

    @property
    def unit_tests(self) -> RubricItem | None:
        return self.items.unit_tests

    @property
    def quality(self) -> RubricItem | None:
        return self.items.quality

    @property
    def has_error(self) -> bool:
        return any(item.results.has_error for _, item in self.items.present())

    def __str__(self) -> str:  # pragma: no cover - trivial
        scores = {t.value: item.results.score for t, item in self.items.present()}
        return f"Rubric(total={self.total_score}, passed={self.passed}, scores={scores})"
