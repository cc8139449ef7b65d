"""Merging the four category items into one submission rubric."""

from __future__ import annotations

import logging
from typing import Mapping

from passoff.errors import CompositionError, ValidationError
from passoff.models.rubric import Rubric, RubricItem, RubricItems, RubricType

log = logging.getLogger("passoff.composer")

REQUIRED_CATEGORIES: tuple[RubricType, ...] = tuple(RubricType)


def _rubric_type(key: RubricType | str) -> RubricType:
    if isinstance(key, RubricType):
        return key
    try:
        return RubricType(key)
    except ValueError as ex:
        valid = ", ".join(t.value for t in RubricType)
        raise ValidationError(f"unknown rubric category (expected one of {valid})", category=str(key)) from ex


def _normalize(
    mapping: Mapping[RubricType, float] | Mapping[str, float] | None,
) -> dict[RubricType, float]:
    return {_rubric_type(k): v for k, v in (mapping or {}).items()}


def compose_rubric(
    items: Mapping[RubricType, RubricItem] | Mapping[str, RubricItem],
    thresholds: Mapping[RubricType, float] | Mapping[str, float] | None = None,
    *,
    notes: str = "",
) -> Rubric:
    """Compose a rubric from the four evaluated category items.

    ``thresholds`` maps categories to their passing score; a category without
    one passes at 0. Raises ``CompositionError`` when a required category is
    missing and ``ValidationError`` for unknown keys or out-of-range scores.
    """
    by_type: dict[RubricType, RubricItem] = {}
    for key, item in items.items():
        by_type[_rubric_type(key)] = item
    limits = _normalize(thresholds)

    missing = [t.value for t in REQUIRED_CATEGORIES if by_type.get(t) is None]
    if missing:
        raise CompositionError(f"missing required rubric categories: {', '.join(missing)}")

    scores: dict[RubricType, float] = {}
    errored: set[RubricType] = set()
    for rubric_type in REQUIRED_CATEGORIES:
        item = by_type[rubric_type]
        r = item.results
        if not 0 <= r.score <= r.possible_points:
            raise ValidationError(
                f"score {r.score:g} outside [0, {r.possible_points:g}]", category=rubric_type.value
            )
        scores[rubric_type] = r.score
        if r.has_error:
            errored.add(rubric_type)

    total = sum(scores.values())
    passed = compute_pass(scores=scores, thresholds=limits, errored=errored)

    rubric = Rubric(
        items=RubricItems(
            passoff_tests=by_type[RubricType.PASSOFF_TESTS],
            unit_tests=by_type[RubricType.UNIT_TESTS],
            quality=by_type[RubricType.QUALITY],
            git_commits=by_type[RubricType.GIT_COMMITS],
        ),
        total_score=total,
        passed=passed,
        notes=notes,
    )
    log.debug("composed rubric total=%g passed=%s", total, passed)
    return rubric


def compute_pass(
    *,
    scores: Mapping[RubricType, float],
    thresholds: Mapping[RubricType, float],
    errored: set[RubricType] | frozenset[RubricType] = frozenset(),
) -> bool:
    """Every category reached its threshold and no category harness failed."""
    if errored:
        return False
    for k, th in (thresholds or {}).items():
        if scores.get(k, 0.0) < th:
            return False
    return True
