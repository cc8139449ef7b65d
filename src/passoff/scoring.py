"""Turning one category's evidence into a score.

A category is backed either by a test tree (`TestResult`) or by free text
whose score comes from an external reviewer. Tree-backed categories score
``possible_points * passed / (passed + failed)`` on the aggregated root; a
harness error zeroes the category. Extra credit is reported in the notes and
never raises the score.
"""

from __future__ import annotations

import logging

from passoff.aggregation import extra_credit_counts
from passoff.errors import ValidationError
from passoff.models.rubric import RubricItem
from passoff.models.test_node import TestNode, TestResult
from passoff.settings import PassoffSettings, ZeroDenominatorPolicy, get_settings

log = logging.getLogger("passoff.scoring")


def score_fraction(root: TestNode, policy: ZeroDenominatorPolicy) -> float:
    """Fraction of required tests passed on an aggregated root."""
    run = root.num_tests_passed + root.num_tests_failed
    if run == 0:
        return 1.0 if policy is ZeroDenominatorPolicy.full_credit else 0.0
    return root.num_tests_passed / run


def _extra_credit_line(result: TestResult) -> str | None:
    passed = failed = 0
    categories: dict[str, tuple[int, int]] = {}
    for tree in (result.root, result.extra_credit):
        if tree is None:
            continue
        passed += tree.num_extra_credit_passed
        failed += tree.num_extra_credit_failed
        for cat, (cat_passed, cat_run) in extra_credit_counts(tree).items():
            prev_passed, prev_run = categories.get(cat, (0, 0))
            categories[cat] = (prev_passed + cat_passed, prev_run + cat_run)
    if passed + failed == 0:
        return None
    line = f"Extra credit tests: {passed}/{passed + failed} passed"
    complete = sorted(c for c, (p, run) in categories.items() if run and p == run)
    if complete:
        line += f" (complete: {', '.join(complete)})"
    return line


def summarize_tests(result: TestResult | None) -> str:
    """Human summary of an aggregated test result."""
    if result is not None and result.has_error:
        return f"Tests could not be run: {result.error}"
    if result is None or result.root is None:
        return "No tests were run"
    root = result.root
    lines = [
        "All required tests passed" if root.num_tests_failed == 0 else "Some required tests failed"
    ]
    ec = _extra_credit_line(result)
    if ec:
        lines.append(ec)
    return "\n".join(lines)


def _check_range(score: float, possible_points: float, category: str) -> None:
    if possible_points < 0:
        raise ValidationError(f"possible points {possible_points:g} is negative", category=category)
    if not 0 <= score <= possible_points:
        raise ValidationError(
            f"score {score:g} outside [0, {possible_points:g}]", category=category
        )


def evaluate_item(
    item: RubricItem,
    *,
    possible_points: float | None = None,
    policy: ZeroDenominatorPolicy | None = None,
    settings: PassoffSettings | None = None,
) -> RubricItem:
    """Return a copy of ``item`` with its score (and notes) computed.

    ``possible_points`` defaults to the item's own ceiling; ``policy`` to the
    configured zero-denominator policy.
    """
    s = settings or get_settings()
    results = item.results
    ceiling = results.possible_points if possible_points is None else possible_points
    use_policy = policy or s.zero_denominator_policy
    tests = results.test_results

    if tests is None:
        _check_range(results.score, ceiling, item.category)
        log.debug("%s: free-text score %g/%g passed through", item.category, results.score, ceiling)
        return item.model_copy(
            update={"results": results.model_copy(update={"possible_points": ceiling})}
        )

    if ceiling < 0:
        raise ValidationError(f"possible points {ceiling:g} is negative", category=item.category)

    if tests.has_error:
        score = 0.0
        aggregated = tests
    else:
        aggregated = tests.aggregated(max_depth=s.max_tree_depth)
        if aggregated.root is None:
            score = ceiling if use_policy is ZeroDenominatorPolicy.full_credit else 0.0
        else:
            score = ceiling * score_fraction(aggregated.root, use_policy)

    notes = summarize_tests(aggregated)
    log.debug("%s: scored %g/%g", item.category, score, ceiling)
    return item.model_copy(
        update={
            "results": results.model_copy(
                update={
                    "score": score,
                    "possible_points": ceiling,
                    "test_results": aggregated,
                    "notes": notes,
                }
            )
        }
    )


# ─────────────────────────────────────────────────────────────────────────────
# Late penalty
# ─────────────────────────────────────────────────────────────────────────────


def late_penalty_fraction(days_late: int, settings: PassoffSettings | None = None) -> float:
    """Share of the possible points taken off a late submission (0.0 when on time)."""
    s = settings or get_settings()
    if days_late < 0:
        raise ValidationError(f"days late must be non-negative, got {days_late}")
    return min(days_late, s.max_late_days) * s.per_day_late_penalty


def apply_late_penalty(
    score: float,
    days_late: int,
    settings: PassoffSettings | None = None,
    possible_points: float | None = None,
) -> float:
    """Subtract the late deduction from ``score``, never going below 0.

    The deduction is a share of the rubric's possible points; without them the
    score is taken to be out of 100.
    """
    total = 100.0 if possible_points is None else possible_points
    return max(0.0, score - late_penalty_fraction(days_late, settings) * total)


def late_penalty_note(days_late: int, settings: PassoffSettings | None = None) -> str:
    """Empty when on time, e.g. ``"2 days late. -20%"`` otherwise."""
    if days_late <= 0:
        return ""
    pct = round(late_penalty_fraction(days_late, settings) * 100)
    return f"{days_late} days late. -{pct}%"
