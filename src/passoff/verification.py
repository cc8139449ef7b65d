"""Verification-status state machine of a single submission.

Transitions are pure: each returns a new `Submission` and raises `StateError`
without touching its input when the move is not allowed.

    Unapproved ──auto (rubric passed + checks ok)──▶ ApprovedAutomatically
    Unapproved ──admin────────────────────────────▶ ApprovedManually
    any ─────────newer sibling approved───────────▶ PreviouslyApproved
    any ─────────explicit re-grade────────────────▶ Unapproved

Approval states are terminal for a submission except for being superseded.
Moving back to Unapproved only happens through `begin_regrade`.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from pydantic import BaseModel, ConfigDict

from passoff.errors import StateError
from passoff.models.phase import VerifiedStatus
from passoff.models.rubric import Rubric
from passoff.models.submission import Submission

log = logging.getLogger("passoff.verification")

_S = VerifiedStatus

# Allowed targets per current status, excluding the explicit re-grade reset.
TRANSITIONS: dict[VerifiedStatus, frozenset[VerifiedStatus]] = {
    _S.Unapproved: frozenset(
        {_S.ApprovedAutomatically, _S.ApprovedManually, _S.PreviouslyApproved}
    ),
    _S.ApprovedAutomatically: frozenset({_S.PreviouslyApproved}),
    _S.ApprovedManually: frozenset({_S.PreviouslyApproved}),
    _S.PreviouslyApproved: frozenset({_S.PreviouslyApproved}),
}


class ApprovalCheck(Protocol):
    """An automatic-approval precondition evaluated outside this package."""

    @property
    def name(self) -> str: ...

    @property
    def ok(self) -> bool: ...

    @property
    def message(self) -> str: ...


class PreconditionResult(BaseModel):
    """Plain approval check, e.g. a plagiarism scan outcome."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    ok: bool
    message: str = ""


def _move(submission: Submission, target: VerifiedStatus) -> Submission:
    current = submission.verified_status
    if target not in TRANSITIONS[current]:
        raise StateError(
            f"cannot move submission {submission.head_hash!r} of {submission.net_id} "
            f"({submission.phase.value}) from {current.value} to {target.value}"
        )
    log.info(
        "%s %s %s: %s -> %s",
        submission.net_id,
        submission.phase.value,
        submission.head_hash[:8],
        current.value,
        target.value,
    )
    return submission.model_copy(update={"verified_status": target})


def _require_rubric(submission: Submission, action: str) -> Rubric:
    if submission.rubric is None:
        raise StateError(f"cannot {action} submission {submission.head_hash!r}: it has no rubric yet")
    return submission.rubric


def failed_checks(checks: Iterable[ApprovalCheck]) -> list[ApprovalCheck]:
    return [c for c in checks if not c.ok]


def can_approve_automatically(submission: Submission, checks: Iterable[ApprovalCheck] = ()) -> bool:
    """Whether `approve_automatically` would succeed."""
    return (
        submission.rubric is not None
        and submission.rubric.passed
        and _S.ApprovedAutomatically in TRANSITIONS[submission.verified_status]
        and not failed_checks(checks)
    )


def approve_automatically(
    submission: Submission, checks: Iterable[ApprovalCheck] = ()
) -> Submission:
    """Approve a passing submission whose preconditions all hold."""
    if not _require_rubric(submission, "approve").passed:
        raise StateError(
            f"submission {submission.head_hash!r} did not pass its rubric; only an admin can approve it"
        )
    failing = failed_checks(checks)
    if failing:
        names = ", ".join(c.name for c in failing)
        raise StateError(f"automatic approval preconditions failed: {names}")
    return _move(submission, _S.ApprovedAutomatically)


def approve_manually(submission: Submission) -> Submission:
    """Admin approval; allowed whether or not the rubric passed."""
    _require_rubric(submission, "approve")
    return _move(submission, _S.ApprovedManually)


def supersede(submission: Submission) -> Submission:
    """Mark a submission as replaced by a newer approved sibling."""
    return _move(submission, _S.PreviouslyApproved)


def begin_regrade(submission: Submission) -> Submission:
    """Explicitly reset a submission to Unapproved before grading it again."""
    if submission.verified_status is not _S.Unapproved:
        log.info(
            "%s %s %s: re-grade resets %s -> Unapproved",
            submission.net_id,
            submission.phase.value,
            submission.head_hash[:8],
            submission.verified_status.value,
        )
    return submission.model_copy(update={"verified_status": _S.Unapproved})
