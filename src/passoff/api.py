import logging
from pathlib import Path
from typing import Iterable

from passoff.commits import (
    commit_rubric_item,
    requirements_from_settings,
    skipped_verification,
    verify_commits,
)
from passoff.composer import compose_rubric
from passoff.errors import CompositionError
from passoff.ledger import SubmissionLedger
from passoff.models.commits import CommitVerificationResult
from passoff.models.config import RubricConfig
from passoff.models.grading import CategoryInput, GradingOutcome, GradingRequest
from passoff.models.phase import VerifiedStatus, is_graded
from passoff.models.rubric import RubricItem, RubricItemResults, RubricType
from passoff.models.submission import Submission
from passoff.scoring import apply_late_penalty, evaluate_item, late_penalty_note
from passoff.settings import PassoffSettings, get_settings
from passoff.utils import load_grading_request_yaml
from passoff.verification import ApprovalCheck, can_approve_automatically

log = logging.getLogger("passoff.api")


def _verify(request: GradingRequest, settings: PassoffSettings) -> CommitVerificationResult:
    """Commit check for the request; skipped for quality-only phases or when no history is given."""
    if request.commit_history is None or not is_graded(request.phase):
        return skipped_verification()
    return verify_commits(request.commit_history, requirements_from_settings(settings))


def _category_item(
    rubric_type: RubricType,
    evidence: CategoryInput | None,
    config: RubricConfig,
    commits: CommitVerificationResult,
    settings: PassoffSettings,
) -> RubricItem:
    cfg = config.item(rubric_type)
    if cfg is None:
        raise CompositionError(f"no rubric configuration for category {rubric_type.value}")
    if evidence is None:
        if rubric_type is RubricType.GIT_COMMITS:
            return commit_rubric_item(commits, cfg)
        raise CompositionError(f"no results supplied for required category {rubric_type.value}")
    item = RubricItem(
        category=cfg.category,
        criteria=cfg.criteria,
        results=RubricItemResults(
            notes=evidence.notes,
            score=evidence.score or 0.0,
            possible_points=cfg.points,
            test_results=evidence.test_results,
            text_results=evidence.text_results,
        ),
    )
    return evaluate_item(item, settings=settings)


def grade_submission(request: GradingRequest, *, settings: PassoffSettings | None = None) -> GradingOutcome:
    """Grade one submission: evaluate every category, compose, apply the late penalty.

    The returned submission is always Unapproved; approval is a separate step
    (see `passoff.verification` and `passoff.ledger`).
    """
    s = settings or get_settings()
    commits = _verify(request, s)
    items = {
        t: _category_item(t, request.categories.get(t), request.config, commits, s)
        for t in RubricType
    }
    notes: list[str] = []
    if not commits.verified:
        notes.append(commits.message)
    late = late_penalty_note(request.days_late, s)
    if late:
        notes.append(late)

    rubric = compose_rubric(items, request.config.thresholds(), notes="\n".join(notes))
    score = apply_late_penalty(
        rubric.total_score or 0.0,
        request.days_late,
        s,
        possible_points=request.config.total_possible_points(),
    )
    submission = Submission(
        net_id=request.net_id,
        repo_url=request.repo_url,
        head_hash=request.head_hash,
        timestamp=request.timestamp,
        phase=request.phase,
        score=score,
        notes=rubric.notes,
        rubric=rubric,
        passed=rubric.passed,
        admin=request.admin,
        verified_status=VerifiedStatus.Unapproved,
        num_commits=commits.num_commits if request.commit_history is not None else None,
    )
    log.info("graded %s", submission)
    return GradingOutcome(submission=submission, commit_verification=commits)


def grade_submission_file(path: str | Path, *, settings: PassoffSettings | None = None) -> GradingOutcome:
    """Load a YAML/JSON grading request and grade it."""
    return grade_submission(load_grading_request_yaml(path), settings=settings)


def grade_and_record(
    request: GradingRequest,
    ledger: SubmissionLedger,
    *,
    checks: Iterable[ApprovalCheck] = (),
    settings: PassoffSettings | None = None,
) -> Submission:
    """Grade, store in ``ledger``, and approve automatically when allowed.

    The commit verification is always one of the approval checks; ``checks``
    adds external ones (plagiarism scans and the like).
    """
    outcome = grade_submission(request, settings=settings)
    submission = ledger.record(outcome.submission)
    all_checks = [outcome.commit_verification, *checks]
    if not can_approve_automatically(submission, all_checks):
        return submission
    return ledger.approve_automatically(
        submission.net_id, submission.phase, submission.head_hash, all_checks
    )
