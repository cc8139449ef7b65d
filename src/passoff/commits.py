"""Commit-history requirements and the commit rubric category."""

from __future__ import annotations

import logging

from passoff.models.commits import CommitHistory, CommitRequirements, CommitVerificationResult
from passoff.models.config import RubricConfigItem
from passoff.models.rubric import RubricItem, RubricItemResults
from passoff.settings import PassoffSettings, get_settings

log = logging.getLogger("passoff.commits")


def requirements_from_settings(settings: PassoffSettings | None = None) -> CommitRequirements:
    s = settings or get_settings()
    return CommitRequirements(
        required_commits=s.required_commits,
        required_days_with_commits=s.required_days_with_commits,
        minimum_changed_lines_per_commit=s.minimum_changed_lines_per_commit,
        penalty_pct=s.commit_verification_penalty_pct,
    )


def verify_commits(
    history: CommitHistory, requirements: CommitRequirements | None = None
) -> CommitVerificationResult:
    """Check a commit history against the course's commit requirements."""
    req = requirements or requirements_from_settings()
    num_commits = history.total_commits
    significant = sum(
        1 for lines in history.changes_per_commit if lines >= req.minimum_changed_lines_per_commit
    )
    conditions = [
        (
            num_commits < req.required_commits,
            f"Not enough commits to pass off ({num_commits}/{req.required_commits}).",
        ),
        (
            num_commits >= req.required_commits and significant < req.required_commits,
            "Have some commits, but some of them are too insignificant for credit "
            f"({significant}/{req.required_commits}).",
        ),
        (
            history.days_with_commits < req.required_days_with_commits,
            "Did not commit on enough days to pass off "
            f"({history.days_with_commits}/{req.required_days_with_commits}).",
        ),
        (
            history.commits_in_future,
            "Suspicious commit history. Some commits are authored after the hand in date.",
        ),
        (
            history.commits_in_past,
            "Suspicious commit history. Some commits are authored before the previous phase hash.",
        ),
        (
            not history.commits_in_order,
            "Suspicious commit history. Not all commits are in order.",
        ),
    ]
    messages = [msg for failed, msg in conditions if failed]
    if messages:
        messages.append(
            "Since you did not meet the prerequisites for commit frequency, "
            "you will need to talk to a TA to receive a score."
        )
        messages.append(f"It will come with a {req.penalty_pct}% penalty.")

    result = CommitVerificationResult(
        verified=not messages,
        num_commits=num_commits,
        days_with_commits=history.days_with_commits,
        significant_commits=significant,
        penalty_pct=req.penalty_pct if messages else 0,
        failure_messages=messages,
    )
    log.debug("commit verification: %s", result.model_dump())
    return result


def skipped_verification() -> CommitVerificationResult:
    """Result for phases whose commits are not checked."""
    return CommitVerificationResult(verified=True)


def commit_rubric_item(
    result: CommitVerificationResult, config: RubricConfigItem
) -> RubricItem:
    """Free-text commit category: full points when verified, none otherwise."""
    text = (
        f"{result.num_commits} commits on {result.days_with_commits} days"
        if result.verified
        else result.message
    )
    return RubricItem(
        category=config.category,
        criteria=config.criteria,
        results=RubricItemResults(
            notes="Commit history verified" if result.verified else "Commit history not verified",
            score=config.points if result.verified else 0.0,
            possible_points=config.points,
            text_results=text,
        ),
    )
