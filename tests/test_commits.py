"""Tests for passoff.commits module."""

from passoff.commits import (
    commit_rubric_item,
    requirements_from_settings,
    skipped_verification,
    verify_commits,
)
from passoff.models.commits import CommitHistory, CommitRequirements
from passoff.models.config import RubricConfigItem
from passoff.settings import PassoffSettings

REQ = CommitRequirements(
    required_commits=10, required_days_with_commits=3, minimum_changed_lines_per_commit=5
)
CONFIG = RubricConfigItem(category="Git Commits", criteria="Frequent commits", points=5)


def _history(**kw) -> CommitHistory:
    data = {"total_commits": 12, "days_with_commits": 4, "changes_per_commit": [20] * 12}
    data.update(kw)
    return CommitHistory(**data)


class TestVerifyCommits:
    """Commit requirements."""

    def test_good_history(self) -> None:
        result = verify_commits(_history(), REQ)

        assert result.verified
        assert result.ok
        assert result.failure_messages == []
        assert result.penalty_pct == 0
        assert result.significant_commits == 12

    def test_not_enough_commits(self) -> None:
        result = verify_commits(_history(total_commits=4, changes_per_commit=[20] * 4), REQ)

        assert not result.verified
        assert result.failure_messages[0] == "Not enough commits to pass off (4/10)."
        assert "talk to a TA" in result.message
        assert result.penalty_pct == 10

    def test_insignificant_commits(self) -> None:
        result = verify_commits(_history(changes_per_commit=[20] * 6 + [1] * 6), REQ)

        assert not result.verified
        assert "too insignificant for credit (6/10)" in result.failure_messages[0]

    def test_too_few_days(self) -> None:
        result = verify_commits(_history(days_with_commits=1), REQ)
        assert "Did not commit on enough days to pass off (1/3)." in result.failure_messages

    def test_suspicious_histories(self) -> None:
        result = verify_commits(
            _history(commits_in_future=True, commits_in_past=True, commits_in_order=False), REQ
        )
        suspicious = [m for m in result.failure_messages if m.startswith("Suspicious")]
        assert len(suspicious) == 3

    def test_requirements_from_settings(self) -> None:
        req = requirements_from_settings(PassoffSettings(required_commits=2, required_days_with_commits=1))
        result = verify_commits(_history(total_commits=2, changes_per_commit=[9, 9], days_with_commits=1), req)
        assert result.verified

    def test_skipped(self) -> None:
        assert skipped_verification().verified


class TestCommitRubricItem:
    def test_verified_gets_points(self) -> None:
        item = commit_rubric_item(verify_commits(_history(), REQ), CONFIG)

        assert item.category == "Git Commits"
        assert item.results.score == 5
        assert item.results.possible_points == 5
        assert item.results.text_results == "12 commits on 4 days"
        assert item.results.test_results is None

    def test_unverified_gets_nothing(self) -> None:
        result = verify_commits(_history(days_with_commits=1), REQ)
        item = commit_rubric_item(result, CONFIG)

        assert item.results.score == 0
        assert item.results.notes == "Commit history not verified"
        assert item.results.text_results == result.message
