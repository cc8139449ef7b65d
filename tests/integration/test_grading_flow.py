"""End-to-end grading: request file to ledger, records and artifacts."""

import tempfile
from pathlib import Path

import pytest

from passoff.api import grade_and_record
from passoff.io.artifacts import write_submission_artifacts
from passoff.io.records import submission_from_json
from passoff.ledger import SubmissionLedger
from passoff.models.phase import Phase, VerifiedStatus
from passoff.settings import PassoffSettings
from passoff.utils import load_grading_request_yaml

REQUEST_TEMPLATE = """
net_id: cosmo
repo_url: https://example.com/cosmo/chess.git
head_hash: {head_hash}
timestamp: {timestamp}
phase: Phase4
days_late: {days_late}
commit_history:
  total_commits: 11
  days_with_commits: 4
  changes_per_commit: [12, 40, 8, 9, 30, 22, 6, 15, 18, 7, 50]
config:
  phase: Phase4
  items:
    PASSOFF_TESTS: {{category: Functionality, points: 100, threshold: 60}}
    UNIT_TESTS: {{category: Unit Tests, points: 25, threshold: 10}}
    QUALITY: {{category: Code Quality, points: 10}}
    GIT_COMMITS: {{category: Git Commits, points: 5}}
categories:
  PASSOFF_TESTS:
    test_results:
      root:
        testName: Passoff Tests
        children:
          - testName: DatabaseTests
            children:
              - {{testName: clear, passed: true}}
              - {{testName: insert, passed: true}}
              - {{testName: query, passed: true}}
              - {{testName: update, passed: false, errorMessage: expected 2 rows}}
          - testName: Extra Credit
            ecCategory: persistence
            children:
              - {{testName: reload, passed: true, ecCategory: persistence}}
  UNIT_TESTS:
    test_results:
      root:
        testName: Unit Tests
        children:
          - {{testName: daoClear, passed: true}}
          - {{testName: daoInsert, passed: true}}
  QUALITY:
    score: 9
    text_results: Consistent naming; long methods in the DAO.
"""


@pytest.mark.integration
class TestGradingFlow:
    """A student submits twice; the newer passing submission becomes the approved one."""

    def _request(self, tmpdir: str, head_hash: str, timestamp: str, days_late: int = 0):
        path = Path(tmpdir) / f"{head_hash}.yaml"
        path.write_text(
            REQUEST_TEMPLATE.format(head_hash=head_hash, timestamp=timestamp, days_late=days_late)
        )
        return load_grading_request_yaml(path)

    def test_two_submissions(self) -> None:
        settings = PassoffSettings()
        ledger = SubmissionLedger()

        with tempfile.TemporaryDirectory() as tmpdir:
            first = grade_and_record(
                self._request(tmpdir, "aaaa1111", "2024-03-01T10:00:00Z"), ledger, settings=settings
            )
            second = grade_and_record(
                self._request(tmpdir, "bbbb2222", "2024-03-02T10:00:00Z", days_late=1),
                ledger,
                settings=settings,
            )

            assert first.rubric.items.passoff_tests.results.score == pytest.approx(75.0)
            assert "Extra credit tests: 1/1 passed (complete: persistence)" in (
                first.rubric.items.passoff_tests.results.notes
            )
            assert first.rubric.total_score == pytest.approx(75 + 25 + 9 + 5)
            # one day late: 10% of the 140 possible points
            assert second.score == pytest.approx(114 - 14.0)

            assert second.verified_status is VerifiedStatus.ApprovedAutomatically
            stored_first = ledger.get("cosmo", Phase.Phase4, "aaaa1111")
            assert stored_first.verified_status is VerifiedStatus.PreviouslyApproved

            out = write_submission_artifacts(Path(tmpdir) / "artifacts", second)
            reloaded = submission_from_json((out / "submission.json").read_text(encoding="utf-8"))
            assert reloaded == second
