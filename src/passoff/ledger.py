"""In-memory keeper of submissions with per-(student, phase) serialization.

Approving a submission may demote its siblings, so every approval for a
``(net_id, phase)`` pair runs under that pair's lock: two grading runs for the
same student and phase cannot both decide they are the newest approved
submission. Different pairs never contend.

Invariant kept per pair: at most one submission is in an approved state, and
it is the newest approved one by timestamp.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable

from passoff.errors import StateError
from passoff.models.phase import Phase, is_approved
from passoff.models.submission import Submission
from passoff.verification import (
    ApprovalCheck,
    approve_automatically,
    approve_manually,
    begin_regrade,
    supersede,
)

log = logging.getLogger("passoff.ledger")

Key = tuple[str, Phase]


class SubmissionLedger:
    """Stores submissions and applies approvals with sibling supersession."""

    def __init__(self, submissions: Iterable[Submission] = ()) -> None:
        self._records: dict[Key, dict[str, Submission]] = {}
        self._locks: dict[Key, threading.Lock] = {}
        self._guard = threading.Lock()
        for s in submissions:
            self.record(s)

    def _lock(self, key: Key) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def _get(self, key: Key, head_hash: str) -> Submission:
        try:
            return self._records[key][head_hash]
        except KeyError:
            raise StateError(
                f"no submission {head_hash!r} recorded for {key[0]} ({key[1].value})"
            ) from None

    # ── reads ────────────────────────────────────────────────────────────────

    def get(self, net_id: str, phase: Phase, head_hash: str) -> Submission:
        key = (net_id, phase)
        with self._lock(key):
            return self._get(key, head_hash)

    def submissions_for(self, net_id: str, phase: Phase) -> list[Submission]:
        """All submissions of a student for a phase, oldest first."""
        key = (net_id, phase)
        with self._lock(key):
            return sorted(self._records.get(key, {}).values(), key=lambda s: s.timestamp)

    def latest_approved(self, net_id: str, phase: Phase) -> Submission | None:
        approved = [s for s in self.submissions_for(net_id, phase) if is_approved(s.verified_status)]
        return approved[-1] if approved else None

    # ── writes ───────────────────────────────────────────────────────────────

    def record(self, submission: Submission) -> Submission:
        """Store a graded submission; the same commit cannot be recorded twice."""
        key = submission.key
        with self._lock(key):
            bucket = self._records.setdefault(key, {})
            if submission.head_hash in bucket:
                raise StateError(
                    f"{submission.net_id} already submitted commit {submission.head_hash!r} "
                    f"for {submission.phase.value}; make a new commit before submitting again"
                )
            bucket[submission.head_hash] = submission
            log.debug("recorded %s", submission)
            return submission

    def regrade(self, submission: Submission) -> Submission:
        """Replace a recorded submission with a fresh grading, reset to Unapproved."""
        key = submission.key
        with self._lock(key):
            self._get(key, submission.head_hash)
            reset = begin_regrade(submission)
            self._records[key][submission.head_hash] = reset
            return reset

    def approve_automatically(
        self,
        net_id: str,
        phase: Phase,
        head_hash: str,
        checks: Iterable[ApprovalCheck] = (),
    ) -> Submission:
        checks = list(checks)
        return self._approve((net_id, phase), head_hash, lambda s: approve_automatically(s, checks))

    def approve_manually(self, net_id: str, phase: Phase, head_hash: str) -> Submission:
        return self._approve((net_id, phase), head_hash, approve_manually)

    def _approve(
        self, key: Key, head_hash: str, transition: Callable[[Submission], Submission]
    ) -> Submission:
        with self._lock(key):
            current = self._get(key, head_hash)
            approved = transition(current)

            # Compute every change first; nothing is stored if any step raises.
            updates: dict[str, Submission] = {}
            newer_exists = False
            for sibling in self._records[key].values():
                if sibling.head_hash == head_hash or not is_approved(sibling.verified_status):
                    continue
                if sibling.timestamp <= approved.timestamp:
                    updates[sibling.head_hash] = supersede(sibling)
                else:
                    newer_exists = True
            if newer_exists:
                approved = supersede(approved)
            updates[head_hash] = approved

            self._records[key].update(updates)
            for h in updates:
                if h != head_hash:
                    log.info("%s %s: %s superseded by %s", key[0], key[1].value, h[:8], head_hash[:8])
            return approved
