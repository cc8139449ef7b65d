from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from passoff.models.phase import Phase, VerifiedStatus
from passoff.models.rubric import Rubric

# ─────────────────────────────────────────────────────────────────────────────
# Submission (one graded attempt)
# ─────────────────────────────────────────────────────────────────────────────


class Submission(BaseModel):
    """
    One graded attempt of a student for a phase.

    Identity fields (repo URL, head hash, timestamp) are opaque values handed
    over by source control. Status changes go through `passoff.verification`
    or `passoff.ledger`, which return new instances.
    """

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    net_id: str = Field(..., min_length=1)
    repo_url: str
    head_hash: str
    timestamp: datetime
    phase: Phase
    score: float = Field(default=0.0, ge=0.0)
    notes: str = ""
    rubric: Rubric | None = None
    passed: bool = False
    admin: bool = False
    verified_status: VerifiedStatus = VerifiedStatus.Unapproved
    num_commits: int | None = Field(default=None, ge=0)

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        # naive timestamps are taken as UTC
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)

    @property
    def key(self) -> tuple[str, Phase]:
        return (self.net_id, self.phase)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return (
            f"Submission({self.net_id}, {self.phase.value}, {self.head_hash[:8]}, "
            f"score={self.score:g}, passed={self.passed}, status={self.verified_status.value})"
        )
