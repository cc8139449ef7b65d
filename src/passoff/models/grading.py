from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict, model_validator

from passoff.models.commits import CommitHistory, CommitVerificationResult
from passoff.models.config import RubricConfig
from passoff.models.phase import Phase
from passoff.models.rubric import RubricType
from passoff.models.submission import Submission
from passoff.models.test_node import TestResult

# ─────────────────────────────────────────────────────────────────────────────
# Grading input (the YAML / JSON submission file maps to this)
# ─────────────────────────────────────────────────────────────────────────────


class CategoryInput(BaseModel):
    """Evidence for one category: a test result, or a reviewer's score and text."""

    model_config = ConfigDict(extra="forbid")

    test_results: TestResult | None = None
    text_results: str | None = None
    score: float | None = Field(default=None, ge=0.0)
    notes: str = ""

    @model_validator(mode="after")
    def _has_evidence(self) -> "CategoryInput":
        if self.test_results is None and self.score is None:
            raise ValueError("category needs either test_results or a reviewer score")
        return self


class GradingRequest(BaseModel):
    """Everything needed to grade one submission."""

    model_config = ConfigDict(extra="forbid")

    net_id: str = Field(..., min_length=1)
    repo_url: str
    head_hash: str
    timestamp: datetime
    phase: Phase
    admin: bool = False
    days_late: int = Field(default=0, ge=0)
    config: RubricConfig
    categories: dict[RubricType, CategoryInput] = Field(default_factory=dict)
    # summary from source control; commits are not checked when absent
    commit_history: CommitHistory | None = None


class GradingOutcome(BaseModel):
    """A graded submission with the commit check used for approval."""

    model_config = ConfigDict(extra="forbid")

    submission: Submission
    commit_verification: CommitVerificationResult
