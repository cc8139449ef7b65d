from pydantic import BaseModel, Field, ConfigDict

# ─────────────────────────────────────────────────────────────────────────────
# Commit history (summary handed over by source control)
# ─────────────────────────────────────────────────────────────────────────────


class CommitHistory(BaseModel):
    """Commit statistics between the previous passing submission and this one."""

    model_config = ConfigDict(extra="forbid")

    total_commits: int = Field(default=0, ge=0)
    days_with_commits: int = Field(default=0, ge=0)
    # lines changed by each commit, in history order
    changes_per_commit: list[int] = Field(default_factory=list)
    commits_in_future: bool = False
    commits_in_past: bool = False
    commits_in_order: bool = True


class CommitRequirements(BaseModel):
    """Thresholds a commit history must meet."""

    model_config = ConfigDict(extra="forbid")

    required_commits: int = Field(default=10, ge=0)
    required_days_with_commits: int = Field(default=3, ge=0)
    minimum_changed_lines_per_commit: int = Field(default=5, ge=0)
    penalty_pct: int = Field(default=10, ge=0, le=100)


class CommitVerificationResult(BaseModel):
    """Outcome of checking a commit history; doubles as an approval check."""

    model_config = ConfigDict(extra="forbid")

    verified: bool
    num_commits: int = Field(default=0, ge=0)
    days_with_commits: int = Field(default=0, ge=0)
    significant_commits: int = Field(default=0, ge=0)
    penalty_pct: int = Field(default=0, ge=0, le=100)
    failure_messages: list[str] = Field(default_factory=list)

    # approval-check protocol (see passoff.verification.ApprovalCheck)
    @property
    def name(self) -> str:
        return "commit history"

    @property
    def ok(self) -> bool:
        return self.verified

    @property
    def message(self) -> str:
        return "\n".join(self.failure_messages)
