from pydantic import BaseModel, Field, ConfigDict, model_validator

from passoff.models.phase import Phase
from passoff.models.rubric import RubricType

# ─────────────────────────────────────────────────────────────────────────────
# Per-phase rubric configuration (points and passing thresholds)
# ─────────────────────────────────────────────────────────────────────────────


class RubricConfigItem(BaseModel):
    """Labels, ceiling and passing threshold of one category."""

    model_config = ConfigDict(extra="forbid")

    category: str = Field(..., min_length=1)
    criteria: str = Field(default="")
    points: float = Field(..., ge=0.0)
    threshold: float = Field(default=0.0, ge=0.0)

    @model_validator(mode="after")
    def _threshold_within_points(self) -> "RubricConfigItem":
        if self.threshold > self.points:
            raise ValueError(
                f"threshold {self.threshold:g} exceeds possible points {self.points:g} "
                f"for category {self.category!r}"
            )
        return self


class RubricConfig(BaseModel):
    """Rubric configuration for one phase, keyed by category."""

    model_config = ConfigDict(extra="forbid")

    phase: Phase | None = None
    items: dict[RubricType, RubricConfigItem] = Field(default_factory=dict)

    def item(self, rubric_type: RubricType) -> RubricConfigItem | None:
        return self.items.get(rubric_type)

    def thresholds(self) -> dict[RubricType, float]:
        return {t: c.threshold for t, c in self.items.items()}

    def total_possible_points(self) -> float:
        return sum(c.points for c in self.items.values())
