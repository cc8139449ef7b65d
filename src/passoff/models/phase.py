from enum import Enum

from passoff.errors import ValidationError

# ─────────────────────────────────────────────────────────────────────────────
# Course milestones
# ─────────────────────────────────────────────────────────────────────────────


class Phase(str, Enum):
    """Course milestone a submission targets. Declaration order is course order."""

    Phase0 = "Phase0"
    Phase1 = "Phase1"
    Phase3 = "Phase3"
    Phase4 = "Phase4"
    Phase5 = "Phase5"
    Phase6 = "Phase6"
    Quality = "Quality"


# Every Phase member must appear here; tests/models/test_phase.py enforces it.
_PHASE_NUMBERS: dict[Phase, int | None] = {
    Phase.Phase0: 0,
    Phase.Phase1: 1,
    Phase.Phase3: 3,
    Phase.Phase4: 4,
    Phase.Phase5: 5,
    Phase.Phase6: 6,
    Phase.Quality: None,
}


def phase_order(phase: Phase) -> int:
    """Position of ``phase`` in course order."""
    return list(Phase).index(phase)


def phase_number(phase: Phase) -> int | None:
    """Course number of a graded phase; None for the quality-only sentinel."""
    return _PHASE_NUMBERS[phase]


def is_graded(phase: Phase) -> bool:
    """Quality-only checks never produce an authoritative grade."""
    return _PHASE_NUMBERS[phase] is not None


def phase_from_number(value: int | str) -> Phase:
    """Resolve ``3`` / ``"3"`` / ``"Phase3"`` to a Phase."""
    if isinstance(value, str):
        text = value.strip()
        if text in Phase.__members__:
            return Phase[text]
        try:
            value = int(text)
        except ValueError as ex:
            raise ValidationError(f"Unknown phase {text!r}") from ex
    for phase, number in _PHASE_NUMBERS.items():
        if number == value:
            return phase
    valid = ", ".join(str(n) for n in _PHASE_NUMBERS.values() if n is not None)
    raise ValidationError(f"Unknown phase {value!r}; valid phases are {valid}")


# ─────────────────────────────────────────────────────────────────────────────
# Verification status
# ─────────────────────────────────────────────────────────────────────────────


class VerifiedStatus(str, Enum):
    """Whether a submission's score is authoritative for the grade book."""

    Unapproved = "Unapproved"
    ApprovedAutomatically = "ApprovedAutomatically"
    ApprovedManually = "ApprovedManually"
    PreviouslyApproved = "PreviouslyApproved"


_APPROVED: dict[VerifiedStatus, bool] = {
    VerifiedStatus.Unapproved: False,
    VerifiedStatus.ApprovedAutomatically: True,
    VerifiedStatus.ApprovedManually: True,
    VerifiedStatus.PreviouslyApproved: False,
}


def is_approved(status: VerifiedStatus) -> bool:
    """True for the two current-approval states."""
    return _APPROVED[status]
