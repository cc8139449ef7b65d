"""Centralized structured exception hierarchy for passoff.

A small, well-named set of error types that callers (the grading pipeline,
the admin/API layer, tests) can depend on without pattern-matching exceptions
raised by dependencies such as pydantic or yaml.

Design:
  - PassoffError is the common base (subclass of RuntimeError for ergonomics).
  - StructuralError signals a malformed test tree (cycle, shared node,
    duplicate sibling names, excessive depth).
  - ValidationError is raised for out-of-range scores, unknown rubric
    categories and unreadable records / config files.
  - CompositionError is raised when a required rubric category is missing.
  - StateError is raised for an illegal verification-status transition. The
    submission involved is left untouched.
"""

from __future__ import annotations

__all__ = [
    "PassoffError",
    "StructuralError",
    "ValidationError",
    "CompositionError",
    "StateError",
]


class PassoffError(RuntimeError):
    """Base class for all structured passoff errors."""


class StructuralError(PassoffError):
    """Raised when a test tree is not a well-formed tree."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        self.path = path
        super().__init__(f"{message} (at {path})" if path else message)


class ValidationError(PassoffError):
    """Raised for score range, category key, record and config problems."""

    def __init__(self, message: str, *, category: str | None = None) -> None:
        self.category = category
        super().__init__(f"[{category}] {message}" if category else message)


class CompositionError(PassoffError):
    """Raised when a rubric cannot be composed from the supplied categories."""


class StateError(PassoffError):
    """Raised for an illegal submission state-machine transition."""
