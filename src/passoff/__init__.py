"""passoff rubric scoring engine.

Aggregates hierarchical test outcomes into category scores, composes them into
a submission rubric and tracks whether a submission's score is authoritative.
"""

from __future__ import annotations

from .errors import (
    PassoffError,
    StructuralError,
    ValidationError,
    CompositionError,
    StateError,
)

__all__ = [
    "__version__",
    "PassoffError",
    "StructuralError",
    "ValidationError",
    "CompositionError",
    "StateError",
]

__version__ = "0.1.0"
