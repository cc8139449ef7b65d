from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel

from passoff.errors import ValidationError
from passoff.models.config import RubricConfig
from passoff.models.grading import GradingRequest
from passoff.models.rubric import Rubric
from passoff.models.test_node import TestNode

M = TypeVar("M", bound=BaseModel)


def _load_model(path: str | Path, model: type[M], what: str) -> M:
    """Load a YAML (or JSON) file into ``model``, raising ValidationError on schema issues."""
    p = Path(path)
    try:
        data: Any = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (yaml.YAMLError, RecursionError) as ex:
        raise ValidationError(f"Unreadable {what} file '{path}': {ex}") from ex
    try:
        return model.model_validate(data)
    except Exception as ex:  # pydantic.ValidationError or other
        raise ValidationError(f"Invalid {what} '{path}': {ex}") from ex


def load_grading_request_yaml(path: str | Path) -> GradingRequest:
    return _load_model(path, GradingRequest, "grading request")


def load_rubric_config_yaml(path: str | Path) -> RubricConfig:
    return _load_model(path, RubricConfig, "rubric config")


def load_test_tree(path: str | Path) -> TestNode:
    return _load_model(path, TestNode, "test tree")


def rubric_to_markdown(rubric: Rubric) -> str:
    """Render the category scores as a concise markdown bullet list."""
    lines = []
    for rubric_type, item in rubric.items.present():
        r = item.results
        flag = " (error)" if r.has_error else ""
        lines.append(f"- **{item.category}** [{rubric_type.value}]: {r.score:g}/{r.possible_points:g}{flag}")
        for note in r.notes.splitlines():
            lines.append(f"  - {note}")
    return "\n".join(lines)
