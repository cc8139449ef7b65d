"""Persistence boundary: canonical JSON records of rubrics and submissions.

Records use the camelCase field names of the stored data. Reading goes through
the rubric migration adapter, so version 1 records with the deprecated singular
category slots load into the canonical shape; writing only ever produces the
canonical shape.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from passoff.errors import ValidationError
from passoff.models.rubric import Rubric
from passoff.models.submission import Submission


def dump_rubric(rubric: Rubric) -> dict[str, Any]:
    try:
        return rubric.model_dump(mode="json", by_alias=True)
    except (ValueError, RecursionError) as ex:
        # pydantic refuses to serialize very deeply nested test trees
        raise ValidationError(f"Rubric record cannot be serialized: {ex}") from ex


def load_rubric(data: dict[str, Any]) -> Rubric:
    try:
        return Rubric.model_validate(data)
    except PydanticValidationError as ex:
        raise ValidationError(f"Invalid rubric record: {ex}") from ex


def dump_submission(submission: Submission) -> dict[str, Any]:
    try:
        return submission.model_dump(mode="json", by_alias=True)
    except (ValueError, RecursionError) as ex:
        raise ValidationError(f"Submission record cannot be serialized: {ex}") from ex


def load_submission(data: dict[str, Any]) -> Submission:
    try:
        return Submission.model_validate(data)
    except PydanticValidationError as ex:
        raise ValidationError(f"Invalid submission record: {ex}") from ex


def submission_to_json(submission: Submission) -> str:
    return json.dumps(dump_submission(submission), indent=2, ensure_ascii=False)


def submission_from_json(text: str) -> Submission:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as ex:
        raise ValidationError(f"Submission record is not valid JSON: {ex}") from ex
    return load_submission(data)
