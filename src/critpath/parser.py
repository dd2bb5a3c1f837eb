"""Plan file parsing (YAML or JSON) into task inputs."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .models import TaskInput
from .schemas import PlanSchema, TaskSchema


class PlanParser:
    """Parser for plan files.

    Accepts a flat ``tasks`` list, a work-breakdown ``phases`` list whose
    tasks inherit the phase name, or both.
    """

    def parse_file(self, file_path: Path | str) -> list[TaskInput]:
        """Parse a YAML or JSON plan file."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            try:
                data: Any = json.loads(text)
            except json.JSONDecodeError as e:
                raise ParseError(f"Failed to parse JSON: {e}") from e
        else:
            try:
                data = yaml.safe_load(text)
            except yaml.YAMLError as e:
                raise ParseError(f"Failed to parse YAML: {e}") from e

        return self.parse_data(data)

    def parse_data(self, data: Any) -> list[TaskInput]:
        """Parse already-loaded plan data.

        A bare list is treated as a flat task list.
        """
        if data is None:
            return []
        if isinstance(data, list):
            data = {"tasks": data}
        if not isinstance(data, dict):
            raise ParseError("Plan must contain a mapping or a list at the root level")

        try:
            schema = PlanSchema.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid plan structure: {e}") from e
        return schema.to_inputs()


def coerce_inputs(tasks: Iterable[TaskInput | Mapping[str, Any]]) -> list[TaskInput]:
    """Normalize a mix of TaskInput objects and plain mappings.

    Mappings go through TaskSchema, so they get the same defaults and
    validation as tasks read from a file.
    """
    inputs: list[TaskInput] = []
    for task in tasks:
        if isinstance(task, TaskInput):
            inputs.append(task)
            continue
        try:
            inputs.append(TaskSchema.model_validate(dict(task)).to_input())
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid task {dict(task)!r}: {e}") from e
    return inputs


def load_plan(path: Path | str) -> list[TaskInput]:
    """Load task inputs from a plan file."""
    return PlanParser().parse_file(path)
