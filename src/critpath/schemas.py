"""Pydantic schemas for plan data validation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from .models import TaskInput


class TaskSchema(BaseModel):
    """Schema for a single task descriptor."""

    name: str
    phase: str = ""
    effort: str | None = None
    dependencies: list[str] = Field(default_factory=list)
    description: str | None = None  # Carried by work-breakdown plans, ignored by the engine

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Task name must not be empty")
        return v

    @field_validator("phase", mode="before")
    @classmethod
    def coerce_phase(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)

    @field_validator("effort", mode="before")
    @classmethod
    def coerce_effort(cls, v: Any) -> str | None:
        """Accept bare numbers (e.g. ``effort: 5``) as effort text."""
        if v is None:
            return None
        return str(v)

    @field_validator("dependencies", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Ensure value is a list."""
        if v is None:
            return []
        if isinstance(v, list):
            return [str(item) for item in v]  # type: ignore[misc]
        return [str(v)]

    def to_input(self, default_phase: str = "") -> TaskInput:
        return TaskInput(
            name=self.name,
            phase=self.phase or default_phase,
            effort=self.effort,
            dependencies=tuple(self.dependencies),
        )


class PhaseSchema(BaseModel):
    """Schema for a work-breakdown phase grouping tasks."""

    name: str
    description: str | None = None
    tasks: list[TaskSchema] = Field(default_factory=list)

    @field_validator("tasks", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class PlanSchema(BaseModel):
    """Schema for a whole plan file.

    A plan may list tasks flat under ``tasks``, grouped under ``phases``, or
    both; phase tasks come first.
    """

    title: str | None = None
    phases: list[PhaseSchema] = Field(default_factory=list)
    tasks: list[TaskSchema] = Field(default_factory=list)

    @field_validator("phases", "tasks", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    def to_inputs(self) -> list[TaskInput]:
        inputs: list[TaskInput] = []
        for phase in self.phases:
            inputs.extend(task.to_input(default_phase=phase.name) for task in phase.tasks)
        inputs.extend(task.to_input() for task in self.tasks)
        return inputs
