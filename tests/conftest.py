"""Pytest configuration and fixtures for critpath tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from critpath.builder import GraphBuilder
from critpath.logger import reset_logger
from critpath.models import TaskGraph, TaskInput

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


def task(name: str, effort: str | None = None, *deps: str, phase: str = "") -> TaskInput:
    """Shorthand for a TaskInput with positional dependency names."""
    return TaskInput(name=name, phase=phase, effort=effort, dependencies=tuple(deps))


def build_graph(*inputs: TaskInput) -> TaskGraph:
    return GraphBuilder().build(list(inputs))


@pytest.fixture(autouse=True)
def _clean_logger() -> Iterator[None]:
    """Keep logger configuration from leaking between tests."""
    yield
    reset_logger()


@pytest.fixture
def example_plan() -> Path:
    return EXAMPLES_DIR / "plan.yaml"


@pytest.fixture
def chain_inputs() -> list[TaskInput]:
    """A -> B -> C, one day each."""
    return [
        task("A", "1 point"),
        task("B", "1 point", "A"),
        task("C", "1 point", "B"),
    ]


@pytest.fixture
def phased_inputs() -> list[TaskInput]:
    """A small two-phase plan with a fork and a join."""
    return [
        task("Gather requirements", "3 story points", phase="Requirements"),
        task("Design schema", "5 story points", "Gather requirements", phase="Design"),
        task("Design API", "2 story points", "Gather requirements", phase="Design"),
        task("Build service", "8 story points", "Design schema", "Design API", phase="Build"),
    ]
