"""Data models for critpath."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

TASK_ID_PREFIX = "task"


def task_id_for(position: int) -> str:
    """Return the id of the task at a zero-based input position."""
    return f"{TASK_ID_PREFIX}{position + 1}"


class GraphFormat(str, Enum):
    """Output formats the renderer can project a graph into."""

    GANTT = "gantt"
    MERMAID = "mermaid"
    DOT = "dot"
    JSON = "json"
    YAML = "yaml"
    SUMMARY = "summary"

    @property
    def extension(self) -> str:
        """Default file extension when a rendering is written to a directory."""
        return {
            GraphFormat.GANTT: "mmd",
            GraphFormat.MERMAID: "mmd",
            GraphFormat.DOT: "dot",
            GraphFormat.JSON: "json",
            GraphFormat.YAML: "yaml",
            GraphFormat.SUMMARY: "md",
        }[self]

    @property
    def is_mermaid(self) -> bool:
        return self in (GraphFormat.GANTT, GraphFormat.MERMAID)


@dataclass(frozen=True)
class TaskInput:
    """A task as supplied by the caller, before ids and durations exist."""

    name: str
    phase: str = ""
    effort: str | None = None
    dependencies: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class Task:
    """A task annotated with its build-time id and estimated duration."""

    id: str
    name: str
    phase: str
    effort: str | None
    duration: int
    dependency_names: tuple[str, ...] = ()
    dependency_ids: tuple[str, ...] = ()

    @property
    def is_root(self) -> bool:
        """True when the task declared no dependencies at all.

        A task whose declared dependencies all failed to resolve is not a root,
        even though nothing points into it.
        """
        return not self.dependency_names

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "phase": self.phase,
            "effort": self.effort,
            "duration": self.duration,
            "dependencies": list(self.dependency_names),
            "dependency_ids": list(self.dependency_ids),
        }


@dataclass(slots=True, frozen=True)
class TaskGraph:
    """Annotated tasks plus forward (successor) edges keyed by task id."""

    tasks: tuple[Task, ...]
    successors: dict[str, list[str]]

    def get_task(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    @property
    def edges(self) -> list[tuple[str, str]]:
        """All (predecessor, successor) pairs, in task then declaration order."""
        return [(pred, task.id) for task in self.tasks for pred in task.dependency_ids]

    @property
    def roots(self) -> list[Task]:
        return [task for task in self.tasks if task.is_root]

    @property
    def phases(self) -> list[str]:
        """Distinct non-empty phases in first-seen order."""
        seen: list[str] = []
        for task in self.tasks:
            if task.phase and task.phase not in seen:
                seen.append(task.phase)
        return seen

    def unresolved_dependencies(self) -> list[tuple[str, str]]:
        """Return (task id, dependency name) pairs that matched no task."""
        names = {task.name for task in self.tasks}
        return [
            (task.id, dep_name)
            for task in self.tasks
            for dep_name in task.dependency_names
            if dep_name not in names
        ]


@dataclass(slots=True, frozen=True)
class CriticalPath:
    """The longest root-to-terminal path found through a graph."""

    task_ids: tuple[str, ...] = ()
    total_duration: int = 0
    cycle: tuple[str, ...] | None = None

    def __contains__(self, task_id: object) -> bool:
        return task_id in self.task_ids

    def __len__(self) -> int:
        return len(self.task_ids)

    @property
    def cycle_detected(self) -> bool:
        return self.cycle is not None

    @property
    def edges(self) -> set[tuple[str, str]]:
        return set(zip(self.task_ids, self.task_ids[1:]))


@dataclass(slots=True, frozen=True)
class RenderedGraph:
    """One format-tagged projection of a graph."""

    format: GraphFormat
    content: str


@dataclass(slots=True)
class BuildResult:
    """Everything produced by one build call."""

    graph: TaskGraph
    critical_path: CriticalPath
    renderings: dict[GraphFormat, RenderedGraph] = field(default_factory=dict)

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self.graph.tasks

    @property
    def metadata(self) -> dict[str, int]:
        return {
            "total_tasks": len(self.graph.tasks),
            "phase_count": len(self.graph.phases),
            "critical_path_length": len(self.critical_path),
            "critical_path_duration": self.critical_path.total_duration,
        }

    def rendering(self, fmt: GraphFormat | str) -> str:
        """Return the rendered text for a format requested at build time."""
        return self.renderings[GraphFormat(fmt)].content
