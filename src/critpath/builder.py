"""Dependency resolution: turn named task inputs into a task graph."""

from __future__ import annotations

from collections.abc import Sequence

from .duration import DurationEstimator
from .exceptions import MissingReferenceError
from .logger import get_logger
from .models import Task, TaskGraph, TaskInput, task_id_for

logger = get_logger()


class GraphBuilder:
    """Resolves dependency names into successor edges.

    Dependencies are matched by display name against the FIRST task carrying
    that name. A later task with a duplicate name can never be a dependency
    target. Names that match nothing are dropped unless strict resolution is
    enabled.
    """

    def __init__(
        self,
        estimator: DurationEstimator | None = None,
        *,
        strict_resolution: bool = False,
    ):
        self.estimator = estimator or DurationEstimator()
        self.strict_resolution = strict_resolution

    def build(self, inputs: Sequence[TaskInput]) -> TaskGraph:
        """Assign ids and durations, then wire predecessor -> successor edges."""
        # Ids are fixed before any dependency is looked at
        ids = [task_id_for(position) for position in range(len(inputs))]

        first_by_name: dict[str, str] = {}
        for task_id, task_input in zip(ids, inputs):
            first_by_name.setdefault(task_input.name, task_id)

        successors: dict[str, list[str]] = {task_id: [] for task_id in ids}
        misses: list[tuple[str, str]] = []
        tasks: list[Task] = []

        for task_id, task_input in zip(ids, inputs):
            dependency_ids: list[str] = []
            for dep_name in task_input.dependencies:
                pred_id = first_by_name.get(dep_name)
                if pred_id is None:
                    logger.checks(
                        f"  {task_id} ({task_input.name}): dependency '{dep_name}' "
                        "matches no task, dropping"
                    )
                    misses.append((task_id, dep_name))
                    continue
                if pred_id in dependency_ids:
                    # Repeated name: one edge per predecessor
                    continue
                successors[pred_id].append(task_id)
                dependency_ids.append(pred_id)

            tasks.append(
                Task(
                    id=task_id,
                    name=task_input.name,
                    phase=task_input.phase,
                    effort=task_input.effort,
                    duration=self.estimator.estimate(task_input.effort),
                    dependency_names=tuple(task_input.dependencies),
                    dependency_ids=tuple(dependency_ids),
                )
            )

        if misses and self.strict_resolution:
            details = ", ".join(f"{task_id} -> '{name}'" for task_id, name in misses)
            raise MissingReferenceError(f"Unresolved dependencies: {details}", misses)

        graph = TaskGraph(tasks=tuple(tasks), successors=successors)
        logger.debug(f"Built graph: {len(tasks)} tasks, {len(graph.edges)} edges")
        return graph
