"""Build pipeline: estimate -> resolve -> analyze -> render."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .builder import GraphBuilder
from .config import CritpathConfig
from .critical_path import CriticalPathAnalyzer
from .duration import DurationEstimator
from .logger import get_logger
from .models import BuildResult, GraphFormat, TaskInput
from .parser import coerce_inputs
from .render import GraphRenderer

logger = get_logger()


class TaskGraphEngine:
    """Runs the whole pipeline for one task list per build() call.

    The engine keeps only its configuration between calls, so a single
    instance can serve any number of independent builds.
    """

    def __init__(self, config: CritpathConfig | None = None):
        self.config = config or CritpathConfig()
        engine_config = self.config.engine
        self.estimator = DurationEstimator(engine_config.effort_scale)
        self.builder = GraphBuilder(
            self.estimator, strict_resolution=engine_config.strict_resolution
        )
        self.analyzer = CriticalPathAnalyzer(fail_on_cycle=engine_config.fail_on_cycle)
        self.renderer = GraphRenderer(
            gantt_config=self.config.gantt,
            flowchart_config=self.config.flowchart,
            dot_config=self.config.dot,
        )

    def build(
        self,
        tasks: Iterable[TaskInput | Mapping[str, Any]],
        formats: Iterable[GraphFormat | str] | None = None,
    ) -> BuildResult:
        """Build the graph, find its critical path, and render it.

        Args:
            tasks: Task inputs in order; plain mappings are validated first
            formats: Formats to render. Defaults to the configured formats;
                pass an empty list to skip rendering.

        Returns:
            BuildResult with the annotated graph, critical path and renderings
        """
        inputs = coerce_inputs(tasks)
        requested = self.config.engine.formats if formats is None else formats

        graph = self.builder.build(inputs)
        critical_path = self.analyzer.analyze(graph)

        result = BuildResult(graph=graph, critical_path=critical_path)
        for fmt in requested:
            rendering = self.renderer.render(graph, critical_path, fmt)
            result.renderings[rendering.format] = rendering

        logger.changes(
            f"Built {len(graph.tasks)} tasks with {len(graph.edges)} dependencies; "
            f"rendered {', '.join(f.value for f in result.renderings) or 'nothing'}"
        )
        return result


def build(
    tasks: Iterable[TaskInput | Mapping[str, Any]],
    formats: Iterable[GraphFormat | str] | None = None,
    config: CritpathConfig | None = None,
) -> BuildResult:
    """Build a task graph with a one-off engine."""
    return TaskGraphEngine(config).build(tasks, formats)
