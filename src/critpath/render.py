"""Rendering of task graphs: Mermaid gantt, Mermaid flowchart, DOT, JSON, YAML.

Every format is a projection of the same TaskGraph and CriticalPath, so all of
them show the same edge set. Rendering never touches the filesystem; write()
is the only function with side effects.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .config import DotConfig, FlowchartConfig, GanttConfig
from .logger import get_logger
from .models import CriticalPath, GraphFormat, RenderedGraph, Task, TaskGraph

logger = get_logger()

UNGROUPED_SECTION = "Ungrouped"
CRITICAL_TAG = "crit"


class GraphRenderer:
    """Render a task graph and its critical path in any GraphFormat."""

    def __init__(
        self,
        gantt_config: GanttConfig | None = None,
        flowchart_config: FlowchartConfig | None = None,
        dot_config: DotConfig | None = None,
    ):
        self.gantt_config = gantt_config or GanttConfig()
        self.flowchart_config = flowchart_config or FlowchartConfig()
        self.dot_config = dot_config or DotConfig()

    def render(
        self, graph: TaskGraph, critical_path: CriticalPath, fmt: GraphFormat | str
    ) -> RenderedGraph:
        """Render the graph in the requested format."""
        fmt = GraphFormat(fmt)
        if fmt == GraphFormat.GANTT:
            content = self._render_gantt(graph, critical_path)
        elif fmt == GraphFormat.MERMAID:
            content = self._render_flowchart(graph, critical_path)
        elif fmt == GraphFormat.DOT:
            content = self._render_dot(graph, critical_path)
        elif fmt == GraphFormat.JSON:
            content = json.dumps(graph_document(graph, critical_path), indent=2)
        elif fmt == GraphFormat.YAML:
            content = yaml.safe_dump(
                graph_document(graph, critical_path), sort_keys=False, allow_unicode=True
            )
        elif fmt == GraphFormat.SUMMARY:
            content = self._render_summary(graph, critical_path)
        else:
            raise ValueError(f"Unknown format: {fmt}")
        return RenderedGraph(format=fmt, content=content)

    # Gantt network chart

    def _render_gantt(self, graph: TaskGraph, critical_path: CriticalPath) -> str:
        lines = [
            "gantt",
            f"    title {self.gantt_config.title}",
            "    dateFormat YYYY-MM-DD",
        ]
        if self.gantt_config.axis_format:
            lines.append(f"    axisFormat {self.gantt_config.axis_format}")
        lines.append("")

        current_phase: str | None = None
        for task in graph.tasks:
            if task.phase != current_phase:
                # An empty phase only needs a heading once another section is open
                if task.phase:
                    lines.append(f"    section {task.phase}")
                elif current_phase is not None:
                    lines.append(f"    section {UNGROUPED_SECTION}")
                current_phase = task.phase
            lines.append(self._format_gantt_task(task, critical_path))

        return "\n".join(lines)

    def _format_gantt_task(self, task: Task, critical_path: CriticalPath) -> str:
        tags = f"{CRITICAL_TAG}, " if task.id in critical_path else ""
        after = self._after_reference(task)
        start = f"after {after}, " if after else ""
        return f"    {_gantt_label(task.name)} :{tags}{task.id}, {start}{task.duration}d"

    def _after_reference(self, task: Task) -> str | None:
        if self.gantt_config.anchor == "first-name":
            if not task.dependency_names:
                return None
            return "_".join(task.dependency_names[0].split())
        if not task.dependency_ids:
            return None
        return " ".join(task.dependency_ids)

    # Mermaid flowchart

    def _render_flowchart(self, graph: TaskGraph, critical_path: CriticalPath) -> str:
        lines = [f"graph {self.flowchart_config.direction}"]

        for task in graph.tasks:
            label = _escape_mermaid(f"{task.name} ({task.duration}d)")
            lines.append(f'    {task.id}["{label}"]')

        critical_edges = critical_path.edges
        for pred, succ in graph.edges:
            arrow = "==>" if (pred, succ) in critical_edges else "-->"
            lines.append(f"    {pred} {arrow} {succ}")

        if critical_path.task_ids:
            lines.append("    classDef critical stroke:#d33,stroke-width:3px")
            lines.append(f"    class {','.join(critical_path.task_ids)} critical")

        return "\n".join(lines)

    # Graphviz

    def _render_dot(self, graph: TaskGraph, critical_path: CriticalPath) -> str:
        lines = ["digraph TaskGraph {"]
        lines.append(f"  rankdir={self.dot_config.rankdir};")
        lines.append("  node [shape=box];")
        lines.append("")

        for task in graph.tasks:
            label = _escape_dot(f"{task.name}\n{task.duration}d")
            attrs = [f'label="{label}"']
            if task.id in critical_path:
                attrs.append(f'color="{self.dot_config.critical_color}"')
                attrs.append("penwidth=2")
            lines.append(f"  {task.id} [{', '.join(attrs)}];")
        lines.append("")

        lines.append("  // Dependencies")
        critical_edges = critical_path.edges
        for pred, succ in graph.edges:
            if (pred, succ) in critical_edges:
                lines.append(
                    f'  {pred} -> {succ} [color="{self.dot_config.critical_color}", penwidth=2];'
                )
            else:
                lines.append(f"  {pred} -> {succ};")

        lines.append("}")
        return "\n".join(lines)

    # Markdown summary

    def _render_summary(self, graph: TaskGraph, critical_path: CriticalPath) -> str:
        lines = [f"# {self.gantt_config.title}", "", "## Critical Path", ""]

        if critical_path.task_ids:
            by_id = {task.id: task for task in graph.tasks}
            for step, task_id in enumerate(critical_path.task_ids, start=1):
                task = by_id[task_id]
                lines.append(f"{step}. {task.name} ({task.id}) - {_days(task.duration)}")
            lines.append("")
            lines.append(f"Total duration: {_days(critical_path.total_duration)}")
        else:
            lines.append("No critical path.")
        lines.append("")

        if critical_path.cycle is not None:
            lines.append("## Warnings")
            lines.append("")
            lines.append(f"- Dependency cycle: {' -> '.join(critical_path.cycle)}")
            lines.append("")

        lines.extend(
            [
                "## Metadata",
                "",
                f"- Total Tasks: {len(graph.tasks)}",
                f"- Total Phases: {len(graph.phases)}",
                f"- Critical Path Length: {len(critical_path)}",
                f"- Critical Path Duration: {_days(critical_path.total_duration)}",
                "",
                "## Timeline",
                "",
                "```mermaid",
                self._render_gantt(graph, critical_path),
                "```",
            ]
        )
        return "\n".join(lines) + "\n"


def graph_document(graph: TaskGraph, critical_path: CriticalPath) -> dict[str, Any]:
    """Build the structured node/edge document.

    The document has exactly two top-level keys, ``nodes`` and ``edges``.
    """
    critical_edges = critical_path.edges
    return {
        "nodes": [
            {
                "id": task.id,
                "name": task.name,
                "phase": task.phase,
                "duration": task.duration,
                "critical": task.id in critical_path,
            }
            for task in graph.tasks
        ],
        "edges": [
            {"from": pred, "to": succ, "critical": (pred, succ) in critical_edges}
            for pred, succ in graph.edges
        ],
    }


def write(rendering: RenderedGraph, destination: Path | str) -> Path:
    """Write a rendering to a file, creating parent directories first.

    Mermaid output written to a ``.md`` file is wrapped in a code fence.
    OSError from the filesystem is not caught.
    """
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)

    content = rendering.content
    if rendering.format.is_mermaid and path.suffix.lower() == ".md":
        content = f"```mermaid\n{content}\n```\n"

    path.write_text(content, encoding="utf-8")
    logger.changes(f"Wrote {rendering.format.value} rendering to {path}")
    return path


def _gantt_label(name: str) -> str:
    # ':' starts the task metadata and ';' ends a statement in Mermaid gantt
    return name.replace(":", " -").replace(";", ",").strip()


def _escape_mermaid(label: str) -> str:
    return label.replace('"', "#quot;")


def _escape_dot(label: str) -> str:
    return label.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _days(count: int) -> str:
    return f"{count} day" if count == 1 else f"{count} days"
