"""Critical path analysis over a task graph.

The traversal works on an arena: tasks are addressed by their position in the
graph's task tuple and successor lists hold positions, so the hot loops never
touch string ids.

Path selection happens in two steps:

1. From each root, the path *shape* is grown by always following the successor
   whose best suffix has the most nodes (first successor wins ties).
2. Among the roots' paths, the one with the greatest summed duration is the
   critical path (first root in input order wins ties).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .exceptions import CircularDependencyError
from .logger import debug_enabled, get_logger
from .models import CriticalPath, TaskGraph

logger = get_logger()

_WHITE, _GREY, _BLACK = 0, 1, 2


@dataclass
class _Frame:
    """One node on the explicit DFS stack."""

    node: int
    next_successor: int = 0
    best: list[int] = field(default_factory=list)


def find_cycle(arena: list[list[int]]) -> list[int] | None:
    """Return the first cycle found as ``[a, ..., a]``, or None if acyclic.

    Starts are tried in arena order and successors in list order, so the
    reported cycle is deterministic for a given graph.
    """
    color = [_WHITE] * len(arena)
    for start in range(len(arena)):
        if color[start] != _WHITE:
            continue
        color[start] = _GREY
        stack: list[list[int]] = [[start, 0]]
        path = [start]
        while stack:
            top = stack[-1]
            node, position = top
            if position < len(arena[node]):
                top[1] += 1
                nxt = arena[node][position]
                if color[nxt] == _GREY:
                    return path[path.index(nxt) :] + [nxt]
                if color[nxt] == _WHITE:
                    color[nxt] = _GREY
                    stack.append([nxt, 0])
                    path.append(nxt)
            else:
                color[node] = _BLACK
                stack.pop()
                path.pop()
    return None


def nodes_reaching_cycles(arena: list[list[int]]) -> set[int]:
    """Return every node that lies on a cycle or can reach one.

    Cyclic nodes come from strongly connected components (Tarjan, run with an
    explicit stack); the rest are found by walking predecessor edges back from
    them. Any other node's longest suffix is independent of the path used to
    reach it.
    """
    count = len(arena)
    index = [-1] * count
    low = [0] * count
    on_stack = [False] * count
    component_stack: list[int] = []
    counter = 0
    cyclic: set[int] = set()

    for start in range(count):
        if index[start] != -1:
            continue
        index[start] = low[start] = counter
        counter += 1
        component_stack.append(start)
        on_stack[start] = True
        work: list[list[int]] = [[start, 0]]
        while work:
            top = work[-1]
            node, position = top
            if position < len(arena[node]):
                top[1] += 1
                nxt = arena[node][position]
                if index[nxt] == -1:
                    index[nxt] = low[nxt] = counter
                    counter += 1
                    component_stack.append(nxt)
                    on_stack[nxt] = True
                    work.append([nxt, 0])
                elif on_stack[nxt]:
                    low[node] = min(low[node], index[nxt])
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                low[parent] = min(low[parent], low[node])
            if low[node] != index[node]:
                continue
            component: list[int] = []
            while True:
                member = component_stack.pop()
                on_stack[member] = False
                component.append(member)
                if member == node:
                    break
            if len(component) > 1 or node in arena[node]:
                cyclic.update(component)

    predecessors: list[list[int]] = [[] for _ in range(count)]
    for node, successors in enumerate(arena):
        for nxt in successors:
            predecessors[nxt].append(node)

    reaching = set(cyclic)
    pending = list(cyclic)
    while pending:
        node = pending.pop()
        for pred in predecessors[node]:
            if pred not in reaching:
                reaching.add(pred)
                pending.append(pred)
    return reaching


class CriticalPathAnalyzer:
    """Computes the critical path of a TaskGraph."""

    def __init__(self, *, fail_on_cycle: bool = False):
        self.fail_on_cycle = fail_on_cycle

    def analyze(self, graph: TaskGraph) -> CriticalPath:
        """Find the critical path, reporting (or raising on) any cycle."""
        tasks = graph.tasks
        if not tasks:
            return CriticalPath()

        position = {task.id: index for index, task in enumerate(tasks)}
        arena = [[position[succ] for succ in graph.successors.get(task.id, [])] for task in tasks]

        cycle = find_cycle(arena)
        cycle_ids: tuple[str, ...] | None = None
        if cycle is not None:
            cycle_ids = tuple(tasks[node].id for node in cycle)
            message = f"Dependency cycle detected: {' -> '.join(cycle_ids)}"
            if self.fail_on_cycle:
                raise CircularDependencyError(message, list(cycle_ids))
            logger.warning(message)

        # Suffixes only depend on the node when nothing below it can loop back onto the path
        uncacheable = nodes_reaching_cycles(arena) if cycle is not None else set()
        memo: dict[int, list[int]] = {}

        best: list[int] = []
        best_duration = 0
        for root, task in enumerate(tasks):
            if not task.is_root:
                continue
            path = self._longest_from(root, arena, memo, uncacheable)
            duration = sum(tasks[node].duration for node in path)
            logger.checks(
                f"  root {task.id} ({task.name}): {len(path)} tasks, {duration} days"
            )
            if not best or duration > best_duration:
                best = path
                best_duration = duration

        result = CriticalPath(
            task_ids=tuple(tasks[node].id for node in best),
            total_duration=best_duration,
            cycle=cycle_ids,
        )
        logger.changes(
            f"Critical path: {' -> '.join(result.task_ids) or '(none)'} "
            f"({result.total_duration} days)"
        )
        return result

    def _longest_from(
        self,
        root: int,
        arena: list[list[int]],
        memo: dict[int, list[int]],
        uncacheable: set[int],
    ) -> list[int]:
        """Grow the node-count-longest path starting at root.

        A successor already on the current path is skipped, so a cycle never
        extends the path. Suffixes of nodes outside ``uncacheable`` are shared
        through ``memo``.
        """
        if root in memo:
            return memo[root]

        debug = debug_enabled()
        stack = [_Frame(root)]
        on_path = {root}
        while True:
            frame = stack[-1]
            successors = arena[frame.node]
            if frame.next_successor < len(successors):
                nxt = successors[frame.next_successor]
                frame.next_successor += 1
                if nxt in on_path:
                    continue
                if nxt in memo:
                    self._offer(frame, memo[nxt])
                    continue
                stack.append(_Frame(nxt))
                on_path.add(nxt)
                continue

            stack.pop()
            on_path.discard(frame.node)
            path = [frame.node, *frame.best]
            if frame.node not in uncacheable:
                memo[frame.node] = path
            if debug:
                logger.debug(f"    suffix from #{frame.node}: {len(path)} nodes")
            if not stack:
                return path
            self._offer(stack[-1], path)

    @staticmethod
    def _offer(frame: _Frame, candidate: list[int]) -> None:
        # Strictly longer only: the first successor keeps ties
        if len(candidate) > len(frame.best):
            frame.best = candidate


def analyze(graph: TaskGraph, *, fail_on_cycle: bool = False) -> CriticalPath:
    """Shortcut for CriticalPathAnalyzer(fail_on_cycle=...).analyze(graph)."""
    return CriticalPathAnalyzer(fail_on_cycle=fail_on_cycle).analyze(graph)
