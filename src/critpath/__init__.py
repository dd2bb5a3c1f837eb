"""critpath - task dependency graphs and critical path analysis."""

from .builder import GraphBuilder
from .config import CritpathConfig, load_config
from .critical_path import CriticalPathAnalyzer
from .duration import DurationEstimator, estimate
from .engine import TaskGraphEngine, build
from .exceptions import (
    CircularDependencyError,
    ConfigError,
    CritpathError,
    MissingReferenceError,
    ParseError,
    ValidationError,
)
from .models import (
    BuildResult,
    CriticalPath,
    GraphFormat,
    RenderedGraph,
    Task,
    TaskGraph,
    TaskInput,
)
from .parser import load_plan
from .render import GraphRenderer, graph_document, write

__version__ = "0.1.0"

__all__ = [
    "BuildResult",
    "CircularDependencyError",
    "ConfigError",
    "CriticalPath",
    "CriticalPathAnalyzer",
    "CritpathConfig",
    "CritpathError",
    "DurationEstimator",
    "GraphBuilder",
    "GraphFormat",
    "GraphRenderer",
    "MissingReferenceError",
    "ParseError",
    "RenderedGraph",
    "Task",
    "TaskGraph",
    "TaskGraphEngine",
    "TaskInput",
    "ValidationError",
    "build",
    "estimate",
    "graph_document",
    "load_config",
    "load_plan",
    "write",
]
