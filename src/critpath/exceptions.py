"""Custom exceptions for critpath."""


class CritpathError(Exception):
    """Base exception for all critpath errors."""

    pass


class ValidationError(CritpathError):
    """Raised when validation fails."""

    pass


class CircularDependencyError(ValidationError):
    """Raised when a circular dependency is detected."""

    def __init__(self, message: str, cycle: list[str] | None = None):
        super().__init__(message)
        self.cycle = cycle or []


class MissingReferenceError(ValidationError):
    """Raised when a dependency name does not match any task."""

    def __init__(self, message: str, misses: list[tuple[str, str]] | None = None):
        super().__init__(message)
        self.misses = misses or []


class ParseError(CritpathError):
    """Raised when a plan file cannot be parsed."""

    pass


class ConfigError(CritpathError):
    """Raised when a configuration file is invalid."""

    pass
