"""Custom exceptions for profqc."""


class ProfQCError(Exception):
    """Base exception for profqc."""

    pass


class QCError(ProfQCError):
    """Exception raised during QC operations."""

    pass


class VariableNotFoundError(QCError, KeyError):
    """Raised when a profile variable is requested but was never registered."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Variable not found in profile: {self.name}"


class UnknownCheckError(QCError):
    """Raised when a check key has no registered factory."""

    def __init__(self, key: str, available: list[str] | None = None) -> None:
        super().__init__(key)
        self.key = key
        self.available = available or []

    def __str__(self) -> str:
        if self.available:
            return f"Unknown check: {self.key} (available: {', '.join(self.available)})"
        return f"Unknown check: {self.key}"


class ProfileIOError(ProfQCError):
    """Exception raised during I/O operations."""

    pass


class ConfigError(ProfQCError):
    """Exception raised for configuration errors."""

    pass


class ValidationError(ProfQCError):
    """Exception raised for data validation errors."""

    pass
