"""Exceptions raised by the harness engine.

Only these reach the CLI; unreadable or malformed files inside a target
never raise, they degrade to an absent signal.
"""

from typing import Any


class HarnessError(Exception):
    """Base class for user-facing harness failures."""

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, **self.details}


class TargetNotFoundError(HarnessError):
    """Raised when the directory to audit does not exist."""

    def __init__(self, target: str):
        super().__init__(f"Directory does not exist: {target}")
        self.target = target


class ScaffoldConflictError(HarnessError):
    """Raised when init would overwrite an existing map file."""


class UnknownAutomationPackError(HarnessError):
    """Raised for an automation pack name that is not recognized."""


class ConfigurationError(HarnessError):
    """Raised when configuration is invalid or cannot be loaded."""


class ScaffoldWriteError(HarnessError):
    """Raised when init or evolve --apply cannot create a directory or file."""
