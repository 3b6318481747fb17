"""Custom exception hierarchy for the ghosting engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationIssue:
    """One problem found in a workout document or timeline.

    ``path`` uses the document's own key names, e.g.
    ``patterns[0].entries[2].intervalOffset.min``.
    """

    path: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


class GhostingEngineError(Exception):
    """Base exception for all ghosting_engine errors."""


class ValidationError(GhostingEngineError):
    """The workout document failed structural or semantic checks.

    Raised before generation starts, never mid-run.
    """

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = list(issues)
        summary = "; ".join(str(i) for i in self.issues[:3])
        more = f" (+{len(self.issues) - 3} more)" if len(self.issues) > 3 else ""
        super().__init__(f"Invalid workout: {summary}{more}")


class ConfigResolutionError(GhostingEngineError):
    """A config key has neither an override nor a default."""

    def __init__(self, key: str) -> None:
        super().__init__(f"No value for config key {key!r}")
        self.key = key
