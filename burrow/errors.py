from __future__ import annotations
from typing import Any, Dict


class BurrowError(Exception):
    """Base class for every error raised by the burrow package."""


class TopologyError(BurrowError):
    """The static location graph is malformed (a definition defect)."""


class ConfigurationError(BurrowError):
    """An initial configuration built from external input is invalid."""


class LayoutError(ConfigurationError):
    """A textual board layout could not be read."""


class InvariantViolation(BurrowError):
    """A configuration produced during search lost, duplicated or gained a piece."""


class CostOverflowError(BurrowError):
    """An accumulated cost left the supported range."""


class SettingsError(BurrowError):
    """A settings file holds values the solver cannot use."""


class SearchBudgetExceeded(BurrowError):
    """A node or wall-clock budget stopped the search before it could conclude."""

    def __init__(self, result: Dict[str, Any]):
        self.result = result
        super().__init__(
            f"search stopped by {result.get('termination')} after "
            f"{result.get('expanded')} expansions; answer unknown"
        )
