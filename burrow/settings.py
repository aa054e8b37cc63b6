"""
Settings Module for the burrow solver

Loads solver options from a JSON file and merges them over the defaults.
The weight table lives here so the engine never hard-codes movement costs.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from burrow.domains.burrow import DEFAULT_WEIGHTS
from burrow.domains.topology import Topology
from burrow.errors import SettingsError
from burrow.heuristics.home_distance import HEURISTICS, make_heuristic

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("burrow.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "weights": dict(DEFAULT_WEIGHTS),
    "heuristic": "zero",
    "transpositions": True,
    "use_cutoff": True,
    "timeout_sec": None,
    "max_nodes": None,
}


def _defaults() -> Dict[str, Any]:
    result = DEFAULT_SETTINGS.copy()
    result["weights"] = dict(DEFAULT_WEIGHTS)
    return result


def validate_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check merged settings, raising SettingsError on values the solver can't use.

    Args:
        settings: Settings dictionary (defaults already merged in)

    Returns:
        The same dictionary
    """
    weights = settings.get("weights")
    if not isinstance(weights, dict) or not weights:
        raise SettingsError(f"weights must be a non-empty mapping, got {weights!r}")
    for kind, w in weights.items():
        # bool is an int subclass; reject it explicitly
        if not isinstance(w, int) or isinstance(w, bool) or w <= 0:
            raise SettingsError(f"weight for {kind!r} must be a positive integer, got {w!r}")
    if settings.get("heuristic") not in HEURISTICS:
        raise SettingsError(
            f"unknown heuristic {settings.get('heuristic')!r}; choose from {', '.join(HEURISTICS)}")
    for key in ("timeout_sec", "max_nodes"):
        v = settings.get(key)
        if v is not None and (not isinstance(v, (int, float)) or isinstance(v, bool) or v <= 0):
            raise SettingsError(f"{key} must be a positive number or null, got {v!r}")
    return settings


def load_settings(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load settings from a JSON file.

    Args:
        path: Settings file; SETTINGS_FILE when omitted

    Returns:
        Settings dictionary. Returns defaults if file missing or unreadable.

    Raises:
        SettingsError: If the file holds invalid values
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE
    if not settings_file.exists():
        logger.debug(f"Settings file {settings_file} not found, using defaults")
        return _defaults()

    try:
        with open(settings_file, 'r', encoding='utf-8') as f:
            settings = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return _defaults()

    if not isinstance(settings, dict):
        raise SettingsError(f"{settings_file} must hold a JSON object")

    # Merge with defaults to handle missing keys
    result = _defaults()
    result.update(settings)
    logger.debug(f"Settings loaded: {result}")
    return validate_settings(result)


def engine_options(settings: Dict[str, Any], topology: Topology) -> Dict[str, Any]:
    """Keyword arguments for branch_and_bound / minimum_cost from loaded settings."""
    return {
        "hfun": make_heuristic(settings["heuristic"], topology, settings["weights"]),
        "use_cutoff": settings["use_cutoff"],
        "transpositions": settings["transpositions"],
        "timeout_sec": settings["timeout_sec"],
        "max_nodes": settings["max_nodes"],
    }
