"""Helpers for loading planner settings from JSON documents.

Expected layout (every key optional)::

    {
        "timeouts": {"setup": 300000, "plan": 300000, "safety_margin": 0.9},
        "search": {
            "max_iterations": 10000,
            "stall_limit": 500,
            "seed": 42,
            "time_limit_s": null,
            "workers": 1,
            "acceptance": "greedy",
            "log_every": 500,
            "annealing": {"initial_temperature": 100.0, "cooling_rate": 0.995}
        }
    }
"""

from __future__ import annotations

from dataclasses import asdict, fields
import json
from pathlib import Path
from typing import Any, Dict, Mapping

from .defaults import AnnealingParams, PlannerSettings, SearchParams


_TIMEOUT_KEYS = {
    "setup": "setup_timeout_ms",
    "plan": "plan_timeout_ms",
    "safety_margin": "plan_safety_margin",
}


def _reject_unknown(section: str, payload: Mapping[str, Any], allowed) -> None:
    unknown = sorted(set(payload) - set(allowed))
    if unknown:
        raise ValueError(f"Unknown keys in '{section}': {unknown}")


def _construct(section: str, factory, kwargs: Mapping[str, Any]):
    try:
        return factory(**kwargs)
    except TypeError as exc:
        raise ValueError(f"Invalid value in '{section}': {exc}") from exc


def _search_from_dict(payload: Mapping[str, Any]) -> SearchParams:
    allowed = {f.name for f in fields(SearchParams)}
    _reject_unknown("search", payload, allowed)

    kwargs: Dict[str, Any] = dict(payload)
    annealing = kwargs.pop("annealing", None)
    if annealing is not None:
        if not isinstance(annealing, Mapping):
            raise ValueError("'search.annealing' must be an object")
        _reject_unknown("search.annealing", annealing, {f.name for f in fields(AnnealingParams)})
        kwargs["annealing"] = _construct("search.annealing", AnnealingParams, annealing)
    return _construct("search", SearchParams, kwargs)


def settings_from_dict(payload: Mapping[str, Any]) -> PlannerSettings:
    """Build ``PlannerSettings`` from a decoded JSON payload."""

    if not isinstance(payload, Mapping):
        raise ValueError("Settings payload must be a JSON object")
    _reject_unknown("settings", payload, {"timeouts", "search"})

    kwargs: Dict[str, Any] = {}
    timeouts = payload.get("timeouts", {})
    if not isinstance(timeouts, Mapping):
        raise ValueError("'timeouts' must be an object")
    _reject_unknown("timeouts", timeouts, _TIMEOUT_KEYS)
    for key, attribute in _TIMEOUT_KEYS.items():
        if key in timeouts:
            kwargs[attribute] = timeouts[key]

    search = payload.get("search")
    if search is not None:
        if not isinstance(search, Mapping):
            raise ValueError("'search' must be an object")
        kwargs["search"] = _search_from_dict(search)

    return _construct("timeouts", PlannerSettings, kwargs)


def load_settings(path: str | Path) -> PlannerSettings:
    """Load planner settings from a JSON file."""

    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return settings_from_dict(payload)


def settings_to_dict(settings: PlannerSettings) -> Dict[str, Any]:
    """Inverse of ``settings_from_dict``; handy for logging run metadata."""

    return {
        "timeouts": {
            key: getattr(settings, attribute) for key, attribute in _TIMEOUT_KEYS.items()
        },
        "search": asdict(settings.search),
    }
