"""Planner configuration defaults."""

from .defaults import (  # noqa: F401
    ACCEPTANCE_POLICIES,
    AnnealingParams,
    DEFAULT_ANNEALING_PARAMS,
    DEFAULT_PLANNER_SETTINGS,
    DEFAULT_SEARCH_PARAMS,
    PlannerSettings,
    SearchParams,
)

__all__ = [
    "ACCEPTANCE_POLICIES",
    "AnnealingParams",
    "DEFAULT_ANNEALING_PARAMS",
    "DEFAULT_PLANNER_SETTINGS",
    "DEFAULT_SEARCH_PARAMS",
    "PlannerSettings",
    "SearchParams",
]
