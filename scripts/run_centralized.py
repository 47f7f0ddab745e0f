"""Generate a random pickup-and-delivery instance and plan it centrally."""

from __future__ import annotations

import argparse
from dataclasses import replace
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from config import DEFAULT_PLANNER_SETTINGS, PlannerSettings
from config.instance_generator import InstanceConfig, generate_instance
from config.settings import load_settings, settings_to_dict
from core.plan import VehiclePlan
from planner.centralized import PLANNING_STRATEGIES, CentralizedPlanner
from planner.errors import PlanningError

DEFAULT_STALL_LIMIT = 500


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--settings", type=Path, default=None, help="JSON settings file")
    parser.add_argument("--strategy", choices=PLANNING_STRATEGIES, default="sls")
    parser.add_argument("--tasks", type=int, default=10)
    parser.add_argument("--vehicles", type=int, default=3)
    parser.add_argument("--cities", type=int, default=12)
    parser.add_argument("--seed", type=int, default=7, help="Instance and search seed")
    parser.add_argument("--manhattan", action="store_true", help="Use Manhattan distances")
    parser.add_argument("--max-iterations", type=int, default=None)
    parser.add_argument(
        "--stall-limit",
        type=int,
        default=None,
        help="Stop after this many iterations without a cost change (default 500, 0 disables)",
    )
    parser.add_argument("--time-limit", type=float, default=None, help="Search time limit in seconds")
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--acceptance", choices=("greedy", "annealing"), default=None)
    parser.add_argument("--json", type=Path, default=None, help="Write plans and statistics to this file")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args()


def build_settings(args: argparse.Namespace) -> PlannerSettings:
    settings = load_settings(args.settings) if args.settings else DEFAULT_PLANNER_SETTINGS

    overrides: Dict[str, Any] = {"seed": args.seed}
    if args.max_iterations is not None:
        overrides["max_iterations"] = args.max_iterations
    if args.stall_limit is not None:
        overrides["stall_limit"] = args.stall_limit if args.stall_limit > 0 else None
    elif args.settings is None:
        overrides["stall_limit"] = DEFAULT_STALL_LIMIT
    if args.time_limit is not None:
        overrides["time_limit_s"] = args.time_limit
    if args.workers is not None:
        overrides["workers"] = args.workers
    if args.acceptance is not None:
        overrides["acceptance"] = args.acceptance

    return replace(settings, search=replace(settings.search, **overrides))


def _plan_to_dict(plan: VehiclePlan) -> Dict[str, Any]:
    return {
        "vehicle_id": plan.vehicle_id,
        "start_city": plan.start_city,
        "steps": [
            {"kind": step.kind.value, "city": step.city, "task_id": step.task_id}
            for step in plan.steps
        ],
    }


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    instance = generate_instance(InstanceConfig(
        num_tasks=args.tasks,
        num_vehicles=args.vehicles,
        num_cities=args.cities,
        use_manhattan=args.manhattan,
        seed=args.seed,
    ))
    settings = build_settings(args)
    print(f"Instance: {instance.describe()}")

    planner = CentralizedPlanner(instance.distance, settings=settings, strategy=args.strategy)
    try:
        plans: List[VehiclePlan] = planner.plan(instance.vehicles, instance.tasks)
    except PlanningError as exc:
        print(f"Planning failed: {exc}", file=sys.stderr)
        return 1

    result = planner.last_result
    for plan in plans:
        print(f"{plan}  distance={plan.total_distance(instance.distance):.2f}")
    print(f"Total distance: {result.total_distance:.2f} ({result.elapsed_ms:.0f} ms)")
    if result.search is not None:
        search = result.search
        print(
            f"SLS: {search.iterations} iterations, stop={search.stop_reason.value}, "
            f"initial={search.initial_cost:.2f}, best={search.cost:.2f}"
        )

    if args.json is not None:
        payload = {
            "instance": instance.describe(),
            "settings": settings_to_dict(settings),
            "strategy": args.strategy,
            "total_distance": result.total_distance,
            "elapsed_ms": result.elapsed_ms,
            "plans": [_plan_to_dict(plan) for plan in plans],
        }
        if result.search is not None:
            payload["search"] = {
                "iterations": result.search.iterations,
                "stop_reason": result.search.stop_reason.value,
                "initial_cost": result.search.initial_cost,
                "cost": result.search.cost,
                "empty_neighbourhoods": result.search.empty_neighbourhoods,
            }
        args.json.parent.mkdir(parents=True, exist_ok=True)
        args.json.write_text(json.dumps(payload, indent=2))
        print(f"Wrote {args.json}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
