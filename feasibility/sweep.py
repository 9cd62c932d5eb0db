"""Acceptance-ratio sweeps of the feasibility tests over utilization."""

from concurrent.futures import ProcessPoolExecutor
from typing import Dict, List, Optional, Sequence, Tuple

from feasibility.analysis import (
    completion_time_feasibility,
    rate_monotonic_least_upper_bound,
    scheduling_point_feasibility,
)
from feasibility.generators import generate_service_set
from feasibility.logger import get_logger
from feasibility.models import ServiceSet

LOGGER = get_logger("sweep")

TEST_NAMES = ("completion_time", "scheduling_point", "rm_lub")


def run_tests(services: ServiceSet) -> Tuple[bool, bool, bool]:
    """Return (completion time, scheduling point, RM LUB) results."""
    return (
        completion_time_feasibility(services),
        scheduling_point_feasibility(services),
        rate_monotonic_least_upper_bound(services),
    )


def run_sweep(
    utilisation_points: Sequence[float],
    num_sets_per_point: int = 100,
    num_services: int = 5,
    period_min: int = 10,
    period_max: int = 1000,
    seed: int = 42,
    max_workers: Optional[int] = None,
) -> Dict[float, Dict[str, float]]:
    """Measure the fraction of random sets each test accepts.

    Args:
        utilisation_points: Target utilizations (e.g. [0.1, 0.2, ..., 1.0]).
        num_sets_per_point: Random service sets generated per point.
        num_services: Services per set.
        period_min: Minimum period.
        period_max: Maximum period.
        seed: Base random seed (varied per set).
        max_workers: Analyse sets in a process pool when greater than 1.

    Returns:
        Dictionary mapping utilization -> {test name -> acceptance ratio}.
    """
    if num_sets_per_point <= 0:
        raise ValueError("num_sets_per_point must be positive")

    results: Dict[float, Dict[str, float]] = {}
    executor = ProcessPoolExecutor(max_workers=max_workers) if max_workers and max_workers > 1 else None
    try:
        for u_total in utilisation_points:
            service_sets: List[ServiceSet] = [
                generate_service_set(
                    n=num_services,
                    target_utilization=u_total,
                    period_min=period_min,
                    period_max=period_max,
                    seed=seed + int(u_total * 1000) + i,
                )
                for i in range(num_sets_per_point)
            ]
            if executor is not None:
                outcomes = list(executor.map(run_tests, service_sets))
            else:
                outcomes = [run_tests(s) for s in service_sets]

            ratios = {
                name: sum(1 for o in outcomes if o[k]) / num_sets_per_point
                for k, name in enumerate(TEST_NAMES)
            }
            disagreements = sum(1 for o in outcomes if o[0] != o[1])
            if disagreements:
                LOGGER.error("U=%.2f: exact tests disagree on %d sets", u_total, disagreements)
            LOGGER.info("U=%.2f: %s", u_total, ratios)
            results[u_total] = ratios
    finally:
        if executor is not None:
            executor.shutdown()

    return results
