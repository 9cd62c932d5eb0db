"""Random service set generators for testing and experiments."""

import math
import random
from typing import List, Optional

from feasibility.models import Service, ServiceSet


def uunifast(n: int, u_total: float, seed: Optional[int] = None) -> List[float]:
    """Generate service utilizations using the UUniFast algorithm.

    UUniFast generates uniformly distributed utilizations that sum to
    the target total utilization.

    Reference:
    Bini, E., & Buttazzo, G. C. (2005). Measuring the performance of schedulability tests.
    Real-Time Systems, 30(1-2), 129-154.

    Args:
        n: Number of services.
        u_total: Target total utilization.
        seed: Optional random seed for reproducibility.

    Returns:
        List of n utilization values that sum to approximately u_total.

    Raises:
        ValueError: If n <= 0 or u_total < 0.
    """
    if n <= 0:
        raise ValueError("Number of services must be positive")
    if u_total < 0:
        raise ValueError("Target utilization must be non-negative")

    rng = random.Random(seed)

    utilizations = []
    sum_u = u_total

    for i in range(1, n):
        next_sum_u = sum_u * (rng.random() ** (1.0 / (n - i)))
        utilizations.append(sum_u - next_sum_u)
        sum_u = next_sum_u

    # Last utilization is whatever remains
    utilizations.append(sum_u)

    return utilizations


def log_uniform_periods(
    n: int, period_min: int, period_max: int, rng: random.Random
) -> List[int]:
    """Draw n distinct integer periods, log-uniform in [period_min, period_max], ascending."""
    if period_min <= 0 or period_min > period_max:
        raise ValueError("Invalid period range")
    if period_max - period_min + 1 < n:
        raise ValueError(
            f"Period range [{period_min}, {period_max}] cannot hold {n} distinct periods"
        )

    log_min = math.log(period_min)
    log_max = math.log(period_max)
    periods = set()
    while len(periods) < n:
        T = int(round(math.exp(rng.uniform(log_min, log_max))))
        periods.add(min(max(T, period_min), period_max))
    return sorted(periods)


def generate_service_set(
    n: int,
    target_utilization: float,
    period_min: int = 10,
    period_max: int = 1000,
    seed: Optional[int] = None
) -> ServiceSet:
    """Generate a random rate-monotonic service set with implicit deadlines.

    Periods are distinct integers drawn log-uniformly and sorted ascending,
    so the result is already in priority order. WCETs are derived from
    UUniFast utilizations, rounded to integers and kept within [1, T]; the
    achieved utilization is therefore only close to the target.

    Args:
        n: Number of services to generate.
        target_utilization: Target total utilization.
        period_min: Minimum period.
        period_max: Maximum period.
        seed: Random seed for reproducibility.

    Returns:
        A valid ServiceSet with n services.

    Raises:
        ValueError: If parameters are invalid.
    """
    rng = random.Random(seed)
    periods = log_uniform_periods(n, period_min, period_max, rng)
    utilizations = uunifast(n, target_utilization, seed=seed)

    services = []
    for i, (T, u) in enumerate(zip(periods, utilizations)):
        C = min(T, max(1, int(round(u * T))))
        services.append(Service(period=T, wcet=C, name=f"S{i + 1}"))

    return ServiceSet(services=tuple(services))
