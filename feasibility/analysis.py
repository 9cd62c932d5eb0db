"""Feasibility tests for rate-monotonic scheduling on a single processor.

Three decision procedures are provided, all operating on a ServiceSet whose
index order is its priority order (index 0 = shortest period = highest
priority):

1. RM LUB (Liu & Layland, 1973). Sufficient but not necessary:
       U = sum_i C_i / T_i  <=  n * (2^(1/n) - 1)

2. Completion time test (Joseph & Pandya, 1986). Exact. For each service i
   find the smallest fixed point of
       a_0     = sum_{j<=i} C_j
       a_(k+1) = C_i + sum_{j<i} ceil(a_k / T_j) * C_j
   and require a* <= D_i.

3. Scheduling point test (Lehoczky, Sha & Ding, 1989). Exact. Service i is
   feasible iff there is a point t in
       S_i = { l * T_k : 0 <= k <= i, 1 <= l <= floor(T_i / T_k) }
   with
       W_i(t) = sum_{j<=i} C_j * ceil(t / T_j)  <=  t

Both exact tests decide the same property and must agree on every input.

Assumptions:
    - Single processor
    - Fixed-priority preemptive scheduling, rate-monotonic priorities
    - Periodic tasks with implicit deadlines (D = T)
    - Integer time values; all arithmetic is exact
"""

import heapq
from typing import Dict, Iterator, List, Optional

from feasibility.errors import InvalidInput, NonConvergence
from feasibility.logger import get_logger
from feasibility.models import ServiceSet

LOGGER = get_logger("analysis")


def ceil_div(a: int, b: int) -> int:
    """Integer ceiling of a / b for positive b."""
    return -(-a // b)


def least_upper_bound(n: int) -> float:
    """Return the Liu & Layland utilization bound for n services."""
    if n <= 0:
        raise InvalidInput(f"number of services must be positive, got {n}")
    return n * (2.0 ** (1.0 / n) - 1.0)


def rate_monotonic_least_upper_bound(services: ServiceSet) -> bool:
    """Check a service set against the RM least upper bound.

    A True result guarantees schedulability; False is inconclusive.
    """
    utility_sum = 0
    for idx, service in enumerate(services):
        utility_sum += service.utilization
        LOGGER.debug(
            "for %d, wcet=%d, period=%d, utility_sum = %f",
            idx, service.wcet, service.period, float(utility_sum),
        )
    lub = least_upper_bound(len(services))
    LOGGER.debug("utility_sum = %f, LUB = %f", float(utility_sum), lub)

    # Fraction vs float compares exactly.
    return utility_sum <= lub


def _check_index(services: ServiceSet, index: int) -> None:
    if not 0 <= index < len(services):
        raise InvalidInput(f"service index {index} out of range for {len(services)} services")


def completion_time(
    services: ServiceSet,
    index: int,
    max_iterations: Optional[int] = None,
) -> Optional[int]:
    """Compute the worst-case completion time of one service.

    Iterates are strictly increasing integers until they converge, so the
    early deadline exit alone ends the loop within deadline - a0 + 1 steps.
    That is the default cap.

    Args:
        services: The service set, in priority order.
        index: Priority index of the service to analyse.
        max_iterations: Optional lower cap on recurrence steps.

    Returns:
        The fixed point a* if a* <= deadline, or None as soon as an iterate
        exceeds the deadline (the sequence is non-decreasing, so a* would too).

    Raises:
        NonConvergence: If an explicit max_iterations is reached first.
    """
    _check_index(services, index)

    periods = services.periods
    wcets = services.wcets
    deadline = services.deadlines[index]

    an = sum(wcets[:index + 1])
    if an > deadline:
        LOGGER.debug("service %d: initial workload %d exceeds deadline %d", index, an, deadline)
        return None

    limit = deadline - an + 1
    if max_iterations is not None:
        limit = min(limit, max_iterations)

    for iteration in range(1, limit + 1):
        anext = wcets[index]
        for j in range(index):
            anext += ceil_div(an, periods[j]) * wcets[j]

        if anext == an:
            LOGGER.debug(
                "service %d: converged to %d after %d iterations (deadline %d)",
                index, an, iteration, deadline,
            )
            return an
        if anext > deadline:
            LOGGER.debug("service %d: workload %d exceeds deadline %d", index, anext, deadline)
            return None
        an = anext

    raise NonConvergence(index, limit, an)


def _bounded_completion_time(
    services: ServiceSet, index: int, max_iterations: Optional[int]
) -> Optional[int]:
    try:
        return completion_time(services, index, max_iterations)
    except NonConvergence as exc:
        LOGGER.warning("%s; treating %s as infeasible", exc, services[index].name)
        return None


def completion_times(
    services: ServiceSet, max_iterations: Optional[int] = None
) -> Dict[str, Optional[int]]:
    """Map each service name to its completion time (None if it misses)."""
    return {
        service.name: _bounded_completion_time(services, i, max_iterations)
        for i, service in enumerate(services)
    }


def completion_time_feasibility(
    services: ServiceSet, max_iterations: Optional[int] = None
) -> bool:
    """Exact completion time (response time) test for the whole set."""
    feasible = True
    for i in range(len(services)):
        if _bounded_completion_time(services, i, max_iterations) is None:
            feasible = False
    return feasible


def _merged_multiples(periods, index: int) -> Iterator[int]:
    previous = None
    horizon = periods[index]
    multiples = (range(periods[k], horizon + 1, periods[k]) for k in range(index + 1))
    for t in heapq.merge(*multiples):
        if t != previous:
            yield t
            previous = t


def iter_scheduling_points(services: ServiceSet, index: int) -> Iterator[int]:
    """Yield the scheduling points S_i of service `index` in ascending order.

    The per-period multiples are merged lazily, so nothing proportional to
    T_i / T_0 is held in memory.
    """
    _check_index(services, index)
    return _merged_multiples(services.periods, index)


def scheduling_points(services: ServiceSet, index: int) -> List[int]:
    """Return the sorted scheduling points S_i of service `index`."""
    return list(iter_scheduling_points(services, index))


def demand(services: ServiceSet, index: int, t: int) -> int:
    """Cumulative demand W_i(t) of services 0..index released in [0, t)."""
    return sum(
        s.wcet * ceil_div(t, s.period) for s in services.services[:index + 1]
    )


def scheduling_point_feasibility(services: ServiceSet) -> bool:
    """Exact scheduling point test for the whole set."""
    feasible = True
    for i in range(len(services)):
        point = next(
            (t for t in iter_scheduling_points(services, i) if demand(services, i, t) <= t),
            None,
        )
        if point is None:
            LOGGER.debug("service %d: no scheduling point absorbs the demand", i)
            feasible = False
        else:
            LOGGER.debug("service %d: demand absorbed at t=%d", i, point)
    return feasible
