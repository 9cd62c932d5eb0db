"""Feasibility: offline rate-monotonic feasibility tests.

This package decides whether a set of periodic services, each with a
period, WCET and implicit deadline, can be scheduled on a single processor
under rate-monotonic fixed priorities. It provides two exact tests
(completion time and scheduling point) and the Liu & Layland utilization
bound.
"""

from feasibility.errors import FeasibilityError, InvalidInput, NonConvergence
from feasibility.models import Service, ServiceSet, Verdict
from feasibility.analysis import (
    completion_time,
    completion_time_feasibility,
    least_upper_bound,
    rate_monotonic_least_upper_bound,
    scheduling_point_feasibility,
    scheduling_points,
)
from feasibility.report import FeasibilityReport, analyze

__version__ = "0.1.0"
__all__ = [
    "FeasibilityError",
    "InvalidInput",
    "NonConvergence",
    "Service",
    "ServiceSet",
    "Verdict",
    "completion_time",
    "completion_time_feasibility",
    "least_upper_bound",
    "rate_monotonic_least_upper_bound",
    "scheduling_point_feasibility",
    "scheduling_points",
    "FeasibilityReport",
    "analyze",
]
