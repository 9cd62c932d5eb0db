"""Combined feasibility report for a service set."""

from dataclasses import dataclass
from fractions import Fraction
from typing import Optional

from feasibility.analysis import (
    completion_time_feasibility,
    rate_monotonic_least_upper_bound,
    scheduling_point_feasibility,
)
from feasibility.models import ServiceSet, Verdict

RULE = "*" * 72


@dataclass(frozen=True)
class FeasibilityReport:
    """Verdicts of every test for one service set.

    Attributes:
        completion_time: Exact completion time test.
        scheduling_point: Exact scheduling point test.
        rm_lub: Liu & Layland least upper bound test.
        edf: EDF utilization bound (U <= 1), exact for implicit deadlines.
        llf: Placeholder only: utilization below 1 (100%).
        utilization: Exact total utilization.
        utilization_percent: Total utilization in percent.
        naive_utilization_percent: Per-term truncated utilization in percent.
    """
    completion_time: Verdict
    scheduling_point: Verdict
    rm_lub: Verdict
    edf: Verdict
    llf: Verdict
    utilization: Fraction
    utilization_percent: float
    naive_utilization_percent: float

    @property
    def exact_tests_agree(self) -> bool:
        return self.completion_time is self.scheduling_point


def analyze(services: ServiceSet, max_iterations: Optional[int] = None) -> FeasibilityReport:
    """Run every test on a service set."""
    utilization = services.utilization
    utilization_percent = services.utilization_percent
    return FeasibilityReport(
        completion_time=Verdict.of(completion_time_feasibility(services, max_iterations)),
        scheduling_point=Verdict.of(scheduling_point_feasibility(services)),
        rm_lub=Verdict.of(rate_monotonic_least_upper_bound(services)),
        edf=Verdict.of(utilization <= 1),
        llf=Verdict.of(utilization < 1),
        utilization=utilization,
        utilization_percent=utilization_percent,
        naive_utilization_percent=services.naive_utilization_percent,
    )


def describe(name: str, services: ServiceSet) -> str:
    """Header line such as 'Ex-0 U=73.33% (C1=1, C2=1; T1=2, T2=10; T=D)'."""
    wcets = ", ".join(f"C{i + 1}={s.wcet}" for i, s in enumerate(services))
    periods = ", ".join(f"T{i + 1}={s.period}" for i, s in enumerate(services))
    return f"{name} U={services.utilization_percent:4.2f}% ({wcets}; {periods}; T=D)"


def format_report(name: str, services: ServiceSet, report: FeasibilityReport) -> str:
    """Render a report as the labelled verdict block."""
    lines = [
        describe(name, services),
        f"Completion Time: {report.completion_time}",
        f"Scheduling Point: {report.scheduling_point}",
        f"RM LUB: {report.rm_lub}",
        f"EDF: {report.edf}",
        f"LLF: {report.llf} (placeholder: utilization < 100%)",
    ]
    return "\n".join(lines)
