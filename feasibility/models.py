"""Data models for services, service sets and verdicts."""

import enum
import numbers
from dataclasses import dataclass, field, replace
from fractions import Fraction
from typing import Iterator, Optional, Sequence, Tuple

from feasibility.errors import InvalidInput


def _as_time(value, what: str, name: str) -> int:
    """Coerce a time value to a positive int or raise InvalidInput."""
    label = f" ({name})" if name else ""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidInput(f"{what}{label} must be an integer, got {value!r}")
    if isinstance(value, numbers.Integral):
        value = int(value)
    elif float(value).is_integer():
        value = int(value)
    else:
        raise InvalidInput(f"{what}{label} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidInput(f"{what}{label} must be positive, got {value}")
    return value


class Verdict(enum.Enum):
    """Outcome of a feasibility test for a whole service set."""

    FEASIBLE = "FEASIBLE"
    INFEASIBLE = "INFEASIBLE"

    @classmethod
    def of(cls, feasible: bool) -> "Verdict":
        return cls.FEASIBLE if feasible else cls.INFEASIBLE

    def __bool__(self) -> bool:
        return self is Verdict.FEASIBLE

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Service:
    """A periodic real-time service.

    Attributes:
        period: Time between successive job releases (T).
        wcet: Worst-case execution time of one job (C).
        deadline: Relative deadline (D). Defaults to the period; only
                  implicit deadlines (D = T) are supported.
        name: Optional identifier. ServiceSet fills it in when empty.
    """
    period: int
    wcet: int
    deadline: Optional[int] = None
    name: str = ""

    def __post_init__(self) -> None:
        """Validate and normalise service parameters."""
        if not isinstance(self.name, str):
            raise InvalidInput(f"name must be a string, got {self.name!r}")
        object.__setattr__(self, 'period', _as_time(self.period, "period", self.name))
        object.__setattr__(self, 'wcet', _as_time(self.wcet, "WCET", self.name))

        if self.deadline is None:
            object.__setattr__(self, 'deadline', self.period)
        else:
            object.__setattr__(self, 'deadline', _as_time(self.deadline, "deadline", self.name))

        if self.wcet > self.period:
            raise InvalidInput(f"WCET exceeds period: {self.wcet} > {self.period}")
        if self.deadline != self.period:
            raise InvalidInput(
                f"only implicit deadlines are supported: deadline {self.deadline} "
                f"!= period {self.period}"
            )

    @property
    def utilization(self) -> Fraction:
        """Return the exact utilization of this service (C/T)."""
        return Fraction(self.wcet, self.period)

    def __str__(self) -> str:
        name_str = f"{self.name}: " if self.name else ""
        return f"Service({name_str}C={self.wcet}, T={self.period}, D={self.deadline})"


@dataclass(frozen=True)
class ServiceSet:
    """An ordered, rate-monotonic set of services.

    Services must be given in strictly increasing period order, which is
    also priority order: index 0 is the highest priority. The set checks
    this ordering but never sorts.
    """
    services: Tuple[Service, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        services = tuple(self.services)
        if not services:
            raise InvalidInput("service set is empty")

        named = []
        for i, service in enumerate(services):
            if not isinstance(service, Service):
                raise InvalidInput(f"service {i} is not a Service: {service!r}")
            if not service.name:
                service = replace(service, name=f"S{i + 1}")
            named.append(service)

        seen = {}
        for i, service in enumerate(named):
            if service.name in seen:
                raise InvalidInput(
                    f"duplicate service name {service.name!r} at services "
                    f"{seen[service.name]} and {i}"
                )
            seen[service.name] = i

        for i in range(1, len(named)):
            prev, cur = named[i - 1].period, named[i].period
            if cur <= prev:
                raise InvalidInput(
                    f"periods not sorted ascending at service {i}: {cur} <= {prev}"
                )

        object.__setattr__(self, 'services', tuple(named))

    @classmethod
    def from_arrays(
        cls,
        periods: Sequence[int],
        wcets: Sequence[int],
        deadlines: Optional[Sequence[int]] = None,
        names: Optional[Sequence[str]] = None,
    ) -> "ServiceSet":
        """Build a set from parallel period/WCET(/deadline) sequences."""
        periods = list(periods)
        wcets = list(wcets)
        if len(periods) != len(wcets):
            raise InvalidInput(
                f"mismatched array lengths: {len(periods)} periods, {len(wcets)} WCETs"
            )
        if deadlines is None:
            deadlines = [None] * len(periods)
        else:
            deadlines = list(deadlines)
            if len(deadlines) != len(periods):
                raise InvalidInput(
                    f"mismatched array lengths: {len(periods)} periods, "
                    f"{len(deadlines)} deadlines"
                )
        if names is None:
            names = [""] * len(periods)
        else:
            names = list(names)
            if len(names) != len(periods):
                raise InvalidInput(
                    f"mismatched array lengths: {len(periods)} periods, {len(names)} names"
                )

        services = []
        for i, (t, c, d, name) in enumerate(zip(periods, wcets, deadlines, names)):
            label = name or f"S{i + 1}"
            try:
                services.append(Service(period=t, wcet=c, deadline=d, name=name))
            except InvalidInput as exc:
                raise InvalidInput(f"service {i} ({label}): {exc}") from exc
        return cls(services=tuple(services))

    @property
    def periods(self) -> Tuple[int, ...]:
        return tuple(s.period for s in self.services)

    @property
    def wcets(self) -> Tuple[int, ...]:
        return tuple(s.wcet for s in self.services)

    @property
    def deadlines(self) -> Tuple[int, ...]:
        return tuple(s.deadline for s in self.services)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(s.name for s in self.services)

    @property
    def utilization(self) -> Fraction:
        """Return the exact total utilization."""
        return sum((s.utilization for s in self.services), Fraction(0))

    @property
    def utilization_percent(self) -> float:
        return float(self.utilization * 100)

    @property
    def naive_utilization_percent(self) -> float:
        """Utilization in percent with each C/T term truncated to an integer.

        This reproduces integer division before widening, so any service
        with C < T contributes nothing. Kept for parity checks only.
        """
        return float(sum((s.wcet // s.period) * 100 for s in self.services))

    def __len__(self) -> int:
        return len(self.services)

    def __iter__(self) -> Iterator[Service]:
        return iter(self.services)

    def __getitem__(self, index: int) -> Service:
        return self.services[index]
