"""Hand-crafted unit tests for the models and the three feasibility tests."""

import itertools
import unittest
from fractions import Fraction

from feasibility.errors import InvalidInput, NonConvergence
from feasibility.models import Service, ServiceSet, Verdict
from feasibility.analysis import (
    ceil_div,
    completion_time,
    completion_time_feasibility,
    completion_times,
    demand,
    iter_scheduling_points,
    least_upper_bound,
    rate_monotonic_least_upper_bound,
    scheduling_point_feasibility,
    scheduling_points,
)


def service_set(periods, wcets):
    return ServiceSet.from_arrays(periods, wcets)


class TestService(unittest.TestCase):
    """Test Service validation and properties."""

    def test_valid_service(self):
        service = Service(period=10, wcet=2, deadline=10, name="S1")
        self.assertEqual(service.period, 10)
        self.assertEqual(service.wcet, 2)
        self.assertEqual(service.deadline, 10)
        self.assertEqual(service.utilization, Fraction(1, 5))

    def test_default_deadline(self):
        """Deadline defaults to period."""
        self.assertEqual(Service(period=10, wcet=2).deadline, 10)

    def test_integral_floats_accepted(self):
        service = Service(period=10.0, wcet=2.0)
        self.assertEqual(service.period, 10)
        self.assertIsInstance(service.period, int)

    def test_non_integral_rejected(self):
        with self.assertRaises(InvalidInput):
            Service(period=10.5, wcet=2)

    def test_name_must_be_string(self):
        with self.assertRaisesRegex(InvalidInput, "name must be a string"):
            Service(period=10, wcet=2, name=0)

    def test_bool_rejected(self):
        with self.assertRaises(InvalidInput):
            Service(period=10, wcet=True)

    def test_non_positive_rejected(self):
        for period, wcet in [(0, 1), (-10, 1), (10, 0), (10, -1)]:
            with self.subTest(period=period, wcet=wcet):
                with self.assertRaises(InvalidInput):
                    Service(period=period, wcet=wcet)

    def test_wcet_exceeds_period(self):
        with self.assertRaisesRegex(InvalidInput, "WCET exceeds period"):
            Service(period=10, wcet=11)

    def test_wcet_equals_period(self):
        service = Service(period=10, wcet=10)
        self.assertEqual(service.utilization, 1)

    def test_constrained_deadline_rejected(self):
        with self.assertRaisesRegex(InvalidInput, "implicit deadlines"):
            Service(period=10, wcet=2, deadline=5)

    def test_invalid_input_is_value_error(self):
        with self.assertRaises(ValueError):
            Service(period=10, wcet=0)


class TestServiceSet(unittest.TestCase):
    """Test ServiceSet construction and ordering invariants."""

    def test_from_arrays(self):
        services = service_set([2, 10, 15], [1, 1, 2])
        self.assertEqual(len(services), 3)
        self.assertEqual(services.periods, (2, 10, 15))
        self.assertEqual(services.wcets, (1, 1, 2))
        self.assertEqual(services.deadlines, (2, 10, 15))
        self.assertEqual(services.names, ("S1", "S2", "S3"))
        self.assertEqual(services[2].wcet, 2)

    def test_names_kept(self):
        services = ServiceSet.from_arrays([2, 4], [1, 1], names=["fast", "slow"])
        self.assertEqual(services.names, ("fast", "slow"))

    def test_empty_set(self):
        with self.assertRaisesRegex(InvalidInput, "empty"):
            ServiceSet()
        with self.assertRaises(InvalidInput):
            ServiceSet.from_arrays([], [])

    def test_mismatched_lengths(self):
        with self.assertRaisesRegex(InvalidInput, "mismatched"):
            service_set([2, 10, 15], [1, 1])
        with self.assertRaisesRegex(InvalidInput, "mismatched"):
            ServiceSet.from_arrays([2, 10], [1, 1], deadlines=[2])

    def test_duplicate_names_rejected(self):
        with self.assertRaisesRegex(InvalidInput, "duplicate service name .x."):
            ServiceSet.from_arrays([2, 5, 7], [1, 1, 2], names=["x", "x", "x"])

    def test_explicit_name_clashing_with_default_rejected(self):
        with self.assertRaisesRegex(InvalidInput, "duplicate"):
            ServiceSet.from_arrays([2, 5], [1, 1], names=["S2", ""])

    def test_non_string_names_rejected(self):
        with self.assertRaisesRegex(InvalidInput, "name must be a string"):
            ServiceSet.from_arrays([2, 5], [1, 1], names=[0, 1])

    def test_unsorted_periods(self):
        with self.assertRaisesRegex(InvalidInput, "not sorted ascending at service 1"):
            service_set([10, 5], [1, 1])

    def test_equal_periods_rejected(self):
        with self.assertRaisesRegex(InvalidInput, "not sorted ascending"):
            service_set([5, 5], [1, 1])

    def test_error_names_service(self):
        with self.assertRaisesRegex(InvalidInput, r"service 2 \(S3\): WCET exceeds period"):
            service_set([2, 3, 4], [1, 1, 5])

    def test_utilization(self):
        services = service_set([2, 10, 15], [1, 1, 2])
        self.assertEqual(services.utilization, Fraction(11, 15))
        self.assertAlmostEqual(services.utilization_percent, 73.3333, places=3)

    def test_naive_utilization_truncates(self):
        """Per-term integer division drops every C < T term."""
        self.assertEqual(service_set([2, 10, 15], [1, 1, 2]).naive_utilization_percent, 0.0)
        self.assertEqual(service_set([3, 5], [3, 2]).naive_utilization_percent, 100.0)


class TestVerdict(unittest.TestCase):

    def test_of(self):
        self.assertIs(Verdict.of(True), Verdict.FEASIBLE)
        self.assertIs(Verdict.of(False), Verdict.INFEASIBLE)

    def test_bool_and_str(self):
        self.assertTrue(Verdict.FEASIBLE)
        self.assertFalse(Verdict.INFEASIBLE)
        self.assertEqual(str(Verdict.INFEASIBLE), "INFEASIBLE")


class TestLeastUpperBound(unittest.TestCase):

    def test_single_service_bound_is_one(self):
        self.assertEqual(least_upper_bound(1), 1.0)

    def test_known_bounds(self):
        self.assertAlmostEqual(least_upper_bound(2), 0.828427, places=5)
        self.assertAlmostEqual(least_upper_bound(3), 0.779763, places=5)
        self.assertAlmostEqual(least_upper_bound(4), 0.756828, places=5)

    def test_converges_to_ln2(self):
        self.assertAlmostEqual(least_upper_bound(100000), 0.693147, places=4)

    def test_zero_rejected(self):
        with self.assertRaises(InvalidInput):
            least_upper_bound(0)

    def test_within_bound(self):
        self.assertTrue(rate_monotonic_least_upper_bound(service_set([2, 10, 15], [1, 1, 2])))

    def test_above_bound(self):
        self.assertFalse(rate_monotonic_least_upper_bound(service_set([3, 5, 15], [1, 2, 3])))

    def test_full_single_service(self):
        self.assertTrue(rate_monotonic_least_upper_bound(service_set([5], [5])))

    def test_logs_running_sum(self):
        with self.assertLogs("feasibility.analysis", level="DEBUG") as cm:
            rate_monotonic_least_upper_bound(service_set([2, 10], [1, 1]))
        self.assertTrue(any("LUB" in line for line in cm.output))


class TestCompletionTime(unittest.TestCase):
    """Test the completion time recurrence."""

    def test_ceil_div(self):
        self.assertEqual(ceil_div(6, 3), 2)
        self.assertEqual(ceil_div(7, 3), 3)
        self.assertEqual(ceil_div(1, 3), 1)

    def test_highest_priority_is_own_wcet(self):
        services = service_set([4, 6], [1, 2])
        self.assertEqual(completion_time(services, 0), 1)

    def test_two_services(self):
        # a0 = 3; a1 = 2 + ceil(3/4)*1 = 3 (converged)
        services = service_set([4, 6], [1, 2])
        self.assertEqual(completion_time(services, 1), 3)

    def test_known_values(self):
        services = service_set([4, 5, 9, 18], [1, 1, 3, 3])
        self.assertEqual(
            [completion_time(services, i) for i in range(4)], [1, 2, 7, 18]
        )

    def test_exact_deadline_met(self):
        # a: 6, 9, 12, 13, 15, 16, 16 -> equals deadline 16
        services = service_set([2, 4, 16], [1, 1, 4])
        self.assertEqual(completion_time(services, 2), 16)

    def test_deadline_miss_returns_none(self):
        # a: 4, 5, 6, 7, 8 > 7
        services = service_set([2, 5, 7], [1, 1, 2])
        self.assertIsNone(completion_time(services, 2))

    def test_initial_workload_over_deadline(self):
        services = service_set([2, 3], [2, 2])
        self.assertIsNone(completion_time(services, 1))

    def test_iteration_cap_raises(self):
        services = service_set([2, 4, 16], [1, 1, 4])
        with self.assertRaises(NonConvergence) as cm:
            completion_time(services, 2, max_iterations=2)
        self.assertEqual(cm.exception.index, 2)
        self.assertEqual(cm.exception.iterations, 2)
        self.assertEqual(cm.exception.last_value, 12)

    def test_non_convergence_is_infeasible(self):
        services = service_set([2, 4, 16], [1, 1, 4])
        with self.assertLogs("feasibility.analysis", level="WARNING"):
            self.assertFalse(completion_time_feasibility(services, max_iterations=2))

    def test_default_cap_follows_deadline(self):
        # Converges after thousands of steps; the fixed point is 9000 jobs of S1 plus C2.
        services = service_set([1000, 10_000_000], [999, 9000])
        self.assertEqual(completion_time(services, 1), 9_000_000)
        self.assertTrue(completion_time_feasibility(services))

    def test_explicit_cap_below_convergence_raises(self):
        services = service_set([1000, 10_000_000], [999, 9000])
        with self.assertRaises(NonConvergence):
            completion_time(services, 1, max_iterations=1000)

    def test_completion_times_one_entry_per_service(self):
        times = completion_times(service_set([2, 5, 7], [1, 1, 2]))
        self.assertEqual(len(times), 3)

    def test_index_out_of_range(self):
        with self.assertRaises(InvalidInput):
            completion_time(service_set([2], [1]), 1)

    def test_completion_times_by_name(self):
        times = completion_times(service_set([2, 5, 7], [1, 1, 2]))
        self.assertEqual(times, {"S1": 1, "S2": 2, "S3": None})

    def test_completion_time_at_least_wcet(self):
        services = service_set([5, 10, 15], [1, 2, 1])
        for i, service in enumerate(services):
            self.assertGreaterEqual(completion_time(services, i), service.wcet)


class TestSchedulingPoint(unittest.TestCase):
    """Test the scheduling point construction and test."""

    def test_points(self):
        services = service_set([2, 10, 15], [1, 1, 2])
        self.assertEqual(scheduling_points(services, 0), [2])
        self.assertEqual(scheduling_points(services, 1), [2, 4, 6, 8, 10])
        self.assertEqual(scheduling_points(services, 2), [2, 4, 6, 8, 10, 12, 14, 15])

    def test_points_are_lazy(self):
        services = service_set([2, 10 ** 8], [1, 1])
        points = iter_scheduling_points(services, 1)
        self.assertEqual(list(itertools.islice(points, 3)), [2, 4, 6])
        self.assertTrue(scheduling_point_feasibility(services))

    def test_points_merge_without_duplicates(self):
        services = service_set([2, 3, 12], [1, 1, 1])
        self.assertEqual(scheduling_points(services, 2), [2, 3, 4, 6, 8, 9, 10, 12])

    def test_points_index_checked_eagerly(self):
        with self.assertRaises(InvalidInput):
            iter_scheduling_points(service_set([2], [1]), 1)

    def test_points_include_own_period(self):
        services = service_set([3, 5, 7], [1, 1, 1])
        for i in range(3):
            self.assertEqual(scheduling_points(services, i)[-1], services[i].period)

    def test_demand(self):
        services = service_set([2, 10, 15], [1, 1, 2])
        # 1*ceil(6/2) + 1*ceil(6/10) + 2*ceil(6/15)
        self.assertEqual(demand(services, 2, 6), 6)
        self.assertEqual(demand(services, 0, 6), 3)

    def test_demand_at_exact_multiple(self):
        services = service_set([2, 4, 16], [1, 1, 4])
        self.assertEqual(demand(services, 2, 16), 16)

    def test_no_point_absorbs_demand(self):
        self.assertFalse(scheduling_point_feasibility(service_set([2, 5, 7], [1, 1, 2])))

    def test_feasible(self):
        self.assertTrue(scheduling_point_feasibility(service_set([3, 5, 15], [1, 2, 3])))


class TestScenarios(unittest.TestCase):
    """Concrete service sets with implicit deadlines."""

    def check(self, periods, wcets, ct, sp, lub):
        services = service_set(periods, wcets)
        self.assertEqual(completion_time_feasibility(services), ct)
        self.assertEqual(scheduling_point_feasibility(services), sp)
        self.assertEqual(rate_monotonic_least_upper_bound(services), lub)

    def test_low_utilization(self):
        self.check([2, 10, 15], [1, 1, 2], True, True, True)

    def test_harmonic_full_utilization(self):
        self.check([2, 4, 16], [1, 1, 4], True, True, False)

    def test_full_utilization_fits_exactly(self):
        # U = 1/3 + 2/5 + 4/15 = 1; the lowest service completes at 15 = D
        services = service_set([3, 5, 15], [1, 2, 4])
        self.assertEqual(services.utilization, 1)
        self.assertEqual(completion_time(services, 2), 15)
        self.check([3, 5, 15], [1, 2, 4], True, True, False)

    def test_four_services(self):
        services = service_set([6, 8, 12, 24], [1, 2, 4, 6])
        self.assertEqual([completion_time(services, i) for i in range(4)], [1, 3, 8, 24])
        self.check([6, 8, 12, 24], [1, 2, 4, 6], True, True, False)

    def test_infeasible_sets(self):
        self.check([2, 5, 7], [1, 1, 2], False, False, False)
        self.check([2, 5, 7, 13], [1, 1, 1, 2], False, False, False)

    def test_overloaded(self):
        self.check([3, 5], [3, 3], False, False, False)

    def test_feasible_above_bound(self):
        self.check([3, 5, 15], [1, 2, 3], True, True, False)
        self.check([2, 5, 10], [1, 2, 1], True, True, False)

    def test_single_service(self):
        for wcet in (1, 4, 7):
            with self.subTest(wcet=wcet):
                self.check([7], [wcet], True, True, True)


if __name__ == "__main__":
    unittest.main()
