from __future__ import annotations

from fractions import Fraction
import random

import pytest

from rtsched.bounds import (
    BoundStatus,
    CompliantVectorBound,
    DeviAndersonBound,
    GEDFCompliantVector,
    GEDFDeviAnderson,
    SolverConfig,
    bound,
    create_bound_algorithm,
    response_time_gedf,
    tardiness_gedf,
)
from rtsched.generator import rand_task_system, uniform, uniform_int
from rtsched.model import Task, TaskSystem


def _example_tasks() -> TaskSystem:
    return TaskSystem([Task(period=3, cost=2), Task(period=3, cost=2), Task(period=6, cost=4)])


def test_two_processor_tardiness_values() -> None:
    tasks = _example_tasks()
    assert tardiness_gedf(tasks, 2, GEDFDeviAnderson) == [3, 3, 5]
    assert tardiness_gedf(tasks, 2, GEDFCompliantVector) == [3, 3, 4]


def test_three_processor_tardiness_values() -> None:
    tasks = _example_tasks()
    da = tardiness_gedf(tasks, 3, GEDFDeviAnderson)
    cv = tardiness_gedf(tasks, 3, GEDFCompliantVector)
    assert list(da) == pytest.approx([2.6667, 2.6667, 4.6667], abs=1e-4)
    assert list(cv) == pytest.approx([2.6667, 2.6667, 4.0], abs=1e-4)
    assert da.exact == (Fraction(8, 3), Fraction(8, 3), Fraction(14, 3))


@pytest.mark.parametrize("processors", [2, 3, 4, 5, 8])
def test_closed_form_for_example_system(processors: int) -> None:
    tasks = _example_tasks()
    lag = Fraction(2, processors)
    assert tardiness_gedf(tasks, processors, GEDFDeviAnderson).exact == (2 + lag, 2 + lag, 4 + lag)
    assert tardiness_gedf(tasks, processors, GEDFCompliantVector).exact == (2 + lag, 2 + lag, Fraction(4))


def test_response_times_add_relative_deadline() -> None:
    result = response_time_gedf(_example_tasks(), 2, GEDFDeviAnderson)
    assert result.status is BoundStatus.BOUNDED
    assert result == [6, 6, 11]
    assert result.kind.value == "response_time"
    assert result.tardiness(_example_tasks()).kind.value == "tardiness"


def test_bounds_do_not_increase_with_processors() -> None:
    rng = random.Random(7)
    systems = [_example_tasks(), TaskSystem([Task(period=18, cost=7), Task(period=3, cost=1)])]
    for target in (0.6, 0.9, 1.5, 2.5, 4.0):
        systems.append(rand_task_system(target, uniform(0.1, 0.5), uniform_int(5, 50), rng))

    for tasks in systems:
        for algorithm in (GEDFDeviAnderson, GEDFCompliantVector):
            previous = None
            for processors in range(1, 9):
                current = tardiness_gedf(tasks, processors, algorithm)
                if current.status is not BoundStatus.BOUNDED:
                    continue
                if previous is not None:
                    assert all(now <= before for now, before in zip(current.exact, previous.exact)), (
                        tasks,
                        processors,
                    )
                previous = current


def test_light_system_tardiness_is_constant_in_processors() -> None:
    tasks = TaskSystem([Task(period=18, cost=7), Task(period=3, cost=1)])
    for processors in range(1, 5):
        assert tardiness_gedf(tasks, processors, GEDFCompliantVector) == [7, 1]
        assert tardiness_gedf(tasks, processors, GEDFDeviAnderson) == [7, 1]


def test_compliant_vector_never_exceeds_devi_anderson() -> None:
    rng = random.Random(2024)
    for _ in range(20):
        tasks = rand_task_system(3.5, uniform(0.1, 0.9), uniform_int(10, 100), rng)
        for processors in (4, 6):
            da = tardiness_gedf(tasks, processors, GEDFDeviAnderson)
            cv = tardiness_gedf(tasks, processors, GEDFCompliantVector)
            assert da.status is BoundStatus.BOUNDED
            assert all(mine <= theirs for mine, theirs in zip(cv.exact, da.exact))


def test_compliant_vector_takes_devi_anderson_where_tighter() -> None:
    tasks = TaskSystem([Task(period=5, cost=4) for _ in range(4)])
    raw = CompliantVectorBound(clamp_to_devi_anderson=False).response_times(tasks, 4).tardiness(tasks)
    assert raw == [9, 9, 9, 9]

    da = tardiness_gedf(tasks, 4, GEDFDeviAnderson)
    assert da == [Fraction(22, 3)] * 4
    assert tardiness_gedf(tasks, 4, GEDFCompliantVector) == da.exact


def test_uniprocessor_compliant_vector_tardiness_is_bounded_by_cost() -> None:
    tasks = TaskSystem([Task(period=4, cost=1), Task(period=6, cost=2)])
    assert tardiness_gedf(tasks, 1, GEDFCompliantVector) == [1, 2]
    raw = CompliantVectorBound(clamp_to_devi_anderson=False).response_times(tasks, 1)
    assert raw.tardiness(tasks) == [1, 2]


@pytest.mark.parametrize(
    "tasks, processors",
    [
        (TaskSystem([Task(period=3, cost=2) for _ in range(3)]), 1),
        (TaskSystem([Task(period=2, cost=3), Task(period=10, cost=1)]), 4),
    ],
)
def test_infeasible_systems(tasks: TaskSystem, processors: int) -> None:
    for algorithm in (GEDFDeviAnderson, GEDFCompliantVector):
        result = bound(tasks, processors, algorithm)
        assert result.status is BoundStatus.INFEASIBLE
        assert not result
        assert len(result) == 0
        assert result.message


def test_iteration_cap_is_inconclusive() -> None:
    config = SolverConfig(max_iterations=1)
    for algorithm in (GEDFDeviAnderson, GEDFCompliantVector):
        result = bound(_example_tasks(), 2, algorithm, config)
        assert result.status is BoundStatus.INCONCLUSIVE
        assert result.iterations == 1
        assert list(result) == []


def test_devi_anderson_requires_implicit_deadlines() -> None:
    tasks = TaskSystem([Task(period=4, deadline=3, cost=1), Task(period=6, cost=2)])
    with pytest.raises(ValueError):
        bound(tasks, 2, GEDFDeviAnderson)

    result = bound(tasks, 2, GEDFCompliantVector)
    assert result.status is BoundStatus.BOUNDED
    assert len(result) == 2


def test_compliant_vector_handles_constrained_deadlines() -> None:
    tight = TaskSystem([Task(period=4, deadline=2, cost=2), Task(period=4, deadline=2, cost=2), Task(period=4, cost=3)])
    result = response_time_gedf(tight, 2, GEDFCompliantVector)
    assert result.status is BoundStatus.BOUNDED
    assert result.exact == (Fraction(61, 10), Fraction(61, 10), Fraction(43, 5))


def test_solver_is_deterministic() -> None:
    tasks = _example_tasks()
    assert bound(tasks, 3, GEDFCompliantVector) == bound(tasks, 3, GEDFCompliantVector)


def test_bound_algorithm_registry() -> None:
    assert isinstance(create_bound_algorithm("da"), DeviAndersonBound)
    assert isinstance(create_bound_algorithm(GEDFCompliantVector), CompliantVectorBound)
    assert bound(_example_tasks(), 2, "devi_anderson") == [6, 6, 11]
    with pytest.raises(ValueError):
        create_bound_algorithm("holistic")


def test_invalid_processor_count_raises() -> None:
    with pytest.raises(ValueError):
        bound(_example_tasks(), 0, GEDFCompliantVector)


def test_result_to_dict() -> None:
    payload = tardiness_gedf(_example_tasks(), 3, GEDFDeviAnderson).to_dict()
    assert payload["status"] == "bounded"
    assert payload["kind"] == "tardiness"
    assert payload["exact"] == ["8/3", "8/3", "14/3"]
