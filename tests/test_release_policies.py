from __future__ import annotations

from fractions import Fraction

import pytest

from rtsched.analysis import build_audit_report
from rtsched.core import simulate_global
from rtsched.model import JobTemplate, Task, TaskSystem
from rtsched.schedulers import (
    FunctionReleasePolicy,
    GEDFPolicy,
    GFPPolicy,
    SporadicGEDFPolicy,
    SporadicGFPPolicy,
    as_release_policy,
    available_release_policies,
    create_release_policy,
)


def test_periodic_policies_assign_priorities() -> None:
    task = Task(period=10, deadline=7, cost=2)
    first = GEDFPolicy().release(task, 3, None)
    assert first == JobTemplate(release=Fraction(0), deadline=Fraction(7), cost=Fraction(2), priority=Fraction(7))

    gfp = GFPPolicy().release(task, 3, None)
    assert gfp.priority == 3
    assert gfp.deadline == 7


def test_periodic_policy_spaces_releases_by_period() -> None:
    tasks = TaskSystem([Task(period=4, cost=1)])
    schedule = simulate_global(GEDFPolicy(), tasks, 1, 20)
    assert [job.release for job in schedule[0]] == [0, 4, 8, 12, 16]
    assert [job.deadline for job in schedule[0]] == [4, 8, 12, 16, 20]


def test_registry_names_and_aliases() -> None:
    names = available_release_policies()
    assert {"gedf", "gfp", "sporadic_gedf", "sporadic_gfp"} <= set(names)
    assert isinstance(create_release_policy("EDF"), GEDFPolicy)
    assert isinstance(create_release_policy("fixed_priority"), GFPPolicy)
    assert isinstance(create_release_policy("sporadic_gfp", {"max_delay": 1}), SporadicGFPPolicy)
    with pytest.raises(ValueError, match="unknown scheduler"):
        create_release_policy("pfair")


def test_function_policy_adapter() -> None:
    def release(task, task_index, previous):
        return JobTemplate(release=Fraction(0), deadline=Fraction(1), cost=Fraction(1), priority=Fraction(0))

    policy = as_release_policy(release)
    assert isinstance(policy, FunctionReleasePolicy)
    assert policy.name == "release"
    assert as_release_policy(policy) is policy
    with pytest.raises(TypeError):
        as_release_policy(42)  # type: ignore[arg-type]


@pytest.mark.parametrize("params", [{"max_delay": -1}, {"max_delay": "soon"}, {"seed": 1.5}])
def test_sporadic_policy_rejects_bad_params(params: dict) -> None:
    with pytest.raises(ValueError):
        SporadicGEDFPolicy(params)


def test_sporadic_releases_are_delayed_and_reproducible() -> None:
    tasks = TaskSystem([Task(period=5, cost=1), Task(period=7, cost=2)])
    policy = SporadicGEDFPolicy({"max_delay": 3, "seed": 5})

    first = simulate_global(policy, tasks, 2, 100)
    second = simulate_global(policy, tasks, 2, 100)
    assert first.jobs() == second.jobs()

    releases = [job.release for job in first[0]]
    assert any(release != index * 5 for index, release in enumerate(releases))
    assert all(later - earlier >= 5 for earlier, later in zip(releases, releases[1:]))
    assert build_audit_report(first)["status"] == "pass"


def test_sporadic_without_delay_matches_periodic() -> None:
    tasks = TaskSystem([Task(period=5, cost=2), Task(period=3, cost=1)])
    sporadic = simulate_global(SporadicGEDFPolicy({"max_delay": 0}), tasks, 1, 30)
    periodic = simulate_global(GEDFPolicy(), tasks, 1, 30)
    assert sporadic.jobs() == periodic.jobs()
