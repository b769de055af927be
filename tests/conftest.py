"""Shared test fixtures for algo-rewind."""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

TODAY = date(2024, 6, 15)


def make_problem(
    id="p1",
    name="Two Sum",
    url=None,
    tags=("array",),
    memo="",
    level="GOOD",
    created_at="2024-06-01",
    next_review_at="2024-06-08",
):
    """Build a Problem with sensible defaults."""
    from problems.models import Problem

    return Problem(
        id=id,
        name=name,
        url=url,
        tags=tags,
        memo=memo,
        level=level,
        created_at=created_at,
        next_review_at=next_review_at,
    )


@pytest.fixture
def problem_factory():
    return make_problem


@pytest.fixture
def fixed_clock():
    """Clock that always returns 2024-06-15."""
    return lambda: TODAY


@pytest.fixture
def sample_problems():
    """Four problems around the 2024-06-15 due boundary, in registration order."""
    return [
        make_problem(
            id="p1",
            name="Two Sum",
            url="https://leetcode.com/problems/two-sum",
            tags=("array", "hash-map"),
            level="GOOD",
            created_at="2024-06-01",
            next_review_at="2024-06-14",
        ),
        make_problem(
            id="p2",
            name="Climbing Stairs",
            tags=("DP",),
            level="HARD",
            created_at="2024-06-10",
            next_review_at="2024-06-15",
        ),
        make_problem(
            id="p3",
            name="Longest Increasing Subsequence",
            tags=("dp", "binary-search"),
            level="EASY",
            created_at="2024-05-20",
            next_review_at="2024-06-19",
        ),
        make_problem(
            id="p4",
            name="course schedule",
            tags=("graph",),
            memo="Topological sort. Watch for cycles.",
            level="AGAIN",
            created_at="2024-06-14",
            next_review_at="2024-06-16",
        ),
    ]


@pytest.fixture
def json_bridge(tmp_path):
    from problems.persistence import JsonFileBridge

    return JsonFileBridge(tmp_path / "problems.json")


@pytest.fixture
def controller(json_bridge, fixed_clock):
    """Session controller on the in-process scheduler and local views."""
    from problems.scheduling import BatchScheduler
    from problems.session import SessionController
    from problems.store import ProblemStore
    from problems.views import LocalViewProvider

    return SessionController(
        ProblemStore(),
        BatchScheduler(clock=fixed_clock),
        LocalViewProvider(),
        json_bridge,
        clock=fixed_clock,
    )
