"""Shared fixtures for portal tests."""

from datetime import datetime, timedelta

import pytest

from magnolia.config import FspSettings
from magnolia.portal import Portal
from magnolia.storage import MemoryStore


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 0, **kwargs):
        self.now += timedelta(seconds=seconds, **kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 19, 9, 0, 0))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def fsp_settings():
    return FspSettings(base_url="https://fsp.test", operator_id="op-1", api_key="secret")


@pytest.fixture
def portal(store, clock, fsp_settings):
    return Portal(store, fsp_settings=fsp_settings, clock=clock)


def make_exam_data(course_id=None, passing_score=70, attempts_allowed=None, time_limit=None):
    """Single multiple-choice question worth 10 points, answer B."""
    return {
        "title": "Indoc Knowledge Test",
        "course_id": course_id,
        "passing_score": passing_score,
        "attempts_allowed": attempts_allowed,
        "time_limit": time_limit,
        "questions": [
            {
                "id": "q1",
                "question": "Which checklist comes first?",
                "type": "multiple-choice",
                "options": ["A", "B", "C"],
                "correct_answer": "B",
                "points": 10,
            }
        ],
    }


@pytest.fixture
def exam_data():
    return make_exam_data
