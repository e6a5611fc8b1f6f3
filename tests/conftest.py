"""Shared pytest fixtures for Make Homer Proud tests."""

import os
import random
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from homerproud.coaches import CoachRoster  # noqa: E402
from homerproud.tasks import InlineTaskRunner  # noqa: E402
from homerproud.timer.engine import TimerEngine  # noqa: E402

from helpers import FIXED_NOW, FakeApi  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def engine(qapp, fake_api):
    """Fresh TimerEngine with a coach, synchronous side effects and a fixed clock."""
    eng = TimerEngine(
        fake_api, InlineTaskRunner(),
        rng=random.Random(7), clock=lambda: FIXED_NOW,
    )
    eng.set_coach(fake_api.coaches[0])
    return eng


@pytest.fixture
def roster(qapp, fake_api):
    return CoachRoster(fake_api, InlineTaskRunner(), rng=random.Random(7))
