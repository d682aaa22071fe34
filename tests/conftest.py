"""Shared fixtures: fake collaborators and a started session on a virtual clock."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.dirname(__file__))

import pytest

from fakes import FakeAssistant, FakeCatalog, FakeIntake
from leadbot.scheduler import ManualScheduler
from leadbot.session import ChatSession, get_active_sessions


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def assistant():
    return FakeAssistant()


@pytest.fixture
def intake():
    return FakeIntake()


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def session(assistant, intake, catalog, scheduler):
    s = ChatSession(
        assistant=assistant,
        intake=intake,
        catalog=catalog,
        language="en",
        scheduler=scheduler,
        first_prompt_delay=1.0,
        next_prompt_delay=1.5,
    )
    s.start()
    return s


@pytest.fixture(autouse=True)
def _clear_registry():
    yield
    get_active_sessions().clear()
