import threading

import pytest

from lab import registry
from lab.exceptions import PersistenceError
from lab.session import LabSession


class RecordingStore:
    def __init__(self):
        self.records = []

    def save(self, record):
        self.records.append(record)
        return record


class FailingStore:
    def __init__(self, reason="database unavailable"):
        self.reason = reason
        self.calls = 0

    def save(self, record):
        self.calls += 1
        raise PersistenceError(self.reason)


class BrokenStore:
    """Fails with an unexpected error; ``ticked`` is set once it has been called twice."""

    def __init__(self):
        self.calls  = 0
        self.ticked = threading.Event()

    def save(self, record):
        self.calls += 1
        if self.calls >= 2:
            self.ticked.set()
        raise RuntimeError("dictionary changed size during iteration")


@pytest.fixture(autouse=True)
def lab_settings(settings):
    settings.LAB_AUTOSAVE_ENABLED = False
    settings.LAB_AMBIENT_TEMPERATURE = 20.0
    settings.LAB_POINTS = {
        "equipment_placed":   10,
        "chemical_added":     15,
        "reaction_detected":  50,
        "experiment_started": 10,
    }
    yield settings
    registry.clear()


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def session(store):
    return LabSession(store=store)


@pytest.fixture
def started(session):
    session.start()
    return session


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def broken_store():
    return BrokenStore()
