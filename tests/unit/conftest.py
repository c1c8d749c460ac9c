"""Fixtures wiring the in-memory stores from `fakes`."""

import pytest
from fakes import FakeSession, FakeStore, RecordingReporter


@pytest.fixture
def store() -> FakeStore:
    s = FakeStore()
    s.add_platform_account()
    return s


@pytest.fixture
def session(store: FakeStore) -> FakeSession:
    return FakeSession(store)


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
