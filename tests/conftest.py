"""Shared pytest fixtures for the test suite.

Import any of these in a test file by simply declaring the fixture name as a
parameter; pytest discovers them automatically from this conftest.py.

Fixture overview
----------------
abc_projects   : three projects A, B, C ordered 1..3
repository     : in-memory fake of the remote project API, seeded with A, B, C
store          : OrderedCollectionStore over ``repository``, already showing A, B, C
listener       : records every progress state it is shown
coordinator    : ReorderCoordinator over ``store`` with a recording progress listener
"""

from __future__ import annotations

import pytest

from portfolio_admin.core.reorder import BatchProgress, ReorderCoordinator
from portfolio_admin.core.store import OrderedCollectionStore
from portfolio_admin.schemas import Project
from tests.fakes import FakeProjectRepository, RecordingListener, make_project


@pytest.fixture
def abc_projects() -> list[Project]:
    return [make_project("a", 1), make_project("b", 2), make_project("c", 3)]


@pytest.fixture
def repository(abc_projects: list[Project]) -> FakeProjectRepository:
    return FakeProjectRepository(abc_projects)


@pytest.fixture
def store(repository: FakeProjectRepository, abc_projects: list[Project]) -> OrderedCollectionStore:
    s = OrderedCollectionStore(repository)
    s.apply_local(abc_projects)
    return s


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def coordinator(store: OrderedCollectionStore, listener: RecordingListener) -> ReorderCoordinator:
    return ReorderCoordinator(store, progress=BatchProgress(listener))
