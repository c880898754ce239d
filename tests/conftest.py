from __future__ import annotations

from typing import Iterator

import pytest

from larasearch.Connection import Connection
from larasearch.ConnectionManager import set_connection_manager
from larasearch.Query.Builder import Builder

from tests.fakes import FakeElasticsearch, RecordingReporter


@pytest.fixture
def client() -> FakeElasticsearch:
    """Create a fake search client."""
    return FakeElasticsearch(hits=[{'_id': '1', '_source': {'name': 'first'}}], count=3)


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def connection(client: FakeElasticsearch, reporter: RecordingReporter) -> Connection:
    """Create a connection on the fake client with a default index."""
    return Connection(client, index='documents', reporter=reporter)


@pytest.fixture
def builder(connection: Connection) -> Builder:
    """Create a fresh builder on the test connection."""
    return connection.new_query()


@pytest.fixture(autouse=True)
def reset_connection_manager() -> Iterator[None]:
    """Make sure no test leaks a global connection manager."""
    yield
    set_connection_manager(None)
