"""Shared fixtures: a fake Linear API behind respx and a client bound to it."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import respx
import structlog

from linear_provider.client import LinearClient
from linear_provider.provider.provider import LinearProvider
from linear_provider.provider.resources import WorkflowStateResource
from linear_provider.provider.server import ResourceServer
from linear_provider.provider.state import StateStore
from tests.fakes import API_URL, FakeLinearAPI


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    yield
    structlog.reset_defaults()


@pytest.fixture
def linear_api() -> Iterator[FakeLinearAPI]:
    fake = FakeLinearAPI()
    with respx.mock(assert_all_called=False) as router:
        router.post(API_URL).mock(side_effect=fake)
        yield fake


@pytest.fixture
def client(linear_api: FakeLinearAPI) -> Iterator[LinearClient]:
    with LinearClient(api_key="lin_api_test") as c:
        yield c


@pytest.fixture
def resource(client: LinearClient) -> WorkflowStateResource:
    res = WorkflowStateResource()
    res.configure(client)
    return res


@pytest.fixture
def store() -> StateStore:
    return StateStore()


@pytest.fixture
def server(client: LinearClient, store: StateStore) -> ResourceServer:
    provider = LinearProvider()
    provider.configure_client(client)
    return ResourceServer(provider, store)
