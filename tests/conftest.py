"""Shared fixtures: a fake session gate and an in-process chart server."""
import httpx
import pytest

from chartdeck.api.client import ChartsClient
from chartdeck.config import Settings
from chartdeck.dashboard.controller import DashboardController
from helpers import API_URL, FakeSession, StubServer, make_raw_chart


@pytest.fixture
def raw_chart():
    return make_raw_chart


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def server():
    stub = StubServer()
    stub.on("GET", "/api/charts", json={"data": [], "pageCount": 0})
    return stub


@pytest.fixture
def settings():
    return Settings(api_url=API_URL, asset_base_url="https://cdn.charts.test")


@pytest.fixture
def client(settings, session, server):
    return ChartsClient(settings, session, transport=httpx.MockTransport(server))


@pytest.fixture
def controller(session, client):
    return DashboardController(session, client)
