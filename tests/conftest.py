"""Shared pytest fixtures for the publisher tests."""

from typing import Any, Dict, List

import pytest

from influxdb_publisher.models.build import BuildContext
from influxdb_publisher.models.target import Target
from influxdb_publisher.renderers.project_name import ProjectNameRenderer

TIMESTAMP = 1_700_000_000_000


class FakeClient:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.writes: List[Dict[str, Any]] = []

    def write_points(self, points, **kwargs):
        if self.fail:
            raise ConnectionError("connection refused")
        self.writes.append({"points": points, **kwargs})
        return True


class FakeConnections:
    """Stands in for InfluxConnectionFactory, one client per target url"""

    def __init__(self, failing_urls=()):
        self.failing_urls = set(failing_urls)
        self.clients: Dict[str, FakeClient] = {}
        self.connected: List[str] = []

    def connect(self, target: Target) -> FakeClient:
        self.connected.append(target.url)
        return self.clients.setdefault(target.url, FakeClient(fail=target.url in self.failing_urls))


@pytest.fixture
def build() -> BuildContext:
    return BuildContext(job_name="demo", build_number=42, result="SUCCESS", duration=1000)


@pytest.fixture
def renderer() -> ProjectNameRenderer:
    return ProjectNameRenderer()


@pytest.fixture
def connections() -> FakeConnections:
    return FakeConnections()


@pytest.fixture
def target() -> Target:
    return Target(description="local", url="http://localhost:8086", database="jenkins")
