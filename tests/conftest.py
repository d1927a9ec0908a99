from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from webtask_analyzer import Analyzer, ModuleCatalog

CLUSTER_URL = "https://cluster.test"
CONTAINER_NAME = "my container"
TOKEN = "secret-token"

CATALOG_PAYLOAD: dict[str, Any] = {
    "nativeModuleNames": ["fs", "http", "path"],
    "verquireModules": {
        "request": ["2.56.0", "2.81.0"],
        "lodash": ["4.17.4"],
        "@org/pkg": ["1.0.0"],
        "withdrawn": [],
    },
}


class ClusterStub:
    """Stands in for the webtask cluster's /api/run endpoint."""

    def __init__(self, payload: Any = None, status_code: int = 200):
        self.payload = CATALOG_PAYLOAD if payload is None else payload
        self.status_code = status_code
        self.error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.requests: list[httpx.Request] = []

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if isinstance(self.payload, (bytes, str)):
            return httpx.Response(self.status_code, content=self.payload)
        return httpx.Response(self.status_code, content=json.dumps(self.payload))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def catalog():
    """Catalog matching CATALOG_PAYLOAD."""
    return ModuleCatalog.from_json(CATALOG_PAYLOAD)


@pytest.fixture
def cluster():
    return ClusterStub()


@pytest.fixture
def analyzer(cluster):
    """Analyzer talking to the stub cluster."""
    return Analyzer(
        cluster_url=CLUSTER_URL,
        container_name=CONTAINER_NAME,
        token=TOKEN,
        transport=cluster.transport,
    )


@pytest.fixture
def make_analyzer():
    """Factory for analyzers sharing one stub cluster."""

    def factory(cluster: ClusterStub) -> Analyzer:
        return Analyzer(
            cluster_url=CLUSTER_URL,
            container_name=CONTAINER_NAME,
            token=TOKEN,
            transport=cluster.transport,
        )

    return factory
