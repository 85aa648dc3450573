from __future__ import annotations

import json
from typing import Any

import pytest

from slbuilder.infra.templates import TemplateRenderer
from slbuilder.providers.softlayer import SoftLayerClient


def as_body(payload: Any) -> bytes:
    return json.dumps(payload).encode()


class FakeTransport:
    """In-memory Transport that replays canned responses per (method, path).

    Each route holds a list of responses consumed in order; the last one
    repeats. A response that is an exception is raised instead of returned.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, bytes | None]] = []
        self._routes: dict[tuple[str, str], list[bytes | Exception]] = {}

    def route(self, method: str, path: str, *responses: bytes | Exception) -> None:
        self._routes[(method, path)] = list(responses)

    def paths(self) -> list[str]:
        return [path for _, path, _ in self.calls]

    async def send(self, path: str, method: str, body: bytes | None = None) -> bytes:
        self.calls.append((method, path, body))
        responses = self._routes.get((method, path))
        if not responses:
            raise AssertionError(f"Unexpected request {method} {path}")
        response = responses.pop(0) if len(responses) > 1 else responses[0]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(transport: FakeTransport) -> SoftLayerClient:
    return SoftLayerClient(transport, TemplateRenderer(), poll_interval=0.01)
