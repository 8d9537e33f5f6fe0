"""Shared fixtures: an in-memory content repository that records calls."""

from __future__ import annotations

from typing import Any

import pytest

from paguro.content.client import ContentQueryClient


class FakeRepository:
    """Stands in for the Sanity client.

    ``responder`` receives ``(groq, params, preview)`` and returns the
    query result, or raises to simulate a failure.
    """

    def __init__(self, responder=None) -> None:
        self.calls: list[tuple[str, dict[str, Any], bool]] = []
        self.responder = responder or (lambda groq, params, preview: [])

    def query(self, groq: str, params: dict[str, Any], *, preview: bool = False) -> Any:
        self.calls.append((groq, dict(params), preview))
        return self.responder(groq, params, preview)


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def content_client(repository: FakeRepository, clock: FakeClock) -> ContentQueryClient:
    return ContentQueryClient(repository, clock=clock)
