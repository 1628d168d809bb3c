"""
Shared fixtures: a deterministic embedding provider that never loads a model.
"""

from __future__ import annotations

import math

import pytest


class StubProvider:
    """
    Returns fixed 2-d unit vectors whose cosine similarity equals `similarity`.

    Counts embed() calls so tests can assert the fast path skips the provider.
    """

    def __init__(self, similarity: float = 0.0, vectors=None, error: Exception | None = None):
        self.similarity = similarity
        self.vectors = vectors
        self.error = error
        self.calls: list[list[str]] = []

    async def embed(self, texts):
        self.calls.append(list(texts))
        if self.error is not None:
            raise self.error
        if self.vectors is not None:
            return self.vectors
        angle = math.acos(max(-1.0, min(1.0, self.similarity)))
        return [[1.0, 0.0], [math.cos(angle), math.sin(angle)]]

    def cosine_similarity(self, a, b):
        return self.similarity if self.vectors is None else sum(x * y for x, y in zip(a, b))


@pytest.fixture
def stub_provider():
    return StubProvider()


@pytest.fixture
def make_provider():
    return StubProvider
