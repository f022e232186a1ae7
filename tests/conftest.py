"""
Pytest configuration for the lazily tests.

Puts the project root on the Python path so the tests run against the working tree without
an install, and provides the shared sources used across test modules.
"""

import sys
from pathlib import Path

# Add the parent directory to the Python path
parent_dir = Path(__file__).parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

import pytest

from lazily import Seq


class CountingSource:
    """Restartable async source that records how many values have been pulled from it."""

    def __init__(self, values):
        self.values = list(values)
        self.pulled = 0
        self.opened = 0
        self.closed = 0

    def __aiter__(self):
        return self._generate()

    async def _generate(self):
        self.opened += 1
        try:
            for value in self.values:
                self.pulled += 1
                yield value
        finally:
            self.closed += 1


@pytest.fixture
def one_to_five():
    """A Seq over a single-use async generator yielding 1..5."""

    async def generate():
        for value in (1, 2, 3, 4, 5):
            yield value

    return Seq.of(generate())


@pytest.fixture
def counting():
    """Factory for CountingSource instances."""
    return CountingSource
