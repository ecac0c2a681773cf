import pytest

from execution.core import AgentRegistry
from memory.store import InMemoryExpressionStore


@pytest.fixture
def store():
    return InMemoryExpressionStore()


@pytest.fixture
def registry():
    return AgentRegistry()
