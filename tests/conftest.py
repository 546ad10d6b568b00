import pytest

from agentloop.runtime import Wire
from agentloop.tools import tool


@pytest.fixture
def addition():
    @tool(name="Addition", description="Add two integers")
    def add(left: int, right: int) -> int:
        return left + right

    return add


@pytest.fixture
def wire():
    """Unbounded wire so tests never lose events."""
    return Wire(maxsize=0)
