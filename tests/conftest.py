import pytest

from tests.flow_helpers import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
