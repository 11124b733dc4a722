import pytest

from fakes import FakeGateway


@pytest.fixture()
def fake_gateway():
    return FakeGateway()
