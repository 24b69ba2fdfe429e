import pytest

from havalo.client import HavaloClient

from fake_havalo import API_URL, FakeHavalo


@pytest.fixture
def server():
    return FakeHavalo()


@pytest.fixture
def keypair(server):
    return server.register()


@pytest.fixture
def client(server, keypair):
    key, secret = keypair
    with HavaloClient(API_URL, key=key, secret=secret, transport=server.transport()) as client:
        yield client
