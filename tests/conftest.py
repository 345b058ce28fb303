import pytest

from dalite_scb.client import ScbClient, ScbClientConfig, ScbClientTransport


class FakeTransport(ScbClientTransport):
    """Records sent bytes instead of writing to a socket."""

    def __init__(self):
        self.sent = []
        self.connected = True

    @property
    def is_connected(self):
        return self.connected

    async def send(self, data):
        self.sent.append(data)

    async def shutdown(self, exc=None):
        if self.connected:
            self.connected = False
            self.deliver_close(exc)

    async def wait(self):
        pass

    def receive(self, data):
        self.deliver_data(data)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return ScbClient(transport, config=ScbClientConfig(host="192.168.1.50"))
