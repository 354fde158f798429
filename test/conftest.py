import threading
import time

import pytest
import serial


class FakeWebSocket:
    """Replays scripted frames; an Exception instance in the script is raised."""

    def __init__(self, frames) -> None:
        self._frames = list(frames)
        self.closed = False

    def recv(self, timeout=None):
        if self._frames:
            item = self._frames.pop(0)
            if isinstance(item, BaseException):
                raise item
            return item
        time.sleep(timeout or 0.01)
        raise TimeoutError()

    def close(self) -> None:
        self.closed = True


class FakeConnector:
    """Stands in for ``websockets.sync.client.connect``."""

    def __init__(self, *sockets) -> None:
        self._sockets = list(sockets)
        self.urls = []

    def __call__(self, url):
        self.urls.append(url)
        if not self._sockets:
            raise OSError("Connection refused")
        item = self._sockets.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


class FakeSerial:
    def __init__(self, fail_on_write: int = 0, fail_reset: bool = False) -> None:
        self.fail_on_write = fail_on_write
        self.fail_reset = fail_reset
        self.written = []
        self.attempts = 0
        self.closed = False
        self.kwargs = {}
        self._lock = threading.Lock()

    def reset_input_buffer(self) -> None:
        if self.fail_reset:
            raise serial.SerialException("reset failed")

    def reset_output_buffer(self) -> None:
        pass

    def write(self, payload: bytes) -> int:
        with self._lock:
            self.attempts += 1
            if self.attempts == self.fail_on_write:
                raise serial.SerialTimeoutException("Write timeout")
            self.written.append(bytes(payload))
        return len(payload)

    def close(self) -> None:
        self.closed = True


class FakeSerialFactory:
    """Stands in for ``serial.Serial``; runs out of ports by failing to open."""

    def __init__(self, *ports) -> None:
        self._ports = list(ports)
        self.calls = 0

    def __call__(self, **kwargs):
        self.calls += 1
        if not self._ports:
            raise serial.SerialException(f"could not open port {kwargs.get('port')}")
        item = self._ports.pop(0)
        if isinstance(item, BaseException):
            raise item
        item.kwargs = kwargs
        return item


def _wait_until(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return bool(predicate())


@pytest.fixture
def wait_until():
    return _wait_until


@pytest.fixture
def fake_ws():
    return FakeWebSocket


@pytest.fixture
def fake_connector():
    return FakeConnector


@pytest.fixture
def fake_serial():
    return FakeSerial


@pytest.fixture
def fake_serial_factory():
    return FakeSerialFactory
