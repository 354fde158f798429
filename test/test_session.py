import time

import pytest

from osu_serial_bridge.errors import LinkConnectionError, TransportError
from osu_serial_bridge.session import ResilientSession


class ScriptedSession(ResilientSession):
    name = "scripted"

    def __init__(self, outcomes, **kwargs) -> None:
        super().__init__(**kwargs)
        self.outcomes = list(outcomes)
        self.opened = []
        self.closed = []
        self.exited = False

    def _connect(self):
        if not self.outcomes:
            raise LinkConnectionError("no more handles")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, LinkConnectionError):
            raise outcome
        self.opened.append(outcome)
        return outcome

    def _serve(self, handle):
        if isinstance(handle, BaseException):
            raise handle
        return handle

    def _disconnect(self, handle) -> None:
        self.closed.append(handle)

    def _on_exit(self) -> None:
        self.exited = True


def test_reconnects_after_errors_until_serve_finishes() -> None:
    session = ScriptedSession(
        [LinkConnectionError("refused"), TransportError("reset"), False],
        reconnect_delay_s=0.0,
    )
    session.run()

    stats = session.get_stats()
    assert stats.connect_errors == 1
    assert stats.connects == 2
    assert stats.errors == 1
    assert stats.disconnects == 2
    assert len(session.closed) == 2
    assert session.exited is True
    assert session.connected is False


def test_stop_interrupts_backoff() -> None:
    session = ScriptedSession([], reconnect_delay_s=30.0)
    session.start()
    time.sleep(0.05)

    started = time.monotonic()
    session.stop(timeout=2.0)

    assert time.monotonic() - started < 1.0
    assert session.running is False
    assert session.exited is True
    assert session.get_stats().connect_errors >= 1


def test_unexpected_error_ends_loop() -> None:
    session = ScriptedSession([RuntimeError("boom")], reconnect_delay_s=0.0)

    with pytest.raises(RuntimeError, match="boom"):
        session.run()

    assert session.closed and isinstance(session.closed[0], RuntimeError)
    assert session.exited is True
