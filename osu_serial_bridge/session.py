from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger

from .errors import BridgeError, LinkConnectionError


@dataclass(slots=True)
class SessionStats:
    connects: int = 0
    connect_errors: int = 0
    disconnects: int = 0
    messages: int = 0
    errors: int = 0


class ResilientSession:
    """Connect-or-backoff loop shared by the telemetry and device links.

    Subclasses provide ``_connect`` (open a handle or raise
    ``LinkConnectionError``), ``_serve`` (use the handle until it fails with
    a ``BridgeError``, or return to end the loop) and ``_disconnect``.
    Every failure is logged, the handle is dropped and the loop waits
    ``reconnect_delay_s`` before trying again. It never gives up on its own.
    """

    name = "session"

    def __init__(self, reconnect_delay_s: float = 5.0, poll_interval_s: float = 0.1) -> None:
        if reconnect_delay_s < 0:
            raise ValueError("reconnect_delay_s must be >= 0")
        self.reconnect_delay_s = float(reconnect_delay_s)
        self.poll_interval_s = float(poll_interval_s)

        self._stats = SessionStats()
        self._stats_lock = threading.Lock()

        self._connected = threading.Event()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def connected(self) -> bool:
        return self._connected.is_set()

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, name=self.name, daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 1.5) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def wait_connected(self, timeout: Optional[float] = None) -> bool:
        return self._connected.wait(timeout)

    def get_stats(self) -> SessionStats:
        with self._stats_lock:
            return SessionStats(
                connects=self._stats.connects,
                connect_errors=self._stats.connect_errors,
                disconnects=self._stats.disconnects,
                messages=self._stats.messages,
                errors=self._stats.errors,
            )

    def _count(self, field: str) -> None:
        with self._stats_lock:
            setattr(self._stats, field, getattr(self._stats, field) + 1)

    def run(self) -> None:
        try:
            while not self._stop_event.is_set():
                if not self._run_once():
                    break
        except Exception:
            logger.exception(f"{self.name} loop crashed")
            raise
        finally:
            self._connected.clear()
            self._on_exit()

    def _run_once(self) -> bool:
        """One connect/serve cycle. Returns False when the loop should end."""
        try:
            handle = self._connect()
        except LinkConnectionError as exc:
            self._count("connect_errors")
            logger.warning(f"{self.name}: {exc}")
            logger.warning(f"{self.name}: retrying in {self.reconnect_delay_s:g} seconds...")
            self._stop_event.wait(self.reconnect_delay_s)
            return True

        self._count("connects")
        self._connected.set()
        logger.info(f"{self.name} connected.")

        try:
            keep_going = self._serve(handle)
        except BridgeError as exc:
            self._count("errors")
            logger.error(f"{self.name}: {exc}")
            keep_going = True
        finally:
            self._connected.clear()
            self._count("disconnects")
            self._disconnect(handle)

        if not keep_going or self._stop_event.is_set():
            return False

        logger.warning(f"{self.name}: retrying in {self.reconnect_delay_s:g} seconds...")
        self._stop_event.wait(self.reconnect_delay_s)
        return True

    def _connect(self) -> Any:
        raise NotImplementedError

    def _serve(self, handle: Any) -> bool:
        raise NotImplementedError

    def _disconnect(self, handle: Any) -> None:
        pass

    def _on_exit(self) -> None:
        pass
