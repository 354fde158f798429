from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")


class ChannelClosed(Exception):
    """Raised by ``recv`` once a closed channel has been drained."""


class ChannelTimeout(Exception):
    """Raised by ``recv`` when nothing arrived within the timeout."""


class Channel(Generic[T]):
    """Unbounded FIFO between one producer thread and one consumer thread.

    ``send`` never blocks. ``recv`` blocks until an item is available or the
    channel is closed; items sent before ``close`` are still delivered.
    """

    def __init__(self) -> None:
        self._items: Deque[T] = deque()
        self._cond = threading.Condition()
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def send(self, item: T) -> None:
        with self._cond:
            if self._closed:
                raise ChannelClosed("send on closed channel")
            self._items.append(item)
            self._cond.notify()

    def recv(self, timeout: Optional[float] = None) -> T:
        with self._cond:
            if not self._cond.wait_for(lambda: self._items or self._closed, timeout):
                raise ChannelTimeout()
            if self._items:
                return self._items.popleft()
            raise ChannelClosed("channel closed")

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.recv()
            except ChannelClosed:
                return
