from __future__ import annotations


class BridgeError(Exception):
    """Base class for failures recovered by the reconnect loops."""


class LinkConnectionError(BridgeError):
    """The websocket or serial device could not be opened."""


class TransportError(BridgeError):
    """A read or write failed on an established connection."""


class DecodeError(BridgeError, ValueError):
    """A telemetry document was malformed or missing required fields."""
