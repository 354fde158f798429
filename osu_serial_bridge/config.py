from __future__ import annotations

from dataclasses import dataclass

DEFAULT_WEBSOCKET_URL = "ws://localhost:24050/ws"
DEFAULT_SERIAL_PORT = "/dev/ttyACM0"
DEFAULT_BAUD_RATE = 115200
DEFAULT_WRITE_TIMEOUT_S = 0.05
DEFAULT_RECONNECT_DELAY_S = 5.0
DEFAULT_POLL_INTERVAL_S = 0.1


@dataclass(frozen=True, slots=True)
class BridgeConfig:
    """Connection targets and timings for one bridge instance.

    Attributes
    ----------
    websocket_url : str
        Telemetry feed served by the game memory reader.
    serial_port : str
        Device path of the feedback microcontroller.
    baud_rate : int
        Serial baud rate (default: 115200).
    write_timeout_s : float
        Per-operation serial timeout (default: 0.05).
    reconnect_delay_s : float
        Fixed backoff before retrying a dropped connection (default: 5.0).
    poll_interval_s : float
        How often blocked loops wake up to check for a stop request
        (default: 0.1).
    """

    websocket_url: str = DEFAULT_WEBSOCKET_URL
    serial_port: str = DEFAULT_SERIAL_PORT
    baud_rate: int = DEFAULT_BAUD_RATE
    write_timeout_s: float = DEFAULT_WRITE_TIMEOUT_S
    reconnect_delay_s: float = DEFAULT_RECONNECT_DELAY_S
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S

    def __post_init__(self) -> None:
        if self.baud_rate <= 0:
            raise ValueError("baud_rate must be > 0")
        if self.write_timeout_s <= 0:
            raise ValueError("write_timeout_s must be > 0")
        if self.reconnect_delay_s < 0:
            raise ValueError("reconnect_delay_s must be >= 0")
        if self.poll_interval_s <= 0:
            raise ValueError("poll_interval_s must be > 0")
