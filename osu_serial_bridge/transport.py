from __future__ import annotations

from typing import Any, Callable, Optional

import serial
from loguru import logger
from websockets.exceptions import WebSocketException
from websockets.sync.client import connect as ws_connect

from .channel import Channel, ChannelClosed, ChannelTimeout
from .config import DEFAULT_BAUD_RATE, DEFAULT_WRITE_TIMEOUT_S
from .errors import LinkConnectionError, TransportError
from .protocol import Command, encode_command
from .session import ResilientSession
from .telemetry import GameState, decode_game_state


class TelemetrySource(ResilientSession):
    """Reads telemetry from the websocket and feeds snapshots downstream.

    A connect failure, a dropped socket and an undecodable message all end
    the current connection; the loop then backs off and reconnects. The
    telemetry channel is closed when this loop's thread exits.
    """

    name = "websocket"

    def __init__(
        self,
        url: str,
        channel: Channel[GameState],
        connect: Optional[Callable[[str], Any]] = None,
        reconnect_delay_s: float = 5.0,
        poll_interval_s: float = 0.1,
    ) -> None:
        super().__init__(reconnect_delay_s=reconnect_delay_s, poll_interval_s=poll_interval_s)
        self.url = url
        self.channel = channel
        self._open = connect or ws_connect

    def _connect(self) -> Any:
        try:
            return self._open(self.url)
        except (OSError, WebSocketException) as exc:
            raise LinkConnectionError(f"Error connecting to websocket {self.url} ({exc})") from exc

    def _serve(self, socket: Any) -> bool:
        while not self.stopping:
            try:
                raw = socket.recv(timeout=self.poll_interval_s)
            except TimeoutError:
                continue
            except (OSError, WebSocketException) as exc:
                raise TransportError(f"Error reading message ({exc})") from exc

            state = decode_game_state(raw)
            self._count("messages")
            try:
                self.channel.send(state)
            except ChannelClosed:
                return False
        return True

    def _disconnect(self, socket: Any) -> None:
        try:
            socket.close()
        except (OSError, WebSocketException) as exc:
            logger.debug(f"websocket close failed: {exc}")

    def _on_exit(self) -> None:
        self.channel.close()


class DeviceSink(ResilientSession):
    """Writes encoded commands to the feedback device over serial.

    A failed write drops the port and the command with it; commands still
    queued are delivered once the port is reopened.
    """

    name = "serial"

    def __init__(
        self,
        port: str,
        channel: Channel[Command],
        baud: int = DEFAULT_BAUD_RATE,
        write_timeout_s: float = DEFAULT_WRITE_TIMEOUT_S,
        open_serial: Optional[Callable[..., Any]] = None,
        reconnect_delay_s: float = 5.0,
        poll_interval_s: float = 0.1,
    ) -> None:
        super().__init__(reconnect_delay_s=reconnect_delay_s, poll_interval_s=poll_interval_s)
        if baud <= 0:
            raise ValueError("baud must be > 0")
        self.port = port
        self.baud = int(baud)
        self.write_timeout_s = float(write_timeout_s)
        self.channel = channel
        self._open = open_serial or serial.Serial

    def _connect(self) -> Any:
        try:
            ser = self._open(
                port=self.port,
                baudrate=self.baud,
                timeout=self.write_timeout_s,
                write_timeout=self.write_timeout_s,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
            )
        except (serial.SerialException, OSError, ValueError) as exc:
            raise LinkConnectionError(f"Error opening port {self.port}: {exc}") from exc

        try:
            ser.reset_input_buffer()
            ser.reset_output_buffer()
        except (serial.SerialException, OSError) as exc:
            self._disconnect(ser)
            raise LinkConnectionError(f"Error resetting port {self.port}: {exc}") from exc
        return ser

    def _serve(self, ser: Any) -> bool:
        while not self.stopping:
            try:
                command = self.channel.recv(timeout=self.poll_interval_s)
            except ChannelTimeout:
                continue
            except ChannelClosed:
                return False

            logger.info(f"Serial thread received {command!r}")
            try:
                payload = encode_command(command)
            except (TypeError, ValueError) as exc:
                self._count("errors")
                logger.error(f"Dropping unencodable command {command!r}: {exc}")
                continue

            self._write(ser, payload)
            self._count("messages")
        return True

    def _write(self, ser: Any, payload: bytes) -> None:
        try:
            written = ser.write(payload)
        except (serial.SerialException, OSError) as exc:
            raise TransportError(f"Error writing to {self.port}: {exc}") from exc
        if written is not None and written != len(payload):
            raise TransportError(f"Short write to {self.port}: {written}/{len(payload)} bytes")

    def _disconnect(self, ser: Any) -> None:
        try:
            ser.close()
        except (serial.SerialException, OSError) as exc:
            logger.debug(f"serial close failed: {exc}")
