from __future__ import annotations

from typing import Any, Callable, Optional

from loguru import logger

from .channel import Channel, ChannelClosed
from .config import BridgeConfig
from .protocol import Command
from .telemetry import GameState
from .translator import StateTranslator
from .transport import DeviceSink, TelemetrySource


class Bridge:
    """Wires the telemetry loop, the translator and the device loop together.

    ``run`` blocks the calling thread and returns when the telemetry channel
    closes. There is no shutdown signal: the two link threads are daemons
    and keep reconnecting until the process exits or ``stop`` is called.
    """

    def __init__(
        self,
        config: Optional[BridgeConfig] = None,
        ws_connect: Optional[Callable[[str], Any]] = None,
        open_serial: Optional[Callable[..., Any]] = None,
    ) -> None:
        self.config = config or BridgeConfig()
        self.telemetry: Channel[GameState] = Channel()
        self.commands: Channel[Command] = Channel()
        self.translator = StateTranslator()

        self.source = TelemetrySource(
            url=self.config.websocket_url,
            channel=self.telemetry,
            connect=ws_connect,
            reconnect_delay_s=self.config.reconnect_delay_s,
            poll_interval_s=self.config.poll_interval_s,
        )
        self.sink = DeviceSink(
            port=self.config.serial_port,
            channel=self.commands,
            baud=self.config.baud_rate,
            write_timeout_s=self.config.write_timeout_s,
            open_serial=open_serial,
            reconnect_delay_s=self.config.reconnect_delay_s,
            poll_interval_s=self.config.poll_interval_s,
        )

    def run(self) -> int:
        """Translate snapshots until the telemetry channel closes.

        Returns the number of commands handed to the device loop.
        """
        self.source.start()
        self.sink.start()
        logger.info(
            f"bridge running (ws={self.config.websocket_url}, "
            f"serial={self.config.serial_port}@{self.config.baud_rate})"
        )

        dispatched = 0
        for state in self.telemetry:
            try:
                for command in self.translator.translate(state):
                    self.commands.send(command)
                    dispatched += 1
            except ChannelClosed:
                break

        logger.info(f"bridge stopped after {dispatched} commands")
        return dispatched

    def stop(self) -> None:
        self.source.stop()
        self.commands.close()
        self.sink.stop()
