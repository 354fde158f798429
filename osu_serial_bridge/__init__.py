from .bridge import Bridge
from .channel import Channel, ChannelClosed
from .config import BridgeConfig
from .errors import BridgeError, DecodeError, LinkConnectionError, TransportError
from .protocol import (
    Command,
    CommandFrameParser,
    End,
    EnterMode,
    HealthUpdate,
    HitOffset,
    KeyState,
    decode_command,
    encode_command,
)
from .telemetry import GameState, Gameplay, Unknown, decode_game_state
from .translator import StateTranslator
from .transport import DeviceSink, TelemetrySource

__all__ = [
    "Bridge",
    "BridgeConfig",
    "BridgeError",
    "Channel",
    "ChannelClosed",
    "Command",
    "CommandFrameParser",
    "DecodeError",
    "DeviceSink",
    "End",
    "EnterMode",
    "GameState",
    "Gameplay",
    "HealthUpdate",
    "HitOffset",
    "KeyState",
    "LinkConnectionError",
    "StateTranslator",
    "TelemetrySource",
    "TransportError",
    "Unknown",
    "decode_command",
    "decode_game_state",
    "encode_command",
]
