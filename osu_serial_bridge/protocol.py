from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Union

TAG_ENTER_MODE = 0x00
TAG_KEY_STATE = 0x01
TAG_HEALTH_UPDATE = 0x02
TAG_HIT_OFFSET = 0x03
TAG_END = 0x04

MODE_GAMEPLAY = 2

# Total frame length per tag, tag byte included.
COMMAND_SIZES: Dict[int, int] = {
    TAG_ENTER_MODE: 2,
    TAG_KEY_STATE: 3,
    TAG_HEALTH_UPDATE: 2,
    TAG_HIT_OFFSET: 2,
    TAG_END: 1,
}


@dataclass(frozen=True, slots=True)
class EnterMode:
    mode: int


@dataclass(frozen=True, slots=True)
class KeyState:
    k1: bool
    k2: bool


@dataclass(frozen=True, slots=True)
class HealthUpdate:
    hp: int


@dataclass(frozen=True, slots=True)
class HitOffset:
    offset: int


@dataclass(frozen=True, slots=True)
class End:
    pass


Command = Union[EnterMode, KeyState, HealthUpdate, HitOffset, End]


def _u8(value: int, name: str) -> int:
    value = int(value)
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} out of uint8 range: {value}")
    return value


def _i8(value: int, name: str) -> int:
    value = int(value)
    if not -128 <= value <= 127:
        raise ValueError(f"{name} out of int8 range: {value}")
    return value & 0xFF


def encode_command(command: Command) -> bytes:
    if isinstance(command, EnterMode):
        return bytes((TAG_ENTER_MODE, _u8(command.mode, "mode")))
    if isinstance(command, KeyState):
        return bytes((TAG_KEY_STATE, int(bool(command.k1)), int(bool(command.k2))))
    if isinstance(command, HealthUpdate):
        return bytes((TAG_HEALTH_UPDATE, _u8(command.hp, "hp")))
    if isinstance(command, HitOffset):
        return bytes((TAG_HIT_OFFSET, _i8(command.offset, "offset")))
    if isinstance(command, End):
        return bytes((TAG_END,))
    raise TypeError(f"Unsupported command: {command!r}")


def decode_command(frame: bytes) -> Command:
    """Decode one complete frame the way the device firmware reads it."""
    if not frame:
        raise ValueError("Empty command frame")

    tag = frame[0]
    expected_size = COMMAND_SIZES.get(tag)
    if expected_size is None:
        raise ValueError(f"Unknown command tag: 0x{tag:02X}")
    if len(frame) != expected_size:
        raise ValueError(f"Invalid frame length for tag 0x{tag:02X}: {len(frame)}")

    if tag == TAG_ENTER_MODE:
        return EnterMode(mode=frame[1])
    if tag == TAG_KEY_STATE:
        return KeyState(k1=frame[1] != 0, k2=frame[2] != 0)
    if tag == TAG_HEALTH_UPDATE:
        return HealthUpdate(hp=frame[1])
    if tag == TAG_HIT_OFFSET:
        offset = frame[1]
        return HitOffset(offset=offset - 0x100 if offset & 0x80 else offset)
    return End()


class CommandFrameParser:
    """Streaming parser that splits a device-bound byte stream into commands.

    The payload length is implied by the tag byte. Bytes that are not a
    known tag are skipped and counted.
    """

    __slots__ = ("_buffer", "unknown_tag_bytes")

    def __init__(self) -> None:
        self._buffer = bytearray()
        self.unknown_tag_bytes = 0

    def reset(self) -> None:
        self._buffer.clear()

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def feed(self, data: bytes) -> List[Command]:
        commands: List[Command] = []
        if not data:
            return commands

        self._buffer.extend(data)

        while self._buffer:
            size = COMMAND_SIZES.get(self._buffer[0])
            if size is None:
                self.unknown_tag_bytes += 1
                del self._buffer[0]
                continue

            if len(self._buffer) < size:
                break

            commands.append(decode_command(bytes(self._buffer[:size])))
            del self._buffer[:size]

        return commands
