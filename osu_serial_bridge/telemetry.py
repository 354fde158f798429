from __future__ import annotations

import json
import math
import struct
from dataclasses import dataclass
from typing import Any, Mapping, Tuple, Union

from .errors import DecodeError

MENU_STATE_GAMEPLAY = 2


@dataclass(frozen=True, slots=True)
class Unknown:
    """Any menu state the bridge does not react to."""


@dataclass(frozen=True, slots=True)
class Gameplay:
    k1: bool
    k2: bool
    hp: float

    @property
    def keys(self) -> Tuple[bool, bool]:
        return (self.k1, self.k2)


GameState = Union[Unknown, Gameplay]


def to_float32(value: float) -> float:
    """Narrow to single precision; magnitudes beyond float32 become infinite."""
    try:
        return struct.unpack("<f", struct.pack("<f", float(value)))[0]
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _lookup(document: Mapping[str, Any], *path: str) -> Any:
    node: Any = document
    walked = []
    for key in path:
        walked.append(key)
        if not isinstance(node, dict):
            raise DecodeError(f"expected object at '{'.'.join(walked[:-1])}'")
        if key not in node:
            raise DecodeError(f"missing field '{'.'.join(walked)}'")
        node = node[key]
    return node


def _require_bool(document: Mapping[str, Any], *path: str) -> bool:
    value = _lookup(document, *path)
    if not isinstance(value, bool):
        raise DecodeError(f"'{'.'.join(path)}' must be boolean, got {type(value).__name__}")
    return value


def _require_number(document: Mapping[str, Any], *path: str) -> float:
    value = _lookup(document, *path)
    if not _is_number(value):
        raise DecodeError(f"'{'.'.join(path)}' must be a number, got {type(value).__name__}")
    return value


def _menu_state(document: Mapping[str, Any]) -> Any:
    menu = document.get("menu")
    if menu is None:
        return None
    if not isinstance(menu, dict):
        raise DecodeError("'menu' must be an object")
    state = menu.get("state")
    if state is not None and not _is_number(state):
        raise DecodeError(f"'menu.state' must be a number, got {type(state).__name__}")
    return state


def decode_game_state(raw: Union[str, bytes, bytearray]) -> GameState:
    """Decode one telemetry message into a snapshot.

    Only ``menu.state`` is read outside gameplay. In gameplay the key
    overlay and smoothed hp are required as well. Raises ``DecodeError``
    for anything that is not a well-formed document.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"telemetry frame is not utf-8: {exc}") from exc

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"invalid_json: {exc}") from exc
    except (ValueError, RecursionError) as exc:
        raise DecodeError(f"unparseable telemetry document: {exc}") from exc

    if not isinstance(document, dict):
        raise DecodeError("telemetry payload must be object")

    if _menu_state(document) != MENU_STATE_GAMEPLAY:
        return Unknown()

    return Gameplay(
        k1=_require_bool(document, "gameplay", "keyOverlay", "k1", "isPressed"),
        k2=_require_bool(document, "gameplay", "keyOverlay", "k2", "isPressed"),
        hp=to_float32(_require_number(document, "gameplay", "hp", "smooth")),
    )
