from __future__ import annotations

from typing import List

from .protocol import MODE_GAMEPLAY, Command, End, EnterMode, KeyState
from .telemetry import GameState, Gameplay, Unknown


class StateTranslator:
    """Turns consecutive snapshots into the wire commands the device cares about.

    Only transitions are forwarded: entering gameplay, a change of the
    pressed keys, and leaving gameplay. ``hp`` is carried by the snapshot
    but not diffed; ``HealthUpdate`` and ``HitOffset`` have no producer yet.
    """

    __slots__ = ("_last_state",)

    def __init__(self) -> None:
        self._last_state: GameState = Unknown()

    @property
    def last_state(self) -> GameState:
        return self._last_state

    def reset(self) -> None:
        self._last_state = Unknown()

    def translate(self, state: GameState) -> List[Command]:
        commands = self._diff(self._last_state, state)
        self._last_state = state
        return commands

    @staticmethod
    def _diff(previous: GameState, current: GameState) -> List[Command]:
        if isinstance(current, Gameplay):
            if isinstance(previous, Gameplay):
                if current.keys != previous.keys:
                    return [KeyState(k1=current.k1, k2=current.k2)]
                return []
            return [EnterMode(mode=MODE_GAMEPLAY)]

        if isinstance(current, Unknown):
            if isinstance(previous, Unknown):
                return []
            return [End()]

        raise TypeError(f"Unsupported game state: {current!r}")
