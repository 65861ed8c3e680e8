import math
from enum import Enum
from typing import Optional, Callable, List
from dataclasses import dataclass


class GameState(str, Enum):
    ACTIVE = "active"
    FULL = "full"
    DELETED = "deleted"


class TransitionError(Exception):
    def __init__(self, from_state: str, to_state: str, reason: str = None):
        self.from_state = from_state
        self.to_state = to_state
        self.reason = reason or f"Cannot transition from {from_state} to {to_state}"
        super().__init__(self.reason)


@dataclass
class Transition:
    from_state: GameState
    to_state: GameState
    action: str
    guard: Optional[Callable] = None


def open_slots(game: dict) -> float:
    """The game's playersNeeded as a number; anything unusable counts as no slots."""
    value = game.get("playersNeeded")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        return 0
    return value


def last_slot_guard(context: dict) -> bool:
    return 1 <= context.get("players_needed", 0) < 2


def open_slots_guard(context: dict) -> bool:
    return context.get("players_needed", 0) >= 2


class GameStateMachine:
    # Guarded transitions come first; the first one whose guard passes wins
    TRANSITIONS = [
        Transition(GameState.ACTIVE, GameState.FULL, "join", last_slot_guard),
        Transition(GameState.ACTIVE, GameState.ACTIVE, "join", open_slots_guard),
        Transition(GameState.ACTIVE, GameState.DELETED, "delete"),
        Transition(GameState.FULL, GameState.DELETED, "delete"),
    ]

    ALLOWED_ACTIONS = {
        GameState.ACTIVE: ["join", "delete"],
        GameState.FULL: ["delete"],
        GameState.DELETED: [],
    }

    def __init__(self, initial_state: GameState = GameState.ACTIVE):
        self._state = initial_state
        self._history: List[tuple] = []

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def accepts_players(self) -> bool:
        return self._state == GameState.ACTIVE

    @property
    def allowed_actions(self) -> List[str]:
        return self.ALLOWED_ACTIONS.get(self._state, [])

    def can_perform(self, action: str) -> bool:
        return action in self.allowed_actions

    def transition(self, action: str, guard_context: dict = None) -> GameState:
        for t in self.TRANSITIONS:
            if t.from_state != self._state or t.action != action:
                continue
            if t.guard and not t.guard(guard_context or {}):
                continue

            old_state = self._state
            self._state = t.to_state
            self._history.append((old_state, action, self._state))
            return self._state

        raise TransitionError(
            self._state.value,
            "unknown",
            f"No valid transition for action '{action}' from state '{self._state.value}'"
        )

    def get_history(self) -> List[tuple]:
        return self._history.copy()

    @classmethod
    def for_game(cls, game: Optional[dict]) -> "GameStateMachine":
        """Derive the state of a game document; None means it was deleted."""
        if game is None:
            return cls(initial_state=GameState.DELETED)
        if open_slots(game) >= 1:
            return cls(initial_state=GameState.ACTIVE)
        return cls(initial_state=GameState.FULL)
