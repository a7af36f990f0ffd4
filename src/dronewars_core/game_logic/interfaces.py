"""Boundary contracts for the collaborators the rules core depends on.

The core never reaches for process-wide managers. Game state, the action
processor, credit ledger and hangar storage are injected through these
protocols. The in-memory implementations below back tests and local play.
"""

from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Protocol

from dronewars_core.game_logic.shield_rules import effective_section_max_shields
from dronewars_core.game_logic.state import Hangar
from dronewars_core.shared.events import ProcessedAction
from dronewars_core.shared.value_objects import ActionResult, OperationResult

logger = logging.getLogger(__name__)

ActionHandler = Callable[
    [str, Mapping[str, Any]], ActionResult | Awaitable[ActionResult]
]


class ActionProcessor(Protocol):
    """Authoritative action layer, local or routed to a remote peer."""

    async def process_action(
        self, action_type: str, payload: Mapping[str, Any]
    ) -> ActionResult:
        """Apply *action_type* with *payload* and return the outcome."""


class GameStateAccessor(Protocol):
    """Read access to the authoritative game state plus explicit commits."""

    def get_state(self) -> Mapping[str, Any]:
        """Return the current game state."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return a single top-level field of the game state."""

    def set_state(self, partial: Mapping[str, Any]) -> None:
        """Merge *partial* into the game state."""


class EffectiveStatsProvider(Protocol):
    """Source of per-section shield capacities."""

    def get_effective_section_max_shields(
        self,
        section_name: str,
        player_state: Mapping[str, Any],
        placed_sections: Sequence[str | None],
    ) -> int:
        """Return the shield capacity of *section_name* for the ship layout."""


class CreditLedger(Protocol):
    """Player credit balance used for hangar purchases."""

    def can_afford(self, amount: int) -> bool:
        """Return ``True`` when the balance covers *amount*."""

    def deduct(self, amount: int, reason: str) -> OperationResult:
        """Remove *amount* credits, recording *reason*."""


class HangarStore(Protocol):
    """Persistence of the single-player hangar."""

    def load_hangar(self) -> Hangar:
        """Return the current hangar."""

    def save_hangar(self, hangar: Hangar) -> None:
        """Replace the stored hangar with *hangar*."""


class ReputationProvider(Protocol):
    """Source of reputation-based perks."""

    def get_extraction_bonus(self) -> int:
        """Return extra loot slots unlocked through reputation."""


class InMemoryGameStateAccessor:
    """Dictionary-backed implementation of :class:`GameStateAccessor`."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._state: dict[str, Any] = copy.deepcopy(dict(initial or {}))

    def get_state(self) -> Mapping[str, Any]:
        """Return the stored state."""
        return self._state

    def get(self, key: str, default: Any = None) -> Any:
        """Return *key* from the stored state."""
        return self._state.get(key, default)

    def set_state(self, partial: Mapping[str, Any]) -> None:
        """Shallow-merge *partial* into the stored state."""
        self._state = {**self._state, **partial}


class RecordingActionProcessor:
    """Action processor that records every call and delegates to a handler.

    Without a handler each action succeeds with no data. Results queued via
    :meth:`queue_result` take precedence over the handler, in order.
    """

    def __init__(self, handler: ActionHandler | None = None) -> None:
        self._handler = handler
        self._queued: list[ActionResult] = []
        self.calls: list[ProcessedAction] = []

    def queue_result(self, result: ActionResult) -> None:
        """Return *result* for the next unhandled call."""
        self._queued.append(result)

    async def process_action(
        self, action_type: str, payload: Mapping[str, Any]
    ) -> ActionResult:
        """Record the call and return the queued or handled result."""
        if self._queued:
            result = self._queued.pop(0)
        elif self._handler is not None:
            outcome = self._handler(action_type, payload)
            result = await outcome if inspect.isawaitable(outcome) else outcome
        else:
            result = ActionResult(success=True)
        self.calls.append(
            ProcessedAction(
                action_type=action_type, payload=dict(payload), result=result
            )
        )
        return result

    def calls_of(self, action_type: str) -> list[ProcessedAction]:
        """Return recorded calls matching *action_type*."""
        return [call for call in self.calls if call.action_type == action_type]


class SectionShieldStatsProvider:
    """Shield capacity from section stats plus the middle-lane bonus."""

    def get_effective_section_max_shields(
        self,
        section_name: str,
        player_state: Mapping[str, Any],
        placed_sections: Sequence[str | None],
    ) -> int:
        """Return the capacity computed by the shared shield rules."""
        return effective_section_max_shields(
            section_name, player_state, placed_sections
        )


class InMemoryCreditLedger:
    """Trivial in-memory implementation of :class:`CreditLedger`."""

    def __init__(self, balance: int = 0) -> None:
        self.balance = balance
        self.transactions: list[tuple[int, str]] = []

    def can_afford(self, amount: int) -> bool:
        """Return ``True`` when the balance covers *amount*."""
        return self.balance >= amount

    def deduct(self, amount: int, reason: str) -> OperationResult:
        """Deduct *amount* if affordable."""
        if amount < 0:
            return OperationResult.failure("Invalid amount")
        if not self.can_afford(amount):
            logger.info("Declined %s credits for %s", amount, reason)
            return OperationResult.failure("Insufficient credits")
        self.balance -= amount
        self.transactions.append((amount, reason))
        return OperationResult(success=True, cost=amount)


class InMemoryHangarStore:
    """Trivial in-memory implementation of :class:`HangarStore`."""

    def __init__(self, hangar: Hangar | None = None) -> None:
        self._hangar = hangar or Hangar()

    def load_hangar(self) -> Hangar:
        """Return the stored hangar."""
        return self._hangar

    def save_hangar(self, hangar: Hangar) -> None:
        """Replace the stored hangar."""
        self._hangar = hangar


class FixedReputationProvider:
    """Reputation provider returning a constant extraction bonus."""

    def __init__(self, extraction_bonus: int = 0) -> None:
        self._extraction_bonus = extraction_bonus

    def get_extraction_bonus(self) -> int:
        """Return the configured bonus."""
        return self._extraction_bonus


__all__ = [
    "ActionHandler",
    "ActionProcessor",
    "CreditLedger",
    "EffectiveStatsProvider",
    "FixedReputationProvider",
    "GameStateAccessor",
    "HangarStore",
    "InMemoryCreditLedger",
    "InMemoryGameStateAccessor",
    "InMemoryHangarStore",
    "RecordingActionProcessor",
    "ReputationProvider",
    "SectionShieldStatsProvider",
]
