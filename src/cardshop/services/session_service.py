"""Game session: the simulation plus storage, autosave and event listeners."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Tuple

from cardshop.config import DEFAULT_CONFIG, SimConfig
from cardshop.core.types import LoadFailureReason
from cardshop.domain.commands import Command
from cardshop.domain.events import PhaseChanged, SimEvent
from cardshop.domain.results import CommandResult
from cardshop.services.save_service import SAVE_KEY, LoadResult, SaveService
from cardshop.services.simulation_service import SimSnapshot, SimulationService
from cardshop.services.storage import MemoryStorage, StorageLike

logger = logging.getLogger(__name__)

EventListener = Callable[[SimEvent], None]


@dataclass(frozen=True, slots=True)
class SaveResult:
    ok: bool
    reason: LoadFailureReason | None = None


class GameSession:
    """Drives a ``SimulationService`` and forwards its events to subscribers.

    Listeners are called synchronously, in subscription order, for every event
    produced by ``advance`` or ``apply``. Reaching night triggers an autosave.
    """

    def __init__(
        self,
        config: SimConfig = DEFAULT_CONFIG,
        *,
        storage: StorageLike | None = None,
        seed: int | None = None,
        save_key: str = SAVE_KEY,
        autosave: bool = True,
    ) -> None:
        self._simulation = SimulationService(config, seed)
        self._saves = SaveService(config)
        self._storage: StorageLike = storage if storage is not None else MemoryStorage()
        self._save_key = save_key
        self._autosave = autosave
        self._listeners: List[EventListener] = []

    @property
    def simulation(self) -> SimulationService:
        return self._simulation

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def advance(self, dt_seconds: float) -> Tuple[SimEvent, ...]:
        events = self._simulation.tick(dt_seconds)
        self._publish(events)
        if self._autosave and any(isinstance(e, PhaseChanged) and e.to_phase == "night" for e in events):
            self.save()
        return events

    def apply(self, command: Command) -> CommandResult:
        result = self._simulation.dispatch(command)
        if result.ok:
            self._publish(result.events)
        return result

    def snapshot(self) -> SimSnapshot:
        return self._simulation.snapshot()

    def save(self) -> SaveResult:
        try:
            self._saves.save_to_storage(self._storage, self._simulation.state, self._save_key)
        except OSError as exc:
            logger.warning("Save failed: %s", exc)
            return SaveResult(ok=False, reason="storage_error")
        return SaveResult(ok=True)

    def load(self) -> LoadResult:
        result = self._saves.load_from_storage(self._storage, self._save_key)
        if result.ok and result.state is not None:
            self._simulation.replace_state(result.state)
        return result

    def clear(self) -> SaveResult:
        try:
            self._saves.clear_save(self._storage, self._save_key)
        except OSError as exc:
            logger.warning("Clearing save failed: %s", exc)
            return SaveResult(ok=False, reason="storage_error")
        return SaveResult(ok=True)

    def _publish(self, events: Tuple[SimEvent, ...]) -> None:
        for event in events:
            for listener in list(self._listeners):
                try:
                    listener(event)
                except Exception:
                    logger.exception("Event listener %r failed on %s", listener, event.type)
