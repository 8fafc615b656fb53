"""Per-game publish/subscribe for row-change notifications."""

from __future__ import annotations

import logging
from threading import Lock

from sedetok_live.core.backend import GameListener
from sedetok_live.core.models import GameEvent

logger = logging.getLogger(__name__)


class GameSubscription:
    """Handle returned by `GameEventBus.subscribe`; unsubscribing twice is harmless."""

    def __init__(self, bus: GameEventBus, game_id: str, listener: GameListener) -> None:
        self._bus = bus
        self._game_id = game_id
        self._listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self._bus._remove(self._game_id, self._listener)


class GameEventBus:
    def __init__(self) -> None:
        self._lock = Lock()
        self._listeners: dict[str, list[GameListener]] = {}

    def subscribe(self, game_id: str, listener: GameListener) -> GameSubscription:
        with self._lock:
            self._listeners.setdefault(game_id, []).append(listener)
        return GameSubscription(self, game_id, listener)

    def publish(self, event: GameEvent) -> None:
        with self._lock:
            listeners = list(self._listeners.get(event.game.id, ()))
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                # keep broadcasting to the remaining listeners
                logger.exception("Game listener failed for game %s", event.game.id)

    def listener_count(self, game_id: str) -> int:
        with self._lock:
            return len(self._listeners.get(game_id, ()))

    def drop_game(self, game_id: str) -> None:
        with self._lock:
            self._listeners.pop(game_id, None)

    def _remove(self, game_id: str, listener: GameListener) -> None:
        with self._lock:
            listeners = self._listeners.get(game_id)
            if listeners and listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._listeners.pop(game_id, None)
