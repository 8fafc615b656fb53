"""State machine behind the join screen: PIN + name, lobby wait, hand-off to play."""

from __future__ import annotations

from enum import Enum, auto
import logging
from typing import Callable

from sedetok_live.constants.game_constants import JOIN_POLL_INTERVAL_MS
from sedetok_live.constants.ui_constants import (
    ERROR_DUPLICATE_NAME,
    ERROR_GAME_FINISHED,
    ERROR_GAME_NOT_FOUND,
    ERROR_HOST_ENDED,
    ERROR_JOIN_FAILED,
    ERROR_NAME_REQUIRED,
    ERROR_PIN_REQUIRED,
)
from sedetok_live.core.backend import GameBackend, Subscription
from sedetok_live.core.codes import is_valid_pin, normalize_pin
from sedetok_live.core.errors import (
    DuplicatePlayerError,
    GameFinishedError,
    GameNotFoundError,
    LiveGameError,
)
from sedetok_live.core.models import GameEvent, GameEventKind, GameStatus, LiveGame, LiveGamePlayer
from sedetok_live.core.scheduler import Scheduler, TimerGroup

logger = logging.getLogger(__name__)


class JoinStep(Enum):
    NAME = auto()
    JOINING = auto()
    WAITING = auto()
    PLAYING = auto()


class JoinFlow:
    """Drives NAME -> JOINING -> WAITING -> PLAYING.

    Errors send the flow back to NAME with `error_message` set. Reaching
    PLAYING calls `on_enter_game` exactly once.
    """

    def __init__(
        self,
        backend: GameBackend,
        scheduler: Scheduler,
        on_enter_game: Callable[[LiveGame, LiveGamePlayer], None],
        on_change: Callable[[JoinFlow], None] | None = None,
        poll_interval_ms: int = JOIN_POLL_INTERVAL_MS,
    ) -> None:
        self._backend = backend
        self._scheduler = scheduler
        self._on_enter_game = on_enter_game
        self._on_change = on_change
        self._poll_interval_ms = poll_interval_ms
        self._timers = TimerGroup()
        self._subscription: Subscription | None = None
        self._closed = False

        self.step = JoinStep.NAME
        self.pin = ""
        self.player_name = ""
        self.error_message: str | None = None
        self.game_preview: LiveGame | None = None
        self.game: LiveGame | None = None
        self.player: LiveGamePlayer | None = None

    def set_pin(self, raw: str) -> str:
        """Normalize the typed PIN; a complete PIN triggers a silent preview lookup."""
        self.pin = normalize_pin(raw)
        self.game_preview = None
        if is_valid_pin(self.pin):
            try:
                game = self._backend.get_game_by_pin(self.pin)
            except LiveGameError:
                game = None
            if game is not None and game.status is not GameStatus.FINISHED:
                self.game_preview = game
        self._notify()
        return self.pin

    def set_player_name(self, name: str) -> None:
        self.player_name = name
        self._notify()

    def can_join(self) -> bool:
        return self.step is JoinStep.NAME and bool(self.player_name.strip()) and is_valid_pin(self.pin)

    def join(self) -> None:
        if self.step is not JoinStep.NAME:
            return
        if not self.player_name.strip():
            self._fail(ERROR_NAME_REQUIRED)
            return
        if not is_valid_pin(self.pin):
            self._fail(ERROR_PIN_REQUIRED)
            return

        self.error_message = None
        self.step = JoinStep.JOINING
        self._notify()

        try:
            game = self._backend.get_game_by_pin(self.pin)
        except GameNotFoundError:
            self._fail(ERROR_GAME_NOT_FOUND)
            return
        except LiveGameError:
            logger.exception("PIN lookup failed for %s", self.pin)
            self._fail(ERROR_JOIN_FAILED)
            return

        if game.status is GameStatus.FINISHED:
            self._fail(ERROR_GAME_FINISHED)
            return

        try:
            player = self._backend.register_player(game.id, self.player_name.strip())
        except DuplicatePlayerError:
            self._fail(ERROR_DUPLICATE_NAME)
            return
        except GameFinishedError:
            self._fail(ERROR_GAME_FINISHED)
            return
        except (LiveGameError, ValueError):
            logger.exception("Registering '%s' in game %s failed", self.player_name, game.id)
            self._fail(ERROR_JOIN_FAILED)
            return

        self.game = game
        self.player = player
        if game.status is GameStatus.IN_PROGRESS:
            self._enter_game(game)
            return

        self._closed = False
        self.step = JoinStep.WAITING
        self._timers.replace("poll", self._scheduler.call_every(self._poll_interval_ms, self._poll))
        self._subscription = self._backend.subscribe_to_game(game.id, self._on_game_event)
        self._notify()

    def close(self) -> None:
        """Stop polling and drop the realtime subscription."""
        self._closed = True
        self._timers.cancel_all()
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def return_to_form(self, message: str) -> None:
        """Drop the joined game and show `message` on the join form."""
        self.close()
        self._fail(message)

    def _poll(self) -> None:
        if self._closed or self.step is not JoinStep.WAITING or self.game is None:
            return
        try:
            game = self._backend.get_game(self.game.id)
        except LiveGameError as exc:
            logger.warning("Lobby poll for game %s failed: %s", self.game.id, exc)
            return
        self._apply_status(game)

    def _on_game_event(self, event: GameEvent) -> None:
        if self._closed or event.kind is not GameEventKind.GAME_UPDATED:
            return
        # Push notifications may arrive on a foreign thread.
        self._scheduler.call_soon(lambda: self._apply_status(event.game))

    def _apply_status(self, game: LiveGame) -> None:
        # Closing does not recall callbacks already queued on the scheduler.
        if self._closed or self.step is not JoinStep.WAITING:
            return
        self.game = game
        if game.status is GameStatus.IN_PROGRESS:
            self._enter_game(game)
        elif game.status is GameStatus.FINISHED:
            self.close()
            self._fail(ERROR_HOST_ENDED)

    def _enter_game(self, game: LiveGame) -> None:
        self.close()
        self.step = JoinStep.PLAYING
        self._notify()
        logger.info("Player %s entering game %s", self.player.id, game.id)
        self._on_enter_game(game, self.player)

    def _fail(self, message: str) -> None:
        self.step = JoinStep.NAME
        self.game = None
        self.player = None
        self.error_message = message
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
