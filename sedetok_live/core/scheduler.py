"""Timer abstraction used by the player state machines."""

from __future__ import annotations

from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Single-threaded event loop facade.

    Callbacks always run on the scheduler's own thread. `call_soon` may be
    invoked from any thread.
    """

    def now_ms(self) -> int: ...

    def call_soon(self, callback: Callable[[], None]) -> TimerHandle: ...

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class TimerGroup:
    """Tracks handles so a screen can cancel everything it started."""

    def __init__(self) -> None:
        self._handles: dict[str, TimerHandle] = {}

    def replace(self, name: str, handle: TimerHandle) -> TimerHandle:
        self.cancel(name)
        self._handles[name] = handle
        return handle

    def cancel(self, name: str) -> None:
        handle = self._handles.pop(name, None)
        if handle is not None:
            handle.cancel()

    def cancel_all(self) -> None:
        for name in list(self._handles):
            self.cancel(name)

    def __contains__(self, name: str) -> bool:
        return name in self._handles
