"""`Scheduler` implementation backed by the Qt event loop."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QElapsedTimer, QObject, Qt, QTimer, Signal, Slot


class _QueuedCall:
    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class _TimerCall:
    def __init__(self, timer: QTimer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None


class QtScheduler(QObject):
    """Runs callbacks on the GUI thread.

    `call_soon` goes through a queued signal, so it is safe to call from the
    API server thread or event bus listeners.
    """

    _queued = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._clock = QElapsedTimer()
        self._clock.start()
        self._queued.connect(self._run_queued, Qt.QueuedConnection)

    def now_ms(self) -> int:
        return int(self._clock.elapsed())

    def call_soon(self, callback: Callable[[], None]) -> _QueuedCall:
        call = _QueuedCall(callback)
        self._queued.emit(call)
        return call

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _TimerCall:
        timer = QTimer(self)
        timer.setSingleShot(True)
        handle = _TimerCall(timer)

        def fire() -> None:
            handle.cancel()
            callback()

        timer.timeout.connect(fire)
        timer.start(max(0, delay_ms))
        return handle

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> _TimerCall:
        timer = QTimer(self)
        timer.setInterval(max(1, interval_ms))
        timer.timeout.connect(callback)
        timer.start()
        return _TimerCall(timer)

    @Slot(object)
    def _run_queued(self, call: _QueuedCall) -> None:
        if not call.cancelled:
            call.callback()
