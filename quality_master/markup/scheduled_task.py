"""
ScheduledTask - cancellable deferred callback

Wraps a single-shot QTimer with explicit arm/cancel/flush operations so the
owner never has to track timer ids.
"""

from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer


class ScheduledTask(QObject):
    """
    Deferred callback that runs at most once per interval.

    arm() while a run is already pending does not push the deadline back,
    so a steady stream of arm() calls still fires once every interval.
    """

    def __init__(self, interval_ms: int, callback: Callable[[], None],
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._callback = callback
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._run)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    @property
    def is_pending(self) -> bool:
        return self._timer.isActive()

    def arm(self):
        """Schedule a run unless one is already pending"""
        if not self._timer.isActive():
            self._timer.start()

    def cancel(self):
        """Drop the pending run, if any"""
        self._timer.stop()

    def flush(self):
        """Cancel the pending run and execute the callback now"""
        self._timer.stop()
        self._run()

    def _run(self):
        self._callback()


__all__ = ['ScheduledTask']
