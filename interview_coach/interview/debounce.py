"""
Per-question debouncing of transcript updates.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import DEBOUNCE_SECONDS

logger = logging.getLogger("debounce")

TranscriptCallback = Callable[[str, int], None]


class TranscriptDebouncer:
    """
    Coalesces rapid ``(text, question_index)`` updates.

    Each question index has at most one pending timer. A new update for an
    index cancels that index's pending timer and schedules a fresh one, so
    only the latest text is delivered once the index has been quiet for
    ``quiet_seconds``. Timers of other indices are never touched.

    ``scheduler`` is anything with asyncio's ``call_later(delay, callback, *args)``
    returning a handle with ``cancel()``. When omitted, the running event loop
    is used.
    """

    def __init__(self,
                 callback: TranscriptCallback,
                 quiet_seconds: float = DEBOUNCE_SECONDS,
                 scheduler: Optional[Any] = None):
        self.callback = callback
        self.quiet_seconds = quiet_seconds
        self._scheduler = scheduler
        self._pending: Dict[int, Tuple[Any, str]] = {}

    @property
    def pending_indices(self) -> List[int]:
        return sorted(self._pending)

    def submit(self, text: str, question_index: int) -> None:
        """Schedule ``text`` for delivery, replacing any pending text for the index."""
        previous = self._pending.pop(question_index, None)
        if previous is not None:
            previous[0].cancel()

        handle = self._get_scheduler().call_later(self.quiet_seconds, self._fire, question_index)
        self._pending[question_index] = (handle, text)

    def cancel(self, question_index: int) -> None:
        """Drop the pending update for one index, if any."""
        pending = self._pending.pop(question_index, None)
        if pending is not None:
            pending[0].cancel()

    def cancel_all(self) -> None:
        """Drop every pending update (teardown or restart)."""
        for handle, _ in self._pending.values():
            handle.cancel()
        if self._pending:
            logger.debug("Canceled %d pending transcript updates", len(self._pending))
        self._pending.clear()

    def _fire(self, question_index: int) -> None:
        pending = self._pending.pop(question_index, None)
        if pending is None:
            return
        _, text = pending
        try:
            self.callback(text, question_index)
        except Exception as e:
            logger.error("Debounced update for question %d failed: %s", question_index, e)

    def _get_scheduler(self):
        if self._scheduler is None:
            self._scheduler = asyncio.get_running_loop()
        return self._scheduler
