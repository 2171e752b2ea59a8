"""Debounce scheduler that coalesces rapid edits into one dispatch."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from .matcher import AcceptanceMatcher

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 1.0


@dataclass
class PendingDispatch:
    """A qualifying value waiting out the quiet period."""

    captured_value: str
    timer_handle: asyncio.TimerHandle


class DebounceScheduler:
    """Delay dispatch until the trigger field has been quiet for ``delay`` seconds.

    Every new value cancels the pending timer. Only values accepted by the
    matcher start a new one. When the timer fires, the field is read again
    and the dispatch is dropped if it changed in the meantime.
    """

    def __init__(
        self,
        matcher: AcceptanceMatcher,
        current_value: Callable[[], str | None],
        dispatch: Callable[[str], None],
        delay: float = DEFAULT_DELAY_SECONDS,
    ):
        self.matcher = matcher
        self.delay = delay
        self._current_value = current_value
        self._dispatch = dispatch
        self._pending: PendingDispatch | None = None
        self._last_value: str | None = None
        self._last_fired: str | None = None

    @property
    def pending(self) -> PendingDispatch | None:
        return self._pending

    @property
    def last_value(self) -> str | None:
        """Last value handled, whether still pending or already fired."""
        return self._last_value

    def on_edit(self, value: str | None) -> None:
        """Handle a new value of the trigger field.

        Must be called from inside the running event loop.
        """
        if value == self._last_value:
            return

        if self._pending is not None:
            logger.debug(f"Debounce superseded: {self._pending.captured_value!r}")
            self.cancel()
        self._last_value = value

        if not isinstance(value, str) or not self.matcher.matches(value):
            return

        loop = asyncio.get_running_loop()
        handle = loop.call_later(self.delay, self._fire, value)
        self._pending = PendingDispatch(captured_value=value, timer_handle=handle)
        logger.debug(f"Debounce pending for {self.delay:.3f}s: {value!r}")

    def cancel(self) -> None:
        """Cancel the pending timer, if any.

        A dropped value was never dispatched, so editing it in again arms
        a new timer.
        """
        pending, self._pending = self._pending, None
        if pending is not None:
            pending.timer_handle.cancel()
            self._last_value = self._last_fired

    def _fire(self, captured_value: str) -> None:
        self._pending = None
        current = self._current_value()
        if current != captured_value:
            logger.debug(f"Debounce discarded stale value: {captured_value!r}")
            self._last_value = self._last_fired
            return
        logger.debug(f"Debounce fired: {captured_value!r}")
        self._last_fired = captured_value
        self._dispatch(captured_value)
