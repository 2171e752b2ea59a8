"""Lifecycle guard tying the pipeline to its owning form's lifetime."""

from __future__ import annotations

import logging
from collections.abc import Callable
from types import TracebackType

logger = logging.getLogger(__name__)


class Scope:
    """Liveness of one owning context plus its teardown.

    Usable directly (``teardown()``) or as a sync/async context manager
    that tears down on exit.
    """

    def __init__(self, cancellers: list[Callable[[], None]]):
        self._cancellers = cancellers
        self._live = True

    def is_live(self) -> bool:
        return self._live

    def teardown(self) -> None:
        """Mark the scope dead and cancel pending work. Idempotent, never raises."""
        if not self._live:
            return
        self._live = False
        for cancel in self._cancellers:
            try:
                cancel()
            except Exception as e:
                logger.error(f"Error during scope teardown: {type(e).__name__}: {e}")
        logger.debug("Scope torn down")

    def __enter__(self) -> Scope:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.teardown()

    async def __aenter__(self) -> Scope:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.teardown()


class LifecycleGuard:
    """Hands out scopes and cancels registered work when a scope ends.

    Only one scope is bound at a time; binding a new one tears down the old.
    """

    def __init__(self) -> None:
        self._cancellers: list[Callable[[], None]] = []
        self._scope: Scope | None = None

    def register(self, cancel: Callable[[], None]) -> None:
        """Add work to cancel on teardown (debounce timer, active request)."""
        self._cancellers.append(cancel)

    def bind_scope(self) -> Scope:
        if self._scope is not None:
            self._scope.teardown()
        self._scope = Scope(self._cancellers)
        return self._scope

    def is_live(self) -> bool:
        return self._scope is not None and self._scope.is_live()
