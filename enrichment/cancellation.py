"""Cooperative cancellation token passed to enrichment clients."""

from __future__ import annotations

import asyncio

from .errors import EnrichmentCancelled


class CancellationToken:
    """One-shot cancellation signal for a single enrichment request.

    ``cancel()`` is synchronous and idempotent. Async code can ``await
    token.wait()`` to race its work against cancellation.
    """

    def __init__(self, generation: int = 0):
        self.generation = generation
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise EnrichmentCancelled(f"Request generation {self.generation} was cancelled")

    def __repr__(self) -> str:
        return f"CancellationToken(generation={self.generation}, cancelled={self.cancelled})"
