"""Single-flight coordinator for enrichment requests.

At most one request is active. A new dispatch cancels the previous one and
bumps the generation counter; when a request settles, its effects are
applied only if its generation is still the current one, its token was not
cancelled and the owning scope is live. Network timing never decides which
request wins.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from .cancellation import CancellationToken
from .client import EnrichmentClient
from .errors import EnrichmentCancelled, EnrichmentTransportError
from .models import EnrichmentResult, Outcome

logger = logging.getLogger(__name__)


@dataclass
class EnrichmentRequest:
    """One dispatched request and the task running it."""

    generation: int
    trigger_value: str
    token: CancellationToken
    task: asyncio.Task[None] | None = None
    settled: bool = False

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled


class SingleFlightCoordinator:
    """Owns the active enrichment request and filters stale settlements."""

    def __init__(
        self,
        client: EnrichmentClient,
        on_settled: Callable[[Outcome], None],
        is_live: Callable[[], bool] | None = None,
        on_in_flight_change: Callable[[bool], None] | None = None,
    ):
        """Initialize coordinator.

        Args:
            client: Performs the network call
            on_settled: Receives the outcome of a live, current request
            is_live: Liveness of the owning scope, checked at settlement
            on_in_flight_change: Notified when the in-flight indicator flips
        """
        self.client = client
        self._on_settled = on_settled
        self._is_live = is_live or (lambda: True)
        self._on_in_flight_change = on_in_flight_change
        self._generation = 0
        self._active: EnrichmentRequest | None = None
        self._in_flight = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def active(self) -> EnrichmentRequest | None:
        return self._active

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def dispatch(self, value: str) -> None:
        """Start a request for ``value``, cancelling whatever was active.

        Must be called from inside the running event loop.
        """
        self._generation += 1
        generation = self._generation

        previous = self._active
        if previous is not None and not previous.settled:
            logger.debug(f"Superseding request generation {previous.generation}")
            self._abort(previous)

        request = EnrichmentRequest(
            generation=generation,
            trigger_value=value,
            token=CancellationToken(generation),
        )
        loop = asyncio.get_running_loop()
        request.task = loop.create_task(self._run(request), name=f"enrichment-{generation}")
        self._active = request
        logger.info(f"Dispatched enrichment generation {generation}: {value}")

    def cancel(self) -> None:
        """Cancel the active request without starting a new one. Idempotent."""
        request = self._active
        if request is not None and not request.settled:
            logger.debug(f"Cancelling request generation {request.generation}")
            self._abort(request)
        self._set_in_flight(False)

    async def wait_idle(self) -> None:
        """Wait until the active request, and any that replaced it, has finished."""
        while True:
            request = self._active
            if request is None or request.task is None or request.task.done():
                return
            await asyncio.wait([request.task])

    def _is_current(self, request: EnrichmentRequest) -> bool:
        return request.generation == self._generation and not request.cancelled and self._is_live()

    def _abort(self, request: EnrichmentRequest) -> None:
        request.token.cancel()
        if request.task is not None and not request.task.done():
            request.task.cancel()

    def _set_in_flight(self, value: bool) -> None:
        if self._in_flight == value:
            return
        self._in_flight = value
        if self._on_in_flight_change is not None:
            self._on_in_flight_change(value)

    async def _run(self, request: EnrichmentRequest) -> None:
        result: EnrichmentResult | None = None
        error: BaseException | None = None
        try:
            request.token.raise_if_cancelled()

            self._set_in_flight(True)
            result = await self.client.fetch(request.trigger_value, request.token)
        except asyncio.CancelledError:
            request.settled = True
            if request.cancelled:
                logger.debug(f"Request generation {request.generation} aborted")
                return
            raise
        except EnrichmentCancelled as e:
            if request.cancelled:
                request.settled = True
                logger.debug(f"Request generation {request.generation} cancelled before settling")
                return
            error = EnrichmentTransportError(f"Request aborted: {e}")
        except Exception as e:
            logger.warning(f"Enrichment request generation {request.generation} failed: {type(e).__name__}: {e}")
            error = e
        request.settled = True

        if not self._is_current(request):
            logger.debug(f"Discarding stale settlement of generation {request.generation}")
            return

        try:
            self._on_settled(
                Outcome(
                    generation=request.generation,
                    trigger_value=request.trigger_value,
                    result=result,
                    error=error,
                )
            )
        except Exception:
            logger.exception(f"Settlement handler failed for generation {request.generation}")
        finally:
            self._set_in_flight(False)
