"""
Gate Coordinator

Coordinates a trigger from Slack with the later confirmation from the
gate device. Each trigger schedules a timeout check; the check is never
cancelled and instead inspects the state when it fires, so a
confirmation that arrived first turns it into a no-op.

Replies to Slack are dispatched as background tasks. Their outcome never
affects the acknowledgment already returned to the caller.
"""

import asyncio
from typing import Any, Awaitable, Optional, Set

from gaterelay.core.logging import get_logger
from gaterelay.gate.messages import (
    ACK_REPLY,
    FAILURE_REPLY,
    SUCCESS_REPLY,
    ResetResult,
    SlackReply,
)
from gaterelay.gate.state import GateRequestState

logger = get_logger(__name__)


class GateCoordinator:
    """Owns the gate request state and serialises every mutation of it."""

    def __init__(
        self,
        notifier: Any,
        confirm_timeout: float,
        scoped_timeouts: bool = True,
    ):
        self.notifier = notifier
        self.confirm_timeout = confirm_timeout
        self.scoped_timeouts = scoped_timeouts
        self.state = GateRequestState()
        self._lock = asyncio.Lock()
        self._timers: Set[asyncio.Task] = set()
        self._deliveries: Set[asyncio.Task] = set()

    async def trigger_open(self, callback_address: Optional[str]) -> SlackReply:
        """Start waiting for the gate to open.

        A missing callback address is accepted; the outcome is then only logged.
        """
        async with self._lock:
            superseded = self.state.pending
            generation = self.state.arm(callback_address)

        logger.info(
            "Gate open requested",
            generation=generation,
            has_callback=bool(callback_address),
            superseded=superseded,
            confirm_timeout=self.confirm_timeout,
        )
        self._spawn(self._expire_after(generation), self._timers)
        return ACK_REPLY

    async def confirm_opened(self) -> ResetResult:
        """Record that the gate physically opened."""
        async with self._lock:
            resolution = self.state.resolve()

        if resolution is None:
            logger.info("Gate confirmed opened with no request pending")
        elif resolution.callback_address is None:
            logger.warning("Gate confirmed opened, but there is no reply URL for Slack")
        else:
            logger.info("Gate confirmed opened", generation=resolution.generation)
            self._deliver(resolution.callback_address, SUCCESS_REPLY)

        return ResetResult(success=True)

    async def check_timeout(self, generation: Optional[int] = None) -> None:
        """Report failure if the request is still pending.

        Called by the timer scheduled in trigger_open. With scoped timeouts,
        a check belonging to a superseded trigger does nothing.
        """
        async with self._lock:
            if (
                self.scoped_timeouts
                and generation is not None
                and not self.state.is_current(generation)
            ):
                logger.debug(
                    "Ignoring timeout from superseded trigger",
                    generation=generation,
                    current=self.state.generation,
                )
                return
            resolution = self.state.resolve()

        if resolution is None:
            return

        if resolution.callback_address is None:
            logger.error("Gate failed to open, but there is no reply URL for Slack")
        else:
            logger.warning("Gate failed to open in time", generation=resolution.generation)
            self._deliver(resolution.callback_address, FAILURE_REPLY)

    def query_status(self) -> bool:
        return self.state.pending

    async def flush(self) -> None:
        """Wait for every in-flight reply to Slack to finish."""
        while self._deliveries:
            await asyncio.gather(*list(self._deliveries), return_exceptions=True)

    async def close(self) -> None:
        """Drop outstanding timers and let in-flight replies complete."""
        for task in list(self._timers):
            task.cancel()
        if self._timers:
            await asyncio.gather(*list(self._timers), return_exceptions=True)
        await self.flush()

    async def _expire_after(self, generation: int) -> None:
        await asyncio.sleep(self.confirm_timeout)
        await self.check_timeout(generation)

    def _deliver(self, address: str, reply: SlackReply) -> None:
        self._spawn(self.notifier.notify(address, reply.model_dump()), self._deliveries)

    def _spawn(self, coro: Awaitable[None], registry: Set[asyncio.Task]) -> None:
        task = asyncio.create_task(coro)
        registry.add(task)
        task.add_done_callback(registry.discard)
        task.add_done_callback(self._collect)

    @staticmethod
    def _collect(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background task failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )
