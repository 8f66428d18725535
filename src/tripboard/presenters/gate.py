"""Board-wide gate serializing the visible effect of mutations.

Only one mutation at a time may show its optimistic state. The gate is
held for at least ``lower_limit`` seconds so quick saves do not flicker,
and is force-released after ``upper_limit`` seconds so a hung save does
not freeze the board. Force release does not cancel the mutation; its
late outcome is still delivered through the stores.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import TypeAlias

logger = logging.getLogger(__name__)

BlockChangeCallback: TypeAlias = Callable[[bool], None]


class UiGate:
    """Async mutual exclusion with minimum and maximum hold durations.

    Args:
        lower_limit: Minimum seconds the gate stays held.
        upper_limit: Seconds after which the gate is released regardless.
        on_change: Called with True when the gate is taken and False when
            it is released, so the view can block and unblock input.
    """

    def __init__(
        self,
        *,
        lower_limit: float,
        upper_limit: float,
        on_change: BlockChangeCallback | None = None,
    ) -> None:
        if lower_limit < 0:
            raise ValueError("lower_limit must not be negative")
        if upper_limit < lower_limit:
            raise ValueError("upper_limit must not be lower than lower_limit")
        self.lower_limit = lower_limit
        self.upper_limit = upper_limit
        self.on_change = on_change
        self._lock = asyncio.Lock()
        self._generation = 0
        self._holder: int | None = None
        self._acquired_at = 0.0
        self._watchdog: asyncio.TimerHandle | None = None

    @property
    def is_blocked(self) -> bool:
        return self._holder is not None

    async def acquire(self) -> int:
        """Wait for the gate and take it. Returns the hold token."""
        await self._lock.acquire()
        loop = asyncio.get_running_loop()
        self._generation += 1
        token = self._generation
        self._holder = token
        self._acquired_at = loop.time()
        self._watchdog = loop.call_later(self.upper_limit, self._force_release, token)
        self._emit(True)
        return token

    async def release(self, token: int) -> None:
        """Release the hold identified by ``token`` once ``lower_limit`` passed.

        Releasing a hold that was already force-released is a no-op.
        """
        if self._holder != token:
            logger.debug("Gate hold %d already released", token)
            return
        elapsed = asyncio.get_running_loop().time() - self._acquired_at
        if elapsed < self.lower_limit:
            await asyncio.sleep(self.lower_limit - elapsed)
        self._release(token)

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[int]:
        """Hold the gate for the duration of the block."""
        token = await self.acquire()
        try:
            yield token
        finally:
            await self.release(token)

    def _force_release(self, token: int) -> None:
        if self._holder != token:
            return
        logger.warning(
            "Gate hold %d exceeded %.2fs, releasing while the action is pending",
            token,
            self.upper_limit,
        )
        self._release(token)

    def _release(self, token: int) -> None:
        if self._holder != token:
            return
        self._holder = None
        if self._watchdog is not None:
            self._watchdog.cancel()
            self._watchdog = None
        self._lock.release()
        self._emit(False)

    def _emit(self, blocked: bool) -> None:
        if self.on_change is not None:
            self.on_change(blocked)
