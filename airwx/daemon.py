"""Auto refresh loop for a running dashboard.

Refreshes on a fixed interval (the payload TTL) while the display is
visible, and once more when it becomes visible again with a stale cache.
This is a debouncing policy, not a scheduling guarantee.
"""

import asyncio
import logging
import signal
from collections.abc import Callable

from airwx.pipeline.dashboard import DashboardState

logger = logging.getLogger(__name__)


class AutoRefresher:
    def __init__(
        self,
        state: DashboardState,
        interval: float | None = None,
        on_render: Callable[[DashboardState], None] | None = None,
    ):
        self.state = state
        self.interval = interval if interval is not None else state.ttl_seconds
        self.on_render = on_render
        self.visible = True
        self._running = False
        self._stop = asyncio.Event()
        self._total_ticks = 0
        self._skipped_ticks = 0
        self._failures = 0

    async def tick(self) -> bool:
        """One timer firing: a forced refresh unless the display is hidden."""
        self._total_ticks += 1
        if not self.visible:
            self._skipped_ticks += 1
            logger.debug("Display hidden, skipping scheduled refresh")
            return False
        return await self._refresh(force=True)

    async def set_visible(self, visible: bool) -> bool:
        """Update visibility; becoming visible with a stale cache refreshes now."""
        self.visible = visible
        if visible and self.state.is_cache_stale():
            return await self._refresh(force=True)
        return False

    async def _refresh(self, force: bool) -> bool:
        try:
            ok = await self.state.refresh(force=force)
        except Exception:
            self._failures += 1
            logger.exception("Scheduled refresh crashed")
            return False
        if not ok and self.state.last_error:
            self._failures += 1
        if (ok or self.state.last_error) and self.on_render is not None:
            self.on_render(self.state)
        return ok

    async def run(self) -> None:
        """Initial cache-first render, then refresh every interval until stopped."""
        self._running = True
        self._stop.clear()
        self._setup_signals()
        logger.info("Auto refresh started, every %ss", self.interval)

        await self._refresh(force=False)
        while self._running:
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self.interval)
            except TimeoutError:
                await self.tick()

        logger.info(
            "Auto refresh stopped: %d ticks (%d skipped, %d failed)",
            self._total_ticks, self._skipped_ticks, self._failures,
        )

    def stop(self) -> None:
        self._running = False
        self._stop.set()
        self.state.cancel()

    def _setup_signals(self) -> None:
        """Handle SIGTERM and SIGINT for graceful shutdown."""
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, self.stop)
            except (NotImplementedError, RuntimeError):
                logger.debug("Signal handlers unavailable, relying on stop()")
                return
