"""Background job that periodically promotes due scheduled assignments."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from knockwise.adapters.persistence.database import async_session_factory
from knockwise.application.use_cases.activate_scheduled import ActivationReport
from knockwise.infrastructure.api.dependencies import build_sql_services

logger = logging.getLogger(__name__)

SweepFn = Callable[[], Awaitable[ActivationReport]]


async def run_activation_sweep() -> ActivationReport:
    """One sweep in its own session; notifications go out only after the commit."""
    async with async_session_factory() as session:
        services = build_sql_services(session)
        report = await services.activate_pending.execute()
        await services.commit_and_notify(report.notifications)
        return report


class ActivationJob:
    """Runs a sweep shortly after startup, then every *interval* seconds."""

    def __init__(
        self,
        interval: float,
        startup_delay: float,
        sweep: SweepFn = run_activation_sweep,
    ):
        self._interval = interval
        self._startup_delay = startup_delay
        self._sweep = sweep
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="scheduled-assignment-activation")
        logger.info(
            "Activation job started (every %.0fs, first run in %.0fs)",
            self._interval, self._startup_delay,
        )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Activation job stopped")

    async def _loop(self) -> None:
        await asyncio.sleep(self._startup_delay)
        while True:
            try:
                report = await self._sweep()
                if report.found:
                    logger.info(
                        "Scheduled activation: %d found, %d activated, %d failed",
                        report.found, len(report.activated), len(report.failed),
                    )
            except Exception:
                logger.exception("Activation sweep failed")
            await asyncio.sleep(self._interval)
