"""Background dispatch of sync cycles.

Cycles run as tracked asyncio tasks, started either by the periodic timer or
by an explicit trigger. By default overlapping cycles are allowed and the
store's deduplication keeps the outcome consistent. With ``serialize`` set, a
trigger that arrives while a cycle is in flight is skipped.
"""

import asyncio

from hnreader.services.orchestrator import SyncOrchestrator, SyncResult
from hnreader.utils.logging import get_logger

logger = get_logger(__name__)


class SyncRunner:
    """Owns the periodic sync timer and in-flight sync tasks."""

    def __init__(
        self,
        orchestrator: SyncOrchestrator,
        interval: float = 2 * 60 * 60,
        serialize: bool = False,
    ) -> None:
        self._orchestrator = orchestrator
        self._interval = interval
        self._serialize = serialize
        self._tasks: set[asyncio.Task[SyncResult | None]] = set()
        self._periodic: asyncio.Task[None] | None = None

    @property
    def in_flight(self) -> int:
        """Number of sync cycles currently running."""
        return len(self._tasks)

    @property
    def is_syncing(self) -> bool:
        return bool(self._tasks)

    def trigger(self, reason: str = "manual") -> bool:
        """Dispatch a sync cycle in the background.

        Args:
            reason: Label used in logs to tell triggers apart.

        Returns:
            True if a cycle was dispatched, False if it was skipped because
            another cycle is running and serialization is enabled.
        """
        if self._serialize and self._tasks:
            logger.info("Sync already running, skipping trigger", reason=reason)
            return False

        task = asyncio.create_task(self._run_cycle(reason), name=f"sync-{reason}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info("Sync dispatched", reason=reason, in_flight=len(self._tasks))
        return True

    def start(self) -> None:
        """Start the periodic timer."""
        if self._periodic is not None:
            return
        self._periodic = asyncio.create_task(self._periodic_loop(), name="sync-periodic")
        logger.info("Automatic feed refresh enabled", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Stop the periodic timer and cancel in-flight cycles.

        In-flight cycles are cancelled, not run to completion.
        """
        pending: list[asyncio.Task] = list(self._tasks)
        if self._periodic is not None:
            pending.append(self._periodic)
            self._periodic = None

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.info("Sync runner stopped", cancelled=len(pending))

    async def wait_idle(self) -> None:
        """Wait until every in-flight cycle has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _periodic_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            logger.info("Automatic feed refresh triggered")
            self.trigger("periodic")

    async def _run_cycle(self, reason: str) -> SyncResult | None:
        try:
            return await self._orchestrator.run()
        except asyncio.CancelledError:
            logger.warning("Sync cancelled", reason=reason)
            raise
        except Exception as e:
            logger.exception("Sync failed unexpectedly", reason=reason, error=str(e))
            return None
