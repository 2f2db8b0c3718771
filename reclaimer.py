import asyncio
from typing import Optional

from constants import RECLAIM_INTERVAL_SECONDS
from logging_config import get_logger
from registry import RoomRegistry

logger = get_logger(__name__)


class ReclaimScheduler:
    """Runs `registry.reclaim()` every `interval` seconds on the event loop."""

    def __init__(self, registry: RoomRegistry, interval: float = RECLAIM_INTERVAL_SECONDS):
        self.registry = registry
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Reclamation sweep scheduled every {self.interval} seconds")

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Reclamation sweep stopped")

    def sweep(self):
        report = self.registry.reclaim()
        if report.rooms_deleted > 0:
            logger.info(f"Cleaned {report.rooms_deleted} empty rooms")
        return report

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.sweep()
            except Exception as e:
                logger.error(f"Reclamation sweep failed: {e}", exc_info=True)
