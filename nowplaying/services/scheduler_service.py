import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger


logger = logging.getLogger(__name__)


class SnapshotRefresher:
    """Scheduler that keeps the payload snapshots warm between client polls"""

    def __init__(self, refresh: Callable[[], Awaitable[dict]], interval_sec: int):
        self.refresh = refresh
        self.interval_sec = interval_sec
        self.scheduler: AsyncIOScheduler | None = None

    async def _refresh_job(self) -> None:
        """Background job that re-collects both payloads"""
        logger.info("Scheduled snapshot refresh triggered")
        try:
            result = await self.refresh()
            if "status_error" in result or "schedule_error" in result:
                logger.error("Scheduled refresh incomplete: %s", result)
            else:
                logger.info(
                    "Snapshots refreshed: %s statuses, %s upcoming shows",
                    result.get("statuses"),
                    result.get("upcoming"),
                )
        except Exception as e:
            logger.error("Exception in scheduled refresh: %s", e, exc_info=True)

    def start(self) -> None:
        """Start the scheduler with the refresh job"""
        if self.interval_sec <= 0:
            logger.info("Background refresh disabled")
            return

        if self.scheduler and self.scheduler.running:
            logger.warning("Scheduler already running")
            return

        self.scheduler = AsyncIOScheduler(timezone='UTC')
        self.scheduler.add_job(
            self._refresh_job,
            trigger=IntervalTrigger(seconds=self.interval_sec),
            id='snapshot_refresh',
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.now().astimezone(),
        )

        self.scheduler.start()
        next_time = self.get_next_run_time()
        logger.info(
            "Scheduler started (every %ss). Next refresh: %s",
            self.interval_sec,
            next_time.isoformat() if next_time else "unknown"
        )

    def shutdown(self) -> None:
        """Shutdown the scheduler"""
        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")
        self.scheduler = None

    @property
    def running(self) -> bool:
        return bool(self.scheduler and self.scheduler.running)

    def get_next_run_time(self) -> datetime | None:
        """Get next scheduled refresh time"""
        if not self.scheduler:
            return None
        job = self.scheduler.get_job('snapshot_refresh')
        return job.next_run_time if job else None
