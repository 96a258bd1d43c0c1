import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from datetime import datetime
from typing import Optional

from core.config import settings
from features.harbour.services.update_orchestrator import UpdateOrchestrator

logger = logging.getLogger(__name__)

class Scheduler:
    def __init__(self, orchestrator: UpdateOrchestrator):
        self.scheduler = AsyncIOScheduler()
        self.orchestrator = orchestrator

    def start(self):
        """Start the scheduler with the periodic refresh job."""
        if settings.refresh_interval_minutes <= 0:
            logger.info("Scheduled refresh disabled")
            return

        logger.info("Starting scheduler")

        self.scheduler.add_job(
            self.orchestrator.refresh,
            IntervalTrigger(minutes=settings.refresh_interval_minutes),
            id='harbour_refresh',
            name='harbour_refresh',
            next_run_time=datetime.now(),
            max_instances=1,
            coalesce=True
        )

        self.scheduler.start()
        logger.info(f"Scheduler started, refreshing every {settings.refresh_interval_minutes} minutes")

    def get_next_run_time(self, job_id: str) -> Optional[str]:
        """Get the next run time for a scheduled job."""
        job = self.scheduler.get_job(job_id)
        if job and job.next_run_time:
            return job.next_run_time.isoformat()
        return None

    def shutdown(self):
        """Shutdown the scheduler."""
        if self.scheduler.running:
            logger.info("Shutting down scheduler")
            self.scheduler.shutdown()
            logger.info("Scheduler shutdown complete")
