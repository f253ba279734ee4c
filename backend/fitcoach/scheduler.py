"""Background schedule for the overdue plan sweeper."""

import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from fitcoach.config import get_settings
from fitcoach.services.overdue_sweeper import OverdueSweeper

logger = logging.getLogger(__name__)

SWEEPER_JOB_ID = "overdue_plan_sweeper"


def sweep_overdue_plans() -> None:
    """Scheduled entry point. Failures are logged so the scheduler keeps running."""
    try:
        OverdueSweeper().run()
    except Exception:
        logger.exception("[SCHEDULER] Overdue plan sweep failed")


def create_scheduler(cron: Optional[str] = None) -> BackgroundScheduler:
    cron = cron or get_settings().sweeper_cron
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        sweep_overdue_plans,
        trigger=CronTrigger.from_crontab(cron),
        id=SWEEPER_JOB_ID,
        name="Overdue Plan Sweeper",
        replace_existing=True,
    )
    return scheduler


def start_scheduler() -> BackgroundScheduler:
    scheduler = create_scheduler()
    scheduler.start()
    logger.info(f"[SCHEDULER] Started overdue plan sweeper ({get_settings().sweeper_cron})")
    return scheduler
