"""
Background schedule for ingestion and retention.

Polling runs on a fixed interval starting shortly after boot; the sweep
runs once a day at a fixed time. Each job allows a single running
instance, so a slow poll is never overlapped by the next one.
"""

from datetime import datetime, timedelta

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler

from .cleanup import run_scheduled_sweep
from .env import Settings
from .logger import get_logger
from .pipeline import IngestionPipeline
from .storage import InternshipStore

logger = get_logger()

POLL_JOB_ID = "poll-readme"
SWEEP_JOB_ID = "sweep-old-internships"


def add_jobs(
    scheduler: BaseScheduler,
    pipeline: IngestionPipeline,
    store: InternshipStore,
    settings: Settings,
) -> BaseScheduler:
    scheduler.add_job(
        pipeline.run_scheduled,
        "interval",
        minutes=settings.poll_interval_minutes,
        next_run_time=datetime.now() + timedelta(seconds=settings.poll_initial_delay_seconds),
        id=POLL_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        run_scheduled_sweep,
        "cron",
        hour=settings.sweep_hour,
        minute=settings.sweep_minute,
        args=[store],
        kwargs={"retention_days": settings.retention_days},
        id=SWEEP_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    logger.info(
        "Scheduled jobs",
        poll_every_minutes=settings.poll_interval_minutes,
        first_poll_in_seconds=settings.poll_initial_delay_seconds,
        sweep_at=f"{settings.sweep_hour:02d}:{settings.sweep_minute:02d}",
    )
    return scheduler


def start_background(pipeline: IngestionPipeline, store: InternshipStore, settings: Settings) -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    add_jobs(scheduler, pipeline, store, settings)
    scheduler.start()
    return scheduler


def run_blocking(pipeline: IngestionPipeline, store: InternshipStore, settings: Settings) -> None:
    scheduler = BlockingScheduler()
    add_jobs(scheduler, pipeline, store, settings)
    scheduler.start()
