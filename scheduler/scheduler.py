"""Recurring article publication with Celery beat."""

import logging
import subprocess
import sys
from datetime import datetime, timezone

from celery import Celery
from celery.schedules import crontab

from hostseo.models.settings import Settings

logger = logging.getLogger(__name__)

RUN_TASK = "scheduler.scheduler.publish_articles_task"

SCHEDULES = {
    "daily": crontab(hour=9, minute=0),
    "twicedaily": crontab(hour="9,21", minute=0),
    "hourly": crontab(minute=0),
}


def build_beat_schedule(frequency: str, max_items: int = 3) -> dict:
    """Celery beat entry for the configured run frequency."""
    if frequency not in SCHEDULES:
        raise ValueError(f"Unknown schedule {frequency!r}")
    return {
        f"publish-articles-{frequency}": {
            "task": RUN_TASK,
            "schedule": SCHEDULES[frequency],
            "kwargs": {"max_items": max_items},
        },
    }


# Initialize Celery app
app = Celery("hostseo-scheduler")

# Configure Celery
app.conf.update(
    broker_url="redis://localhost:6379/0",
    result_backend="redis://localhost:6379/0",
    timezone="UTC",
    enable_utc=True,
    beat_schedule=build_beat_schedule(Settings().schedule),
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.task
def publish_articles_task(max_items: int = 3, dry_run: bool = False) -> dict:
    """Celery task running one pipeline pass through the CLI."""
    try:
        logger.info(
            f"Starting scheduled article run (max_items={max_items}, dry_run={dry_run})"
        )

        cmd = [sys.executable, "-m", "hostseo.seo_bot", "run", "--max", str(max_items)]
        if dry_run:
            cmd.append("--dry-run")

        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=1800  # 30 minute timeout
        )

        if result.returncode == 0:
            logger.info(f"Scheduled run finished: {result.stdout.strip()}")
            return {
                "status": "success",
                "timestamp": _now(),
                "output": result.stdout,
                "dry_run": dry_run
            }

        logger.error(f"Scheduled run failed: {result.stderr}")
        return {
            "status": "error",
            "timestamp": _now(),
            "error": result.stderr,
            "output": result.stdout,
            "dry_run": dry_run
        }

    except subprocess.TimeoutExpired:
        logger.error("Scheduled article run timed out")
        return {
            "status": "timeout",
            "timestamp": _now(),
            "error": "Task timed out after 30 minutes",
            "dry_run": dry_run
        }


if __name__ == "__main__":
    app.start()
