from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from jobs.runtime import JobRuntime
from models import JobEvent

logger = logging.getLogger(__name__)

CRON_EVENT = "cron"


def _run_cron(runtime: JobRuntime, function_id: str, cron: str) -> None:
    function = runtime.get(function_id)
    if function is None:
        logger.error("Cron fired for unknown job %s", function_id)
        return
    runtime.invoke(function, JobEvent(name=CRON_EVENT, data={"cron": cron}), trigger=f"cron:{cron}")


def register_cron_jobs(scheduler: BackgroundScheduler, runtime: JobRuntime) -> int:
    """Add one scheduler job per cron trigger. Returns how many were added."""
    count = 0
    for function in runtime.functions:
        for cron in function.crons:
            scheduler.add_job(
                _run_cron,
                trigger=CronTrigger.from_crontab(cron, timezone="UTC"),
                args=[runtime, function.id, cron],
                id=f"{function.id}:{cron}",
                name=function.id,
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
            logger.info("Registered job: %s (%s UTC)", function.id, cron)
            count += 1
    return count


def start_scheduler(runtime: JobRuntime) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone="UTC")
    register_cron_jobs(scheduler, runtime)
    scheduler.start()
    return scheduler
