from __future__ import annotations

from unittest.mock import MagicMock

from apscheduler.schedulers.background import BackgroundScheduler

from conftest import FakeDatabase
from jobs.scheduler import _run_cron, register_cron_jobs


def test_registers_one_job_per_cron_trigger(make_services, make_runtime):
    runtime = make_runtime(make_services(db=FakeDatabase(), news=MagicMock()))
    scheduler = BackgroundScheduler(timezone="UTC")

    assert register_cron_jobs(scheduler, runtime) == 1

    (job,) = scheduler.get_jobs()
    assert job.id == "daily-news-summary:0 12 * * *"
    assert str(job.trigger.fields[5]) == "12"


def test_cron_run_invokes_daily_summary(make_services, make_runtime):
    runtime = make_runtime(make_services(db=FakeDatabase(), news=MagicMock()))
    runtime.invoke = MagicMock()

    _run_cron(runtime, "daily-news-summary", "0 12 * * *")

    function, event = runtime.invoke.call_args.args
    assert function.id == "daily-news-summary"
    assert event.name == "cron"
    assert runtime.invoke.call_args.kwargs["trigger"] == "cron:0 12 * * *"
