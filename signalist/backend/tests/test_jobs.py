from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from conftest import FakeDatabase, StaticModel, make_article
from db import SessionLocal
from dispatcher import WELCOME_INTRO_FALLBACK
from jobs.functions import DAILY_NEWS_EVENT, USER_CREATED_EVENT
from models import JobEvent, JobRun, JobStatus


def _news(articles=None):
    news = MagicMock()
    news.get_news.return_value = articles if articles is not None else [make_article(i) for i in range(8)]
    return news


def _runs():
    with SessionLocal() as db:
        return db.query(JobRun).order_by(JobRun.id).all()


def test_daily_summary_with_no_users_stops_early(make_services, make_runtime, transport):
    news = _news()
    model = StaticModel()
    runtime = make_runtime(make_services(db=FakeDatabase(), news=news, model=model))

    (outcome,) = runtime.send(JobEvent(name=DAILY_NEWS_EVENT))

    assert outcome.result.success is False
    assert outcome.result.message == "No users found"
    news.get_news.assert_not_called()
    assert model.prompts == []
    assert transport.sent == []
    (run,) = _runs()
    assert run.status == JobStatus.COMPLETED
    assert run.steps == ["get-all-users"]


def test_daily_summary_end_to_end(make_services, make_runtime, transport, user_db):
    news = _news()
    runtime = make_runtime(make_services(db=user_db, news=news, model=StaticModel("<p>Markets rallied.</p>")))

    (outcome,) = runtime.send(JobEvent(name=DAILY_NEWS_EVENT))

    assert outcome.result.success is True
    assert outcome.result.message == "Daily news summary emails sent successfully"
    assert sorted(m["to"] for m in transport.sent) == ["ada@example.com", "bob@example.com"]
    assert all("Markets rallied." in m["html"] for m in transport.sent)
    # Ada has a watchlist, Bob gets generic news only.
    news.get_news.assert_any_call(["AAPL"])
    (run,) = _runs()
    assert run.steps == [
        "get-all-users",
        "fetch-user-news",
        "summarize-news-ada@example.com",
        "summarize-news-bob@example.com",
        "send-news-emails",
    ]


def test_summary_failure_excludes_only_that_user(make_services, make_runtime, transport, user_db):
    class FlakyModel(StaticModel):
        calls = 0

        def generate_text(self, prompt):
            FlakyModel.calls += 1
            if FlakyModel.calls == 1:
                raise RuntimeError("quota")
            return "<p>ok</p>"

    runtime = make_runtime(make_services(db=user_db, news=_news(), model=FlakyModel()))

    (outcome,) = runtime.send(JobEvent(name=DAILY_NEWS_EVENT))

    assert outcome.result.success is True
    assert [m["to"] for m in transport.sent] == ["bob@example.com"]
    (run,) = _runs()
    assert run.failed_steps == ["summarize-news-ada@example.com"]
    assert "summarize-news-ada@example.com" not in run.steps
    assert "summarize-news-bob@example.com" in run.steps


def test_sign_up_flow_sends_generated_intro(make_services, make_runtime, transport):
    model = StaticModel("<p>Welcome, tech investor!</p>")
    runtime = make_runtime(make_services(db=FakeDatabase(), news=_news(), model=model))
    event = JobEvent(
        name=USER_CREATED_EVENT,
        data={
            "email": "new@example.com",
            "name": "Nia",
            "country": "CA",
            "investmentGoals": "Growth",
            "riskTolerance": "High",
            "preferredIndustry": "Technology",
        },
    )

    (outcome,) = runtime.send(event)

    assert outcome.function_id == "sign-up-email"
    assert outcome.result.message == "Welcome email sent successfully"
    assert "- Preferred industry: Technology" in model.prompts[0]
    assert "- Investment goals: Growth" in model.prompts[0]
    (mail,) = transport.sent
    assert mail["to"] == "new@example.com"
    assert "Welcome, tech investor!" in mail["html"]


def test_sign_up_flow_falls_back_when_model_is_silent(make_services, make_runtime, transport):
    runtime = make_runtime(make_services(db=FakeDatabase(), news=_news(), model=StaticModel(None)))

    runtime.send(JobEvent(name=USER_CREATED_EVENT, data={"email": "new@example.com", "name": "Nia"}))

    assert WELCOME_INTRO_FALLBACK in transport.sent[0]["html"]


def test_sign_up_send_failure_propagates_and_is_recorded(make_services, make_runtime, transport):
    transport.fail_for.add("new@example.com")
    runtime = make_runtime(make_services(db=FakeDatabase(), news=_news()))

    with pytest.raises(RuntimeError):
        runtime.send(JobEvent(name=USER_CREATED_EVENT, data={"email": "new@example.com"}))

    (run,) = _runs()
    assert run.status == JobStatus.FAILED
    assert run.steps == ["generate-welcome-intro"]
    assert run.failed_steps == ["send-welcome-email"]
    assert "new@example.com" in run.message


def test_unrelated_event_runs_nothing(make_services, make_runtime):
    runtime = make_runtime(make_services(db=FakeDatabase(), news=_news()))
    assert runtime.send(JobEvent(name="app.something.else")) == []
    assert _runs() == []


def test_daily_summary_declares_event_and_cron(make_services, make_runtime):
    runtime = make_runtime(make_services(db=FakeDatabase(), news=_news()))
    fn = runtime.get("daily-news-summary")
    assert fn.handles_event(DAILY_NEWS_EVENT)
    assert fn.crons == ["0 12 * * *"]


def test_successful_run_records_no_failed_steps(make_services, make_runtime, transport):
    runtime = make_runtime(make_services(db=FakeDatabase(), news=_news()))

    runtime.send(JobEvent(name=USER_CREATED_EVENT, data={"email": "new@example.com"}))

    (run,) = _runs()
    assert run.failed_steps == []
