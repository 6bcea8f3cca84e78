from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List

from ai.prompt_builder import build_welcome_prompt
from dispatcher import dispatch_news_summaries, send_welcome
from jobs.steps import StepRunner
from models import FunctionTrigger, JobEvent, JobResult, RegisteredFunction, SignUpEventData
from services import Services
from summary_generator import generate_summaries

logger = logging.getLogger(__name__)

USER_CREATED_EVENT = "app.user.created"
DAILY_NEWS_EVENT = "app.send.daily.news"

Handler = Callable[[JobEvent, StepRunner, Services], JobResult]


@dataclass(frozen=True)
class JobFunction:
    id: str
    triggers: List[FunctionTrigger]
    handler: Handler

    def handles_event(self, name: str) -> bool:
        return any(t.event == name for t in self.triggers)

    @property
    def crons(self) -> List[str]:
        return [t.cron for t in self.triggers if t.cron]

    def describe(self) -> RegisteredFunction:
        return RegisteredFunction(id=self.id, triggers=self.triggers)


def send_sign_up_email(event: JobEvent, step: StepRunner, services: Services) -> JobResult:
    data = SignUpEventData.model_validate(event.data)
    prompt = build_welcome_prompt(data)

    intro = step.infer("generate-welcome-intro", prompt)
    step.run("send-welcome-email", send_welcome, data, intro, services.mailer)

    return JobResult(success=True, message="Welcome email sent successfully")


def send_daily_news_summary(event: JobEvent, step: StepRunner, services: Services) -> JobResult:
    users = step.run("get-all-users", services.load_users)
    if not users:
        logger.info("Daily news summary skipped: no users found")
        return JobResult(success=False, message="No users found")

    batches = step.run("fetch-user-news", lambda: services.news_fetcher().fetch_all(users))

    # Each user's inference is its own step inside generate_summaries.
    summaries = generate_summaries(batches, step.infer)

    step.run("send-news-emails", dispatch_news_summaries, summaries, services.mailer)

    return JobResult(success=True, message="Daily news summary emails sent successfully")


def build_functions(daily_news_cron: str) -> List[JobFunction]:
    return [
        JobFunction(
            id="sign-up-email",
            triggers=[FunctionTrigger(event=USER_CREATED_EVENT)],
            handler=send_sign_up_email,
        ),
        JobFunction(
            id="daily-news-summary",
            triggers=[FunctionTrigger(event=DAILY_NEWS_EVENT), FunctionTrigger(cron=daily_news_cron)],
            handler=send_daily_news_summary,
        ),
    ]
