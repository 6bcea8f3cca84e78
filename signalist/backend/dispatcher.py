from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence

from mailer import Mailer
from models import DispatchReport, SignUpEventData, UserNewsSummary
from utils import get_formatted_today_date

logger = logging.getLogger(__name__)

WELCOME_INTRO_FALLBACK = (
    "Thanks for joining Signalist. You now have the tools to track markets and make smarter moves."
)

MAX_PARALLEL_SENDS = 16


def dispatch_news_summaries(
    summaries: Sequence[UserNewsSummary],
    mailer: Mailer,
    *,
    today: Callable[[], str] = get_formatted_today_date,
    max_workers: int = MAX_PARALLEL_SENDS,
) -> DispatchReport:
    """Send every non-null summary at once and wait for all of them.

    A rejected send is logged and counted; it never stops the other sends.
    There is no retry or rate limiting here.
    """
    report = DispatchReport()
    pending = [s for s in summaries if s.news_content is not None]
    report.skipped = len(summaries) - len(pending)
    report.attempted = len(pending)
    if not pending:
        return report

    date = today()
    with ThreadPoolExecutor(max_workers=min(max_workers, len(pending))) as pool:
        futures = [
            (s.user.email, pool.submit(mailer.send_news_summary_email, s.user.email, date, s.news_content))
            for s in pending
        ]
        for email, future in futures:
            exc = future.exception()
            if exc is not None:
                logger.error("News summary email to %s failed: %s", email, exc)
                report.failed.append(email)
            else:
                report.sent += 1

    logger.info(
        "News summary dispatch: %d sent, %d failed, %d skipped",
        report.sent,
        len(report.failed),
        report.skipped,
    )
    return report


def welcome_intro_text(generated: Optional[str]) -> str:
    return generated or WELCOME_INTRO_FALLBACK


def send_welcome(event: SignUpEventData, intro: Optional[str], mailer: Mailer) -> None:
    mailer.send_welcome_email(event.email, event.name, welcome_intro_text(intro))
