from __future__ import annotations

import argparse
import json
import logging
import sys

from db import Base, engine
from main import build_runtime, configure_logging
from models import JobEvent

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run a Signalist background job once, outside the scheduler."
    )
    parser.add_argument(
        "function_id",
        nargs="?",
        default="daily-news-summary",
        help="Job function id (see GET /api/jobs). Defaults to daily-news-summary.",
    )
    parser.add_argument(
        "--data",
        type=str,
        default="{}",
        help="JSON object passed as the event data, e.g. a signup payload.",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        data = json.loads(args.data)
    except ValueError as exc:
        logger.error("--data is not valid JSON: %s", exc)
        return 2

    Base.metadata.create_all(bind=engine)
    runtime = build_runtime()
    function = runtime.get(args.function_id)
    if function is None:
        logger.error(
            "Unknown job function '%s'. Known: %s",
            args.function_id,
            ", ".join(fn.id for fn in runtime.functions),
        )
        return 2

    outcome = runtime.invoke(function, JobEvent(name="manual", data=data), trigger="cli")
    print(outcome.model_dump_json(indent=2))
    return 0 if outcome.result.success else 1


if __name__ == "__main__":
    configure_logging()
    sys.exit(main())
