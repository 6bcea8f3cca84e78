from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.orm import sessionmaker

from db import SessionLocal, session_scope
from db_utils import run_with_retry
from models import JobRun, JobStatus

logger = logging.getLogger(__name__)


class JobLedger:
    """Audit trail of workflow runs kept in the SQL database.

    Only records what happened; nothing here is read back to resume a run.
    """

    def __init__(self, session_factory: sessionmaker = SessionLocal) -> None:
        self._session_factory = session_factory

    def start(self, function_id: str, trigger: str) -> int:
        def _write() -> int:
            with session_scope(self._session_factory) as db:
                run = JobRun(function_id=function_id, trigger=trigger, status=JobStatus.RUNNING, steps=[], failed_steps=[])
                db.add(run)
                db.flush()
                return run.id

        return run_with_retry(_write)

    def finish(
        self,
        run_id: int,
        status: JobStatus,
        message: Optional[str],
        steps: List[str],
        failed_steps: Sequence[str] = (),
    ) -> None:
        def _write() -> None:
            with session_scope(self._session_factory) as db:
                run = db.get(JobRun, run_id)
                if run is None:
                    logger.warning("Job run %s vanished before it could be closed", run_id)
                    return
                run.status = status
                run.message = message
                run.steps = list(steps)
                run.failed_steps = list(failed_steps)
                run.completed_at = datetime.utcnow()

        run_with_retry(_write)

    def last_completed(self) -> Optional[JobRun]:
        with self._session_factory() as db:
            return (
                db.query(JobRun)
                .filter(JobRun.completed_at.isnot(None))
                .order_by(JobRun.completed_at.desc())
                .first()
            )
