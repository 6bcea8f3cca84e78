from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from jobs.functions import JobFunction
from jobs.ledger import JobLedger
from jobs.steps import LocalStepRunner
from models import FunctionRunResult, JobEvent, JobStatus
from services import Services

logger = logging.getLogger(__name__)


class JobRuntime:
    """Routes events to registered job functions and records each run."""

    def __init__(self, services: Services, functions: Sequence[JobFunction], ledger: JobLedger) -> None:
        self.services = services
        self.ledger = ledger
        self._functions: Dict[str, JobFunction] = {fn.id: fn for fn in functions}

    @property
    def functions(self) -> List[JobFunction]:
        return list(self._functions.values())

    def get(self, function_id: str) -> Optional[JobFunction]:
        return self._functions.get(function_id)

    def invoke(self, function: JobFunction, event: JobEvent, trigger: Optional[str] = None) -> FunctionRunResult:
        trigger = trigger or f"event:{event.name}"
        run_id = self.ledger.start(function.id, trigger)
        step = LocalStepRunner(self.services.model, function_id=function.id)
        try:
            result = function.handler(event, step, self.services)
        except Exception as exc:
            # Surface to whoever triggered us; retry policy is not ours.
            logger.exception("Job %s (run %s) failed", function.id, run_id)
            self.ledger.finish(run_id, JobStatus.FAILED, str(exc), step.completed, step.failed)
            raise

        self.ledger.finish(run_id, JobStatus.COMPLETED, result.message, step.completed, step.failed)
        logger.info("Job %s (run %s) finished: %s", function.id, run_id, result.message)
        return FunctionRunResult(function_id=function.id, run_id=run_id, result=result)

    def send(self, event: JobEvent) -> List[FunctionRunResult]:
        matching = [fn for fn in self._functions.values() if fn.handles_event(event.name)]
        return [self.invoke(fn, event) for fn in matching]
