"""Step boundaries for background workflows.

Workflows are written against :class:`StepRunner`. In production the hosting
job runtime is responsible for checkpointing and retrying steps;
:class:`LocalStepRunner` simply runs each step inline and remembers which
steps ran or failed so the job ledger can record them.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, List, Optional, Protocol, TypeVar

from ai.provider import TextModel

T = TypeVar("T")

logger = logging.getLogger(__name__)


class StepRunner(Protocol):
    def run(self, step_id: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        ...

    def infer(self, step_id: str, prompt: str) -> Optional[str]:
        ...


class LocalStepRunner:
    def __init__(self, model: TextModel, function_id: str = "") -> None:
        self._model = model
        self._function_id = function_id
        self.completed: List[str] = []
        self.failed: List[str] = []

    def run(self, step_id: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        started = time.monotonic()
        logger.info("[%s] step %s started", self._function_id, step_id)
        try:
            result = fn(*args, **kwargs)
        except Exception:
            self.failed.append(step_id)
            logger.warning("[%s] step %s failed", self._function_id, step_id)
            raise
        self.completed.append(step_id)
        logger.info(
            "[%s] step %s finished in %.2fs",
            self._function_id,
            step_id,
            time.monotonic() - started,
        )
        return result

    def infer(self, step_id: str, prompt: str) -> Optional[str]:
        return self.run(step_id, self._model.generate_text, prompt)
