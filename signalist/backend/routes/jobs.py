from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from jobs.runtime import JobRuntime
from models import FunctionRunResult, JobEvent, RegisteredFunction

router = APIRouter(prefix="/api/jobs", tags=["jobs"])
logger = logging.getLogger(__name__)


def get_runtime(request: Request) -> JobRuntime:
    return request.app.state.runtime


@router.get("", response_model=List[RegisteredFunction])
def list_functions(runtime: JobRuntime = Depends(get_runtime)) -> List[RegisteredFunction]:
    return [fn.describe() for fn in runtime.functions]


@router.post("/events", response_model=List[FunctionRunResult])
def send_event(event: JobEvent, runtime: JobRuntime = Depends(get_runtime)) -> List[FunctionRunResult]:
    if not any(fn.handles_event(event.name) for fn in runtime.functions):
        raise HTTPException(status_code=404, detail=f"No job function handles event '{event.name}'")
    try:
        return runtime.send(event)
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Job run failed: {exc}") from exc


@router.post("/{function_id}/invoke", response_model=FunctionRunResult)
def invoke_function(
    function_id: str,
    event: JobEvent | None = None,
    runtime: JobRuntime = Depends(get_runtime),
) -> FunctionRunResult:
    function = runtime.get(function_id)
    if function is None:
        raise HTTPException(status_code=404, detail=f"Unknown job function '{function_id}'")
    try:
        return runtime.invoke(function, event or JobEvent(name="manual"), trigger="manual")
    except Exception as exc:
        raise HTTPException(status_code=500, detail=f"Job run failed: {exc}") from exc
