from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from auth import MongoSessionStore, SessionLookup
from config import env_bool, get_settings
from db import Base, engine
from jobs.functions import build_functions
from jobs.ledger import JobLedger
from jobs.runtime import JobRuntime
from jobs.scheduler import start_scheduler
from routes import jobs as job_routes
from routes import pages
from services import build_services

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )
    # Suppress verbose library logs
    for noisy in ("httpx", "google_genai", "google.genai", "apscheduler", "pymongo", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def build_runtime() -> JobRuntime:
    settings = get_settings()
    services = build_services(settings)
    return JobRuntime(services, build_functions(settings.daily_news_cron), JobLedger())


def create_app(
    runtime: Optional[JobRuntime] = None,
    session_store: Optional[SessionLookup] = None,
    enable_scheduler: Optional[bool] = None,
) -> FastAPI:
    runtime = runtime or build_runtime()
    session_store = session_store or MongoSessionStore(runtime.services.mongo)
    if enable_scheduler is None:
        enable_scheduler = get_settings().enable_scheduler

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Ensure the job ledger schema exists.
        Base.metadata.create_all(bind=engine)
        scheduler = start_scheduler(runtime) if enable_scheduler else None
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)

    app = FastAPI(title="Signalist Backend", lifespan=lifespan)
    app.state.runtime = runtime
    app.state.session_store = session_store

    # Relaxed CORS for local development so the frontend can reach the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(job_routes.router)
    app.include_router(pages.router)

    @app.get("/health")
    def health(runtime: JobRuntime = Depends(job_routes.get_runtime)) -> Dict[str, Any]:
        db_ok = True
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception:
            db_ok = False

        last_run = runtime.ledger.last_completed() if db_ok else None
        last_run_completed_at: Optional[datetime] = last_run.completed_at if last_run else None

        mongo = runtime.services.mongo
        return {
            "provider": runtime.services.model.name,
            "mongo_ok": bool(mongo.ping()) if hasattr(mongo, "ping") else None,
            "db_ok": db_ok,
            "last_run_completed_at": last_run_completed_at,
            "last_run_function": last_run.function_id if last_run else None,
        }

    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    reload_enabled = env_bool(os.getenv("UVICORN_RELOAD"))
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=reload_enabled)
