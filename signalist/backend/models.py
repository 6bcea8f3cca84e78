from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import JSON, DateTime, Enum as SAEnum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


DEFAULT_INVESTOR_NAME = "Investor"


class JobStatus(str, Enum):
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class JobRun(Base):
    """Audit row for one workflow invocation. Never used to resume steps."""

    __tablename__ = "job_runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    function_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    trigger: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[JobStatus] = mapped_column(
        SAEnum(JobStatus), default=JobStatus.RUNNING, nullable=False, index=True
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    steps: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    failed_steps: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


# ---------- Pydantic Schemas ----------


class UserForNewsEmail(BaseModel):
    id: str
    email: str
    name: Optional[str] = DEFAULT_INVESTOR_NAME


class MarketNewsArticle(BaseModel):
    """Pass-through news item. Unknown fields from the news API are kept."""

    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    headline: Optional[str] = None
    summary: Optional[str] = None
    source: Optional[str] = None
    url: Optional[str] = None
    datetime: Optional[int] = None
    category: Optional[str] = None
    related: Optional[str] = None
    image: Optional[str] = None


class UserNewsBatch(BaseModel):
    user: UserForNewsEmail
    articles: List[MarketNewsArticle] = Field(default_factory=list)


class UserNewsSummary(BaseModel):
    user: UserForNewsEmail
    # None means summarisation failed and no mail goes out for this user.
    news_content: Optional[str] = None


class DispatchReport(BaseModel):
    attempted: int = 0
    sent: int = 0
    skipped: int = 0
    failed: List[str] = Field(default_factory=list)


class JobResult(BaseModel):
    success: bool
    message: str


class SignUpEventData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    email: str
    name: str = DEFAULT_INVESTOR_NAME
    country: Optional[str] = None
    investment_goals: Optional[str] = Field(default=None, alias="investmentGoals")
    risk_tolerance: Optional[str] = Field(default=None, alias="riskTolerance")
    preferred_industry: Optional[str] = Field(default=None, alias="preferredIndustry")


class JobEvent(BaseModel):
    name: str
    data: Dict[str, Any] = Field(default_factory=dict)


class FunctionTrigger(BaseModel):
    event: Optional[str] = None
    cron: Optional[str] = None


class RegisteredFunction(BaseModel):
    id: str
    triggers: List[FunctionTrigger]


class FunctionRunResult(BaseModel):
    function_id: str
    run_id: Optional[int] = None
    result: JobResult


class SessionUser(BaseModel):
    id: str
    name: str
    email: str


class Session(BaseModel):
    user: SessionUser
    expires_at: Optional[datetime] = None
