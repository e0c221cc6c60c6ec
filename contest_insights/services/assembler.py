# contest_insights/services/assembler.py

import datetime
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from contest_insights.schemas import FailureResponse


def iso_timestamp(now: Optional[datetime.datetime] = None) -> str:
    """UTC ISO-8601 with millisecond precision and a trailing Z."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    if now.tzinfo is None:
        # pymongo hands back naive UTC datetimes
        now = now.replace(tzinfo=datetime.timezone.utc)
    return now.astimezone(datetime.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def render(model: BaseModel, status_code: int = 200, exclude_none: bool = False) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=model.model_dump(exclude_none=exclude_none))


def failure(
    status_code: int,
    error: str,
    details: Optional[str] = None,
    narrative: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    body = FailureResponse(error=error, details=details, aiAnalysis=narrative)
    return render(body, status_code=status_code, exclude_none=True)
