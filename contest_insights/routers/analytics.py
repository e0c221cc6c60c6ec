# contest_insights/routers/analytics.py
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from contest_insights.deps import get_narrator, get_repository
from contest_insights.schemas import (
    CONTEST_REQUEST_EXAMPLE,
    ContestAnalyticsResponse,
    ContestRequest,
    FailureResponse,
)
from contest_insights.services import assembler
from contest_insights.services.contest_analytics import ContestAnalyticsService
from contest_insights.services.prompts import CONTEST_ERROR_NARRATIVE
from contest_insights.services.repository import ContestNotFoundError, is_valid_contest_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analytics"])


@router.post(
    "/contestAnalytics",
    response_model=ContestAnalyticsResponse,
    summary="Lifecycle, funnel and recruiter analysis for a contest",
    responses={
        400: {"model": FailureResponse, "description": "Missing or malformed contestId"},
        404: {"model": FailureResponse, "description": "No lifecycle, recruiter or funnel data"},
        500: {"model": FailureResponse, "description": "Database or completion service failure"},
    },
)
async def contest_analytics(
    payload: Optional[ContestRequest] = Body(
        None,
        example=CONTEST_REQUEST_EXAMPLE
    ),
    repository=Depends(get_repository),
    narrator=Depends(get_narrator),
):
    contest_id = payload.contestId if payload else None
    if not contest_id:
        return assembler.failure(400, "Contest ID is required")
    if not is_valid_contest_id(contest_id):
        return assembler.failure(400, "Invalid Contest ID format")

    try:
        svc = ContestAnalyticsService(repository=repository, narrator=narrator)
        result = await svc.run(contest_id)
    except ContestNotFoundError as e:
        return assembler.failure(404, str(e))
    except Exception as e:
        logger.exception("Error in contest analytics for %s", contest_id)
        return assembler.failure(
            500,
            "Failed to generate contest analytics",
            details=str(e),
            narrative=dict(CONTEST_ERROR_NARRATIVE),
        )
    return assembler.render(result)
