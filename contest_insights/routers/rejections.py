# contest_insights/routers/rejections.py
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from contest_insights.deps import get_narrator, get_repository
from contest_insights.schemas import (
    CONTEST_REQUEST_EXAMPLE,
    ContestRequest,
    FailureResponse,
    RejectionFeedbackResponse,
    RejectionStatsResponse,
)
from contest_insights.services import assembler
from contest_insights.services.prompts import (
    INVALID_ID_NARRATIVE,
    MISSING_ID_NARRATIVE,
    REJECTION_ERROR_NARRATIVE,
)
from contest_insights.services.rejection_feedback import RejectionFeedbackService
from contest_insights.services.rejection_stats import RejectionStatsService
from contest_insights.services.repository import ContestNotFoundError, is_valid_contest_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Rejections"])


@router.post(
    "/rejectionFeedbackObservation",
    response_model=RejectionFeedbackResponse,
    summary="Rejection reason breakdown with an AI-written observation",
    responses={
        200: {
            "description": "Analysis generated, no rejected candidates, or contest not found (success=false)",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "contestId": "64f1c2a9e3b4d5f6a7b8c9d0",
                        "totalRejected": 1,
                        "rejectionBreakdown": [
                            {"reason": "skills missing", "count": 1, "percentage": "100.0"}
                        ],
                        "aiAnalysis": {"observation": "...", "recommendedAction": "..."},
                        "generatedAt": "2024-05-01T10:00:00.000Z",
                    }
                }
            },
        },
        400: {"model": FailureResponse, "description": "Missing or malformed contestId"},
        500: {"model": FailureResponse, "description": "Database or completion service failure"},
    },
)
async def rejection_feedback_observation(
    payload: Optional[ContestRequest] = Body(
        None,
        example=CONTEST_REQUEST_EXAMPLE
    ),
    repository=Depends(get_repository),
    narrator=Depends(get_narrator),
):
    contest_id = payload.contestId if payload else None
    if not contest_id:
        return assembler.failure(400, "Contest ID is required", narrative=dict(MISSING_ID_NARRATIVE))
    if not is_valid_contest_id(contest_id):
        return assembler.failure(400, "Invalid Contest ID format", narrative=dict(INVALID_ID_NARRATIVE))

    try:
        svc = RejectionFeedbackService(repository=repository, narrator=narrator)
        result = await svc.run(contest_id)
    except ContestNotFoundError as e:
        return assembler.failure(200, str(e))
    except Exception as e:
        logger.exception("Error in rejection feedback observation for %s", contest_id)
        return assembler.failure(
            500,
            "Failed to generate rejection feedback observation",
            details=str(e),
            narrative=dict(REJECTION_ERROR_NARRATIVE),
        )
    return assembler.render(result)


@router.get(
    "/analysis/rejections/{contestId}",
    response_model=RejectionStatsResponse,
    summary="Rejected candidates bucketed into skills, experience and compensation",
    responses={
        400: {"model": FailureResponse, "description": "Malformed contestId"},
        404: {"model": FailureResponse, "description": "Contest not found"},
        500: {"model": FailureResponse, "description": "Database failure"},
    },
)
async def rejection_stats(contestId: str, repository=Depends(get_repository)):
    if not is_valid_contest_id(contestId):
        return assembler.failure(400, "Invalid Contest ID format.")
    try:
        result = await RejectionStatsService(repository=repository).run(contestId)
    except ContestNotFoundError as e:
        return assembler.failure(404, str(e))
    except Exception as e:
        logger.exception("Error during rejection analysis for %s", contestId)
        return assembler.failure(500, "Failed to analyze rejection reasons", details=str(e))
    return assembler.render(result)
