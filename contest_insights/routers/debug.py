# contest_insights/routers/debug.py
import asyncio
import logging

from bson import ObjectId
from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from contest_insights.deps import get_repository
from contest_insights.services.contest_analytics import ContestAnalyticsService
from contest_insights.services.repository import is_valid_contest_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Debug"])

DEBUG_SAMPLE_SIZE = 2


def _encode(value):
    return jsonable_encoder(value, custom_encoder={ObjectId: str})


def _invalid_id() -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid ObjectId format"})


def _error(e: Exception) -> JSONResponse:
    logger.exception("Debug endpoint failed")
    return JSONResponse(status_code=500, content={"error": str(e)})


@router.get("/debug-contest-check/{contestId}", summary="Contest lookup with an empStatus breakdown")
async def debug_contest_check(contestId: str, repository=Depends(get_repository)):
    if not is_valid_contest_id(contestId):
        return _invalid_id()
    try:
        contest = await asyncio.to_thread(repository.find_contest, contestId)
        if not contest:
            return {"found": False, "message": "Contest not found", "searchedFor": contestId}

        statuses = await asyncio.to_thread(repository.status_breakdown, contestId, True)
        candidates = len(contest.get("jobseekerDetails") or [])
        return _encode({
            "found": True,
            "contestId": contestId,
            "totalCandidates": candidates,
            "empStatusBreakdown": statuses,
            "sampleDocument": {
                "_id": contest.get("_id"),
                "contestId": contest.get("contestId"),
                "jobseekerDetailsCount": candidates,
            },
        })
    except Exception as e:
        return _error(e)


@router.get("/debug-rejected/{contestId}", summary="First unwound documents with empStatus 'Rejected'")
async def debug_rejected(contestId: str, repository=Depends(get_repository)):
    if not is_valid_contest_id(contestId):
        return _invalid_id()
    try:
        rejected = await asyncio.to_thread(repository.rejected_entries, contestId, DEBUG_SAMPLE_SIZE)
        return _encode({
            "contestId": contestId,
            "count": len(rejected),
            "fullDocuments": rejected,
        })
    except Exception as e:
        return _error(e)


@router.get("/debug-contest-data/{contestId}", summary="Raw inputs of the contest analytics narrative")
async def debug_contest_data(contestId: str, repository=Depends(get_repository)):
    if not is_valid_contest_id(contestId):
        return _invalid_id()
    try:
        data = await ContestAnalyticsService(repository=repository).collect(contestId)
        return _encode({
            "contestId": contestId,
            "lifecycleEvents": len(data.lifecycle),
            "recruiterCount": len(data.recruiters),
            "overallStats": data.overall,
            "sampleData": {
                "lifecycle": [e._asdict() for e in data.lifecycle[:DEBUG_SAMPLE_SIZE]],
                "recruiters": data.recruiters[:DEBUG_SAMPLE_SIZE],
            },
        })
    except Exception as e:
        return _error(e)
