# contest_insights/routers/health.py
from fastapi import APIRouter

from contest_insights import config

router = APIRouter(tags=["Health"])


@router.get("/health", summary="Health Check")
async def health_check():
    return {
        "status": "OK",
        "message": "Contest Insights API is running",
        "database": config.DB_NAME,
        "collections": [
            config.PROFILES_COLLECTION,
            config.LIFECYCLE_COLLECTION,
            config.RECRUITER_PROFILE_COLLECTION,
        ],
        "endpoints": {
            "main": ["/rejectionFeedbackObservation", "/contestAnalytics", "/analysis/rejections/{contestId}"],
            "debug": [
                "/debug-contest-check/{contestId}",
                "/debug-rejected/{contestId}",
                "/debug-contest-data/{contestId}",
            ],
            "health": "/health",
        },
    }
