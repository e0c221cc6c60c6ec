# contest_insights/services/rejection_stats.py

import asyncio
import logging

from contest_insights.schemas import RejectionStatsResponse
from contest_insights.services.classifier import bucket_by_pattern
from contest_insights.services.repository import ContestNotFoundError, ContestRepository

logger = logging.getLogger(__name__)


class RejectionStatsService:
    """Pattern-bucketed rejection counts; no narrative."""

    def __init__(self, repository: ContestRepository):
        self.repository = repository

    async def run(self, contest_id: str) -> RejectionStatsResponse:
        contest = await asyncio.to_thread(self.repository.find_contest, contest_id)
        if not contest:
            raise ContestNotFoundError("Contest not found.")

        # participants are counted on the first matching document only
        details = contest.get("jobseekerDetails")
        participants = len(details) if isinstance(details, list) else 0

        reasons = await asyncio.to_thread(self.repository.rejected_reasons, contest_id)
        breakdown = bucket_by_pattern(reasons)
        logger.debug("Rejection buckets for %s: %s", contest_id, breakdown)

        return RejectionStatsResponse(
            totalCandidatesParticipated=participants,
            rejectionTotalCount=breakdown.total,
            primarySkills=breakdown.skills,
            experienceYears=breakdown.experience,
            expectedCTC=breakdown.compensation,
            recruiterRatingComments=breakdown.uncategorized,
        )
