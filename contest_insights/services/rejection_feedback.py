# contest_insights/services/rejection_feedback.py

import json
import asyncio
import datetime
import logging
from typing import Union

from bson import ObjectId
from fastapi.encoders import jsonable_encoder

from contest_insights.schemas import NoRejectionsResponse, RejectionFeedbackResponse
from contest_insights.services.aggregator import tally_reasons
from contest_insights.services.assembler import iso_timestamp
from contest_insights.services.classifier import extract_rejection_reason
from contest_insights.services.narrative import NarrativeGenerator
from contest_insights.services.prompts import (
    NO_REJECTIONS_NARRATIVE,
    REJECTION_FALLBACKS,
    build_rejection_prompt,
)
from contest_insights.services.repository import ContestNotFoundError, ContestRepository

logger = logging.getLogger(__name__)

TOP_REASONS_IN_PROMPT = 5

# dates as ISO-8601 UTC with a trailing Z, ObjectIds as hex
SCORE_ENCODERS = {datetime.datetime: iso_timestamp, ObjectId: str}


class RejectionFeedbackService:
    def __init__(self, repository: ContestRepository, narrator: NarrativeGenerator):
        self.repository = repository
        self.narrator = narrator

    async def run(self, contest_id: str) -> Union[RejectionFeedbackResponse, NoRejectionsResponse]:
        # 1) contest must exist before anything else is queried
        contest = await asyncio.to_thread(self.repository.find_contest, contest_id)
        if not contest:
            logger.info("Contest not found with this ID: %s", contest_id)
            raise ContestNotFoundError("Contest not found with this ID")

        # 2) empStatus breakdown, logged for diagnosis only
        logger.debug("Contest found, checking jobseekerDetails...")
        await asyncio.to_thread(self.repository.status_breakdown, contest_id)

        # 3) rejected entries, exact "Rejected" match
        rejected = await asyncio.to_thread(self.repository.rejected_entries, contest_id)
        if not rejected:
            return NoRejectionsResponse(
                contestId=contest_id,
                message="No rejected candidates found for this contest",
                aiAnalysis=dict(NO_REJECTIONS_NARRATIVE),
            )

        logger.debug("Sample profile structure: %r", rejected[0])
        reasons = []
        for index, profile in enumerate(rejected, start=1):
            reason = extract_rejection_reason(profile)
            logger.debug("Profile %d - Found rejection reason: %s", index, reason)
            reasons.append(reason)
        breakdown = tally_reasons(reasons)

        scores = [(profile.get("jobseekerDetails") or {}).get("scores") for profile in rejected]
        scores_json = json.dumps(
            jsonable_encoder(scores, custom_encoder=SCORE_ENCODERS),
            separators=(",", ":"),
            ensure_ascii=False,
        )

        # 4) narrative; completion errors fail the whole request
        prompt = build_rejection_prompt(
            contest_id=contest_id,
            total_rejected=len(rejected),
            top_reasons=breakdown[:TOP_REASONS_IN_PROMPT],
            scores_json=scores_json,
        )
        narrative = await self.narrator.generate(prompt, REJECTION_FALLBACKS)

        return RejectionFeedbackResponse(
            contestId=contest_id,
            totalRejected=len(rejected),
            rejectionBreakdown=breakdown,
            aiAnalysis=narrative,
            generatedAt=iso_timestamp(),
        )
