# contest_insights/services/contest_analytics.py

import asyncio
import datetime
import logging
import re
from typing import Any, List, NamedTuple, Optional

from contest_insights.schemas import ContestAnalyticsResponse, FunnelStats, RawDataSummary, RecruiterStat
from contest_insights.services.aggregator import funnel_counts, recruiter_stat
from contest_insights.services.assembler import iso_timestamp
from contest_insights.services.narrative import NarrativeGenerator
from contest_insights.services.prompts import (
    CONTEST_FALLBACKS,
    build_contest_prompt,
    funnel_line,
    lifecycle_line,
    recruiter_line,
)
from contest_insights.services.repository import ContestNotFoundError, ContestRepository, LifecycleEvent

logger = logging.getLogger(__name__)


class ContestData(NamedTuple):
    lifecycle: List[LifecycleEvent]
    recruiters: List[RecruiterStat]
    overall: Optional[FunnelStats]

    @property
    def is_empty(self) -> bool:
        return not self.lifecycle and not self.recruiters and self.overall is None


# fractional seconds of any length; fromisoformat before 3.11 takes only 3 or 6 digits
_FRACTION = re.compile(r"\.(\d+)")


def _parse_iso(text: str) -> datetime.datetime:
    text = _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)
    return datetime.datetime.fromisoformat(text.replace("Z", "+00:00"))


def format_event_date(value: Any) -> str:
    # M/D/YYYY, matching what the dashboard renders; numbers are epoch milliseconds, read as UTC
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            value = datetime.datetime.fromtimestamp(value / 1000, tz=datetime.timezone.utc)
        except (OverflowError, OSError, ValueError):
            return "Invalid Date"
    elif isinstance(value, str):
        try:
            value = _parse_iso(value)
        except ValueError:
            return "Invalid Date"
    if isinstance(value, (datetime.datetime, datetime.date)):
        return f"{value.month}/{value.day}/{value.year}"
    return "Invalid Date"


def lifecycle_text(events: List[LifecycleEvent]) -> str:
    if not events:
        return "No lifecycle data available"
    return "; ".join(
        lifecycle_line(format_event_date(e.created_date), e.action, e.user_name, e.user_role, e.comment)
        for e in events
    )


def recruiter_text(stats: List[RecruiterStat]) -> str:
    if not stats:
        return "No recruiter data available"
    return "; ".join(recruiter_line(s) for s in stats)


def funnel_text(overall: Optional[FunnelStats]) -> str:
    if overall is None:
        return "No funnel data available"
    return funnel_line(overall)


class ContestAnalyticsService:
    def __init__(self, repository: ContestRepository, narrator: Optional[NarrativeGenerator] = None):
        self.repository = repository
        self.narrator = narrator

    def recruiter_stats(self, contest_id: str) -> List[RecruiterStat]:
        stats = []
        for doc in self.repository.recruiter_submissions(contest_id):
            name = self.repository.recruiter_name(doc.get("recruiterId"))
            stats.append(recruiter_stat(name, doc.get("jobseekerDetails") or []))
        return stats

    def overall_stats(self, contest_id: str) -> Optional[FunnelStats]:
        return funnel_counts(self.repository.contest_entries(contest_id))

    async def collect(self, contest_id: str) -> ContestData:
        # three independent reads, merged positionally
        lifecycle, recruiters, overall = await asyncio.gather(
            asyncio.to_thread(self.repository.lifecycle_events, contest_id),
            asyncio.to_thread(self.recruiter_stats, contest_id),
            asyncio.to_thread(self.overall_stats, contest_id),
        )
        return ContestData(lifecycle=lifecycle, recruiters=recruiters, overall=overall)

    async def run(self, contest_id: str) -> ContestAnalyticsResponse:
        logger.info("Processing contest analytics for: %s", contest_id)
        data = await self.collect(contest_id)
        if data.is_empty:
            raise ContestNotFoundError("No data found for the given contestId")

        prompt = build_contest_prompt(
            contest_id=contest_id,
            lifecycle_text=lifecycle_text(data.lifecycle),
            recruiter_summary=recruiter_text(data.recruiters),
            funnel_summary=funnel_text(data.overall),
        )
        narrative = await self.narrator.generate(prompt, CONTEST_FALLBACKS)

        return ContestAnalyticsResponse(
            contestId=contest_id,
            aiAnalysis=narrative,
            rawData=RawDataSummary(
                lifecycleEvents=len(data.lifecycle),
                recruitersCount=len(data.recruiters),
                totalCandidates=data.overall.totalSubmittedProfiles if data.overall else 0,
            ),
            generatedAt=iso_timestamp(),
        )
