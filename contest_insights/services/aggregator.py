# contest_insights/services/aggregator.py

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from contest_insights.schemas import FunnelStats, ReasonTally, RecruiterStat

# lower-cased empStatus -> FunnelStats field
FUNNEL_STAGES = {
    "shortlisted": "totalShortlisted",
    "l1": "totalL1",
    "l2": "totalL2",
    "l3": "totalL3",
    "hr": "totalHR",
    "offersent": "totalOfferSent",
}


def format_percentage(count: int, total: int, digits: int = 1) -> str:
    # half-up on the float's exact binary value: 1/16 -> "6.3", 1/32 at two digits -> "3.13"
    quantum = Decimal(1).scaleb(-digits)
    if not total:
        return str(Decimal(0).quantize(quantum))
    return str(Decimal(count / total * 100).quantize(quantum, rounding=ROUND_HALF_UP))


def conversion_ratio(converted: int, submitted: int) -> str:
    if submitted <= 0:
        return "0.00%"
    return f"{format_percentage(converted, submitted, digits=2)}%"


def tally_reasons(reasons: Iterable[str]) -> List[ReasonTally]:
    """Count each reason label and sort by count, highest first."""
    counts: Dict[str, int] = {}
    for reason in reasons:
        counts[reason] = counts.get(reason, 0) + 1
    total = sum(counts.values())
    tallies = [
        ReasonTally(reason=reason, count=count, percentage=format_percentage(count, total))
        for reason, count in counts.items()
    ]
    # sorted() is stable: equal counts keep first-seen order
    return sorted(tallies, key=lambda t: t.count, reverse=True)


def _lowered(value: Any) -> str:
    if value is None:
        return ""
    return str(value).lower()


def funnel_counts(entries: Sequence[Mapping[str, Any]]) -> Optional[FunnelStats]:
    if not entries:
        return None
    stats = FunnelStats(totalSubmittedProfiles=len(entries))
    for entry in entries:
        if _lowered(entry.get("status")) == "submitted":
            stats.totalApplied += 1
        field = FUNNEL_STAGES.get(_lowered(entry.get("empStatus")))
        if field:
            setattr(stats, field, getattr(stats, field) + 1)
    return stats


def recruiter_stat(name: str, entries: Sequence[Mapping[str, Any]]) -> RecruiterStat:
    submitted = len(entries)
    shortlisted = sum(1 for e in entries if _lowered(e.get("empStatus")) == "shortlisted")
    l1 = sum(1 for e in entries if _lowered(e.get("empStatus")) == "l1")
    return RecruiterStat(
        recruiterName=name,
        profilesSubmitted=submitted,
        profilesShortlisted=shortlisted,
        profilesL1=l1,
        submissionRatio=conversion_ratio(l1, submitted),
    )
