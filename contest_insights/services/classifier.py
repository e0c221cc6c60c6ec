# contest_insights/services/classifier.py

import re
import logging
from typing import Any, Callable, List, Mapping, NamedTuple, Optional, Pattern, Sequence, Tuple

logger = logging.getLogger(__name__)

UNKNOWN_REASON = "Unknown"
PLACEHOLDER_REASONS = {"undefined"}

ReasonSource = Callable[[Mapping[str, Any]], Any]


def field_at(*path: str) -> ReasonSource:
    """Accessor for a nested key path; any missing or non-dict hop yields None."""
    def get(record: Mapping[str, Any]) -> Any:
        value: Any = record
        for key in path:
            if not isinstance(value, Mapping):
                return None
            value = value.get(key)
        return value
    return get


# Checked in order, first usable value wins
REASON_SOURCES: List[ReasonSource] = [
    field_at("jobseekerDetails", "remarks", "rejectedReason"),
    field_at("jobseekerDetails", "rejectedReason"),
    field_at("jobseekerDetails", "rejectionReason"),
    field_at("jobseekerDetails", "remarks", "reason"),
    field_at("jobseekerDetails", "reason"),
    field_at("jobseekerDetails", "comments"),
    field_at("jobseekerDetails", "feedback"),
    field_at("rejectedReason"),
    field_at("rejectionReason"),
]

# Matched against jobseekerDetails.rejectedReason only
CATEGORY_PATTERNS: List[Tuple[str, Pattern[str]]] = [
    ("skills", re.compile(r"skill", re.IGNORECASE)),
    ("experience", re.compile(r"experience", re.IGNORECASE)),
    ("compensation", re.compile(r"ctc|salary|budget", re.IGNORECASE)),
]


class CategoryBreakdown(NamedTuple):
    total: int
    skills: int
    experience: int
    compensation: int
    uncategorized: int


def is_usable_reason(value: Any) -> bool:
    return (
        isinstance(value, str)
        and value not in PLACEHOLDER_REASONS
        and value.strip() != ""
    )


def extract_rejection_reason(
    record: Mapping[str, Any],
    sources: Sequence[ReasonSource] = REASON_SOURCES,
) -> str:
    for source in sources:
        value = source(record)
        if is_usable_reason(value):
            return value
    return UNKNOWN_REASON


def _matches(pattern: Pattern[str], reason: Optional[Any]) -> bool:
    return isinstance(reason, str) and pattern.search(reason) is not None


def bucket_by_pattern(reasons: Sequence[Any]) -> CategoryBreakdown:
    """
    Count rejected reasons per category.

    Every category is an independent conditional count, so a reason that hits
    two patterns is counted in both. The uncategorized bucket is whatever is
    left of the total and is not clamped; it goes negative on multi-matches.
    """
    total = len(reasons)
    counts = {
        category: sum(1 for reason in reasons if _matches(pattern, reason))
        for category, pattern in CATEGORY_PATTERNS
    }
    uncategorized = total - sum(counts.values())
    if uncategorized < 0:
        logger.warning(
            "Rejection reasons matched several categories; uncategorized remainder is %d (total=%d, %s)",
            uncategorized, total, counts,
        )
    return CategoryBreakdown(
        total=total,
        skills=counts["skills"],
        experience=counts["experience"],
        compensation=counts["compensation"],
        uncategorized=uncategorized,
    )
