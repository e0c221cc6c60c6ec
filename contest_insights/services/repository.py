# contest_insights/services/repository.py

import logging
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

from bson import ObjectId
from pymongo import ASCENDING
from pymongo.database import Database

from contest_insights import config

logger = logging.getLogger(__name__)

UNKNOWN_RECRUITER = "Unknown Recruiter"


class ContestNotFoundError(LookupError):
    pass


class LifecycleEvent(NamedTuple):
    action: Optional[str]
    user_name: Optional[str]
    user_role: Optional[str]
    comment: Optional[str]
    created_date: Any


def is_valid_contest_id(value: Any) -> bool:
    # bson accepts 12-byte values too; contest ids only ever arrive as 24-hex strings
    return isinstance(value, str) and ObjectId.is_valid(value)


def status_breakdown_pipeline(contest_oid: ObjectId, with_samples: bool = False) -> List[dict]:
    group: Dict[str, Any] = {
        "_id": "$jobseekerDetails.empStatus",
        "count": {"$sum": 1},
    }
    if with_samples:
        group["samples"] = {"$push": "$jobseekerDetails.firstName"}
    return [
        {"$match": {"contestId": contest_oid}},
        {"$unwind": "$jobseekerDetails"},
        {"$group": group},
    ]


def rejected_entries_pipeline(
    contest_oid: ObjectId,
    statuses: Sequence[str] = ("Rejected",),
    limit: Optional[int] = None,
) -> List[dict]:
    if len(statuses) == 1:
        status_filter: Any = statuses[0]
    else:
        status_filter = {"$in": list(statuses)}
    pipeline: List[dict] = [
        {"$match": {"contestId": contest_oid}},
        {"$unwind": "$jobseekerDetails"},
        {"$match": {"jobseekerDetails.empStatus": status_filter}},
    ]
    if limit is not None:
        pipeline.append({"$limit": limit})
    return pipeline


def contest_entries_pipeline(contest_id: str) -> List[dict]:
    # contestId has been stored as an ObjectId, an extended-JSON {"$oid": ...} and a plain string
    if is_valid_contest_id(contest_id):
        match: Dict[str, Any] = {
            "$or": [
                {"contestId": ObjectId(contest_id)},
                {"contestId.$oid": contest_id},
                {"contestId": contest_id},
            ]
        }
    else:
        match = {"contestId": contest_id}
    return [
        {"$match": match},
        {"$unwind": "$jobseekerDetails"},
        {"$project": {"_id": 0, "jobseekerDetails": 1}},
    ]


class ContestRepository:
    """Read-only queries over the recruiting collections."""

    def __init__(self, db: Database):
        self.db = db
        self.profiles = db[config.PROFILES_COLLECTION]
        self.lifecycle = db[config.LIFECYCLE_COLLECTION]
        self.recruiter_profiles = db[config.RECRUITER_PROFILE_COLLECTION]

    def find_contest(self, contest_id: str) -> Optional[dict]:
        logger.debug("Searching for contestId: %s", contest_id)
        return self.profiles.find_one({"contestId": ObjectId(contest_id)})

    def status_breakdown(self, contest_id: str, with_samples: bool = False) -> List[dict]:
        pipeline = status_breakdown_pipeline(ObjectId(contest_id), with_samples=with_samples)
        rows = list(self.profiles.aggregate(pipeline))
        for row in rows:
            logger.debug("   %s: %d candidates", row.get("_id"), row.get("count", 0))
        return rows

    def rejected_entries(self, contest_id: str, limit: Optional[int] = None) -> List[dict]:
        """
        Unwound profile documents whose empStatus is exactly "Rejected".
        Each row keeps the parent _id/contestId and a single jobseekerDetails entry.
        """
        pipeline = rejected_entries_pipeline(ObjectId(contest_id), limit=limit)
        if limit is None:
            pipeline.append({"$project": {"_id": 1, "contestId": 1, "jobseekerDetails": 1}})
        rows = list(self.profiles.aggregate(pipeline))
        logger.debug("Found %d rejected profiles", len(rows))
        return rows

    def rejected_reasons(self, contest_id: str) -> List[Any]:
        pipeline = rejected_entries_pipeline(
            ObjectId(contest_id), statuses=("rejected", "Rejected")
        )
        pipeline.append({"$project": {"_id": 0, "reason": "$jobseekerDetails.rejectedReason"}})
        rows = list(self.profiles.aggregate(pipeline))
        logger.debug("Fetched %d rejected reasons", len(rows))
        return [row.get("reason") for row in rows]

    def lifecycle_events(self, contest_id: str) -> List[LifecycleEvent]:
        cursor = self.lifecycle.find({"contestId": ObjectId(contest_id)}).sort("createdDate", ASCENDING)
        events = [
            LifecycleEvent(
                action=doc.get("action"),
                user_name=doc.get("userName"),
                user_role=doc.get("userRole"),
                comment=doc.get("comment"),
                created_date=doc.get("createdDate"),
            )
            for doc in cursor
        ]
        logger.debug("Fetched %d lifecycle events", len(events))
        return events

    def recruiter_submissions(self, contest_id: str) -> List[dict]:
        docs = list(self.profiles.find({"contestId": ObjectId(contest_id)}))
        logger.debug("Fetched %d recruiter submission documents", len(docs))
        return docs

    def recruiter_name(self, recruiter_id: Any) -> str:
        if recruiter_id is None:
            return UNKNOWN_RECRUITER
        query_id = recruiter_id
        if not isinstance(recruiter_id, ObjectId) and is_valid_contest_id(recruiter_id):
            query_id = ObjectId(recruiter_id)
        profile = self.recruiter_profiles.find_one(
            {"_id": query_id},
            projection={"basic_details.firstName": 1, "basic_details.lastName": 1},
        )
        if not profile:
            return UNKNOWN_RECRUITER
        basic = profile.get("basic_details") or {}
        return f"{basic.get('firstName') or ''} {basic.get('lastName') or ''}".strip()

    def contest_entries(self, contest_id: str) -> List[dict]:
        rows = list(self.profiles.aggregate(contest_entries_pipeline(contest_id)))
        logger.debug("Fetched %d candidate entries", len(rows))
        return [row.get("jobseekerDetails") or {} for row in rows]
