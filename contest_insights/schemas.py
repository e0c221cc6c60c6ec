from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

EXAMPLE_CONTEST_ID = "64f1c2a9e3b4d5f6a7b8c9d0"
CONTEST_REQUEST_EXAMPLE = {"contestId": EXAMPLE_CONTEST_ID}


class ContestRequest(BaseModel):
    # Any so that non-string ids reach our own 400 instead of a 422
    contestId: Optional[Any] = Field(None, description="24-character hex contest ObjectId")

    class Config:
        json_schema_extra = {"example": CONTEST_REQUEST_EXAMPLE}


class ReasonTally(BaseModel):
    reason: str = Field(..., example="Lacks required skills")
    count: int = Field(..., example=3)
    percentage: str = Field(..., example="60.0")


class RecruiterStat(BaseModel):
    recruiterName: str
    profilesSubmitted: int
    profilesShortlisted: int
    profilesL1: int
    submissionRatio: str = Field(..., example="25.00%")


class FunnelStats(BaseModel):
    totalSubmittedProfiles: int = 0
    totalApplied: int = 0
    totalShortlisted: int = 0
    totalL1: int = 0
    totalL2: int = 0
    totalL3: int = 0
    totalHR: int = 0
    totalOfferSent: int = 0


class RejectionFeedbackResponse(BaseModel):
    success: bool = True
    contestId: str
    totalRejected: int
    rejectionBreakdown: List[ReasonTally]
    aiAnalysis: Dict[str, Any]
    generatedAt: str


class NoRejectionsResponse(BaseModel):
    success: bool = True
    contestId: str
    message: str
    totalRejected: int = 0
    aiAnalysis: Dict[str, Any]


class RejectionStatsResponse(BaseModel):
    success: bool = True
    totalCandidatesParticipated: int
    rejectionTotalCount: int
    primarySkills: int
    experienceYears: int
    expectedCTC: int
    # remainder after the three pattern buckets; negative when reasons match several
    recruiterRatingComments: int


class RawDataSummary(BaseModel):
    lifecycleEvents: int
    recruitersCount: int
    totalCandidates: int


class ContestAnalyticsResponse(BaseModel):
    success: bool = True
    status: int = 200
    contestId: str
    aiAnalysis: Dict[str, Any]
    rawData: RawDataSummary
    generatedAt: str


class FailureResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[str] = None
    aiAnalysis: Optional[Dict[str, Any]] = None
