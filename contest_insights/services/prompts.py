# contest_insights/services/prompts.py

from typing import Any, Dict, List, NamedTuple

from contest_insights.schemas import FunnelStats, ReasonTally, RecruiterStat


class NarrativeFallbacks(NamedTuple):
    # used when a {...} span was found but still failed to parse
    malformed: Dict[str, Any]
    # used when the reply holds no {...} span at all
    missing: Dict[str, Any]


# -------------------------------
# Rejection feedback
# -------------------------------
NO_REJECTIONS_NARRATIVE = {
    "observation": "No rejected candidates were found for this contest, indicating either successful candidate selection or insufficient data for analysis. This could suggest effective initial screening processes or a limited candidate pool that met all requirements.",
    "recommendedAction": "Continue monitoring future contests for rejection patterns and maintain current screening standards while expanding candidate sourcing to increase applicant diversity and selection options.",
}

REJECTION_FALLBACKS = NarrativeFallbacks(
    malformed={
        "observation": "Unable to parse AI analysis response due to formatting issues. The rejection analysis shows patterns that require manual review to identify specific improvement areas and understand the underlying causes affecting candidate selection processes.",
        "recommendedAction": "Please retry the analysis or manually review the rejection data to implement targeted improvements in the recruitment process, focusing on systematic evaluation of rejection patterns and candidate feedback mechanisms.",
    },
    missing={
        "observation": "AI response could not be parsed into the expected JSON format. The rejection data suggests systematic issues that need detailed analysis to understand root causes and develop comprehensive improvement strategies for the recruitment workflow.",
        "recommendedAction": "Contact technical support to resolve AI parsing issues and manually analyze rejection patterns to implement immediate process improvements while ensuring data integrity and analysis accuracy.",
    },
)

REJECTION_ERROR_NARRATIVE = {
    "observation": "An error occurred during the rejection analysis process, preventing comprehensive insights generation. This may indicate data connectivity issues, database access problems, or service interruptions that need immediate technical attention to restore analytical capabilities.",
    "recommendedAction": "Check system connectivity, verify database access permissions, ensure all required services are operational, and review error logs before retrying the rejection analysis process to maintain data-driven recruitment insights.",
}

MISSING_ID_NARRATIVE = {
    "observation": "Contest ID parameter is missing from the request, which is essential for performing rejection analysis and accessing candidate data. This prevents the system from retrieving specific contest information and generating meaningful feedback insights.",
    "recommendedAction": "Ensure the request includes a valid contestId parameter and verify the request format matches the API specification. Implement proper input validation to prevent similar issues in future requests.",
}

INVALID_ID_NARRATIVE = {
    "observation": "The provided Contest ID does not match the expected MongoDB ObjectId format, indicating potential data entry errors or system integration issues that prevent proper data retrieval and analysis processing.",
    "recommendedAction": "Validate the Contest ID format using MongoDB ObjectId standards and ensure proper data validation is implemented at the input level to prevent similar formatting issues and maintain data integrity.",
}


def build_rejection_prompt(
    contest_id: str,
    total_rejected: int,
    top_reasons: List[ReasonTally],
    scores_json: str,
) -> str:
    reasons_text = "\n".join(
        f"{item.reason}: {item.count} candidates ({item.percentage}%)" for item in top_reasons
    )
    return f"""
You are an expert HR analytics consultant. Analyze the following contest rejection data and provide comprehensive insights with actionable recommendations.

CONTEST REJECTION ANALYSIS:
Contest ID: {contest_id}
Total Rejected Candidates: {total_rejected}

TOP REJECTION REASONS:
{reasons_text}

SCORES:
{scores_json}

REQUIREMENTS:
Provide analysis in this EXACT JSON format only, no additional text:

{{
    "observation": "[Detailed analysis of rejection patterns with specific percentages, trends, and implications for the hiring process, Don't give the response in points  - MINIMUM 60-80 words]",
    "recommendedAction": "[Comprehensive, actionable recommendations with specific steps, timelines, and implementation strategies, Don't give the response in points  - MINIMUM 40-50 words]"
}}

OBSERVATION REQUIREMENTS (60-80 words minimum):
- Include specific percentage breakdowns and statistical insights
- Analyze patterns and trends in the rejection data
- Reference score analysis if available
- Discuss implications for recruitment strategy
- Identify root causes and systemic issues
- Compare against industry standards
- Don't give the response in points

RECOMMENDED ACTION REQUIREMENTS (40-50 words minimum):
- Provide specific, implementable steps
- Suggest tools, technologies, or processes
- Address both immediate fixes and long-term improvements
- Don't give the response in points

Focus on:
1. Most significant rejection reasons and their impact on hiring efficiency
2. Score patterns and correlation with rejection outcomes
3. Skills, experience, qualification, and communication mismatches
4. Systematic improvements to reduce future rejections

Keep analysis data-driven and actionable. Each recommendation should be specific and implementable.
Return ONLY the JSON object, no other text.
"""


# -------------------------------
# Contest analytics
# -------------------------------
_CONTEST_PARSE_FALLBACK = {
    "contest-lifecycle": {
        "summary": "Contest lifecycle analysis completed with stakeholder actions recorded, showing progression through multiple stages with active management.",
        "detailedAnalysis": "Unable to parse AI analysis response due to formatting issues. Contest shows activity from multiple stakeholders with various actions recorded.",
        "currentStatus": "Analysis parsing failed - manual review required",
    },
    "candidate-funnel-analysis": {
        "summary": "Candidate funnel shows progression through hiring stages with conversion tracking across multiple interview levels.",
        "detailedAnalysis": "Funnel analysis indicates candidate flow from application to offer stage with measurable conversion rates at each step.",
    },
    "recruiter-performance": {
        "summary": "Recruiter performance varies across submissions with different efficiency ratios and contribution patterns observed.",
        "detailedAnalysis": "Individual recruiter analysis shows varying submission quality and conversion rates requiring targeted performance improvement.",
    },
    "overall-ai-powered-insights-and-recommendations": {
        "summary": "Contest shows active management with stakeholder involvement and candidate progression through structured hiring funnel.",
        "recommendations": "Implement standardized performance metrics, optimize funnel conversion rates, and enhance recruiter training programs.",
    },
}

CONTEST_FALLBACKS = NarrativeFallbacks(
    malformed=_CONTEST_PARSE_FALLBACK,
    missing=_CONTEST_PARSE_FALLBACK,
)

CONTEST_ERROR_NARRATIVE = {
    "contest-lifecycle": {
        "summary": "Contest lifecycle analysis could not be completed because an error interrupted data retrieval or narrative generation.",
        "detailedAnalysis": "The analytics pipeline stopped before lifecycle insights were produced. Database connectivity or the narrative service may be unavailable.",
        "currentStatus": "Analysis failed - retry or review service logs",
    },
    "candidate-funnel-analysis": {
        "summary": "Candidate funnel analysis is unavailable for this request due to a processing error.",
        "detailedAnalysis": "Funnel conversion figures were not generated. Retry the request once the underlying services are confirmed operational.",
    },
    "recruiter-performance": {
        "summary": "Recruiter performance analysis is unavailable for this request due to a processing error.",
        "detailedAnalysis": "Recruiter ratios were not generated. Verify database access and narrative service availability before retrying.",
    },
    "overall-ai-powered-insights-and-recommendations": {
        "summary": "Contest analytics could not be generated because a dependent service failed during processing.",
        "recommendations": "Check database connectivity, confirm the narrative service is reachable, review error logs and retry the contest analytics request.",
    },
}


MISSING_FIELD = "N/A"


def _shown(value: Any) -> str:
    if value is None or value == "":
        return MISSING_FIELD
    return str(value)


def lifecycle_line(date_text: str, action: Any, user_name: Any, user_role: Any, comment: Any) -> str:
    return (
        f"{date_text}: {_shown(action)} by {_shown(user_name)} "
        f"({_shown(user_role)}) - {_shown(comment)}"
    )


def recruiter_line(stat: RecruiterStat) -> str:
    return (
        f"{stat.recruiterName}: {stat.profilesSubmitted} submitted, "
        f"{stat.profilesShortlisted} shortlisted, {stat.profilesL1} L1, ratio {stat.submissionRatio}"
    )


def funnel_line(stats: FunnelStats) -> str:
    return (
        f"Total: {stats.totalSubmittedProfiles} submitted, {stats.totalShortlisted} shortlisted, "
        f"{stats.totalL1} L1, {stats.totalL2} L2, {stats.totalL3} L3, {stats.totalHR} HR, "
        f"{stats.totalOfferSent} offers sent"
    )


def build_contest_prompt(
    contest_id: str,
    lifecycle_text: str,
    recruiter_summary: str,
    funnel_summary: str,
) -> str:
    return f"""
You are an expert contest analytics consultant. Analyze the comprehensive contest data and provide detailed insights across all dimensions.

CONTEST COMPREHENSIVE ANALYSIS:
Contest ID: {contest_id}

LIFECYCLE DATA:
{lifecycle_text}

RECRUITER PERFORMANCE DATA:
{recruiter_summary}

CANDIDATE FUNNEL DATA:
{funnel_summary}

REQUIREMENTS:
Provide analysis in this EXACT JSON format only, no additional text:

{{
    "contest-lifecycle": {{
        "summary": "[30-40 words summary of contest lifecycle progression and current status]",
        "detailedAnalysis": "[80-100 words detailed analysis of lifecycle patterns, stakeholder involvement, and decision points]",
        "currentStatus": "[15-20 words current state based on latest action]"
    }},
    "candidate-funnel-analysis": {{
        "summary": "[30-40 words summary of candidate progression through hiring stages]",
        "detailedAnalysis": "[80-100 words analysis of conversion rates, bottlenecks, and funnel efficiency]"
    }},
    "recruiter-performance": {{
        "summary": "[30-40 words summary of recruiter effectiveness and submission quality]",
        "detailedAnalysis": "[80-100 words analysis of individual recruiter performance, ratios, and contribution patterns]"
    }},
    "overall-ai-powered-insights-and-recommendations": {{
        "summary": "[40-50 words comprehensive summary combining all aspects]",
        "recommendations": "[60-80 words specific actionable recommendations for improvement across all areas]"
    }}
}}

Focus on:
- Lifecycle progression and current contest status
- Candidate conversion rates and funnel optimization
- Recruiter performance differences and efficiency
- Integrated recommendations for overall improvement
- Don't show contest id in the summary or any where

Return ONLY the JSON object, no other text.
"""
