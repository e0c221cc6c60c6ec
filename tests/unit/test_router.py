# tests/unit/test_router.py
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from openai import OpenAI

from contest_insights import config
from contest_insights.deps import get_llm_client, get_repository
from contest_insights.main import app
from contest_insights.services.prompts import (
    CONTEST_ERROR_NARRATIVE,
    INVALID_ID_NARRATIVE,
    MISSING_ID_NARRATIVE,
    REJECTION_ERROR_NARRATIVE,
)

client = TestClient(app)


@pytest.fixture
def wire(make_repository, make_llm):
    """Install fake repository/LLM dependencies; returns them for assertions."""
    def install(repo=None, llm=None):
        repo = repo or make_repository()
        llm = llm or make_llm(content="{}")
        app.dependency_overrides[get_repository] = lambda: repo
        app.dependency_overrides[get_llm_client] = lambda: llm
        return repo, llm
    yield install
    app.dependency_overrides.clear()


# -------------------------------
# POST /rejectionFeedbackObservation
# -------------------------------
def test_feedback_missing_contest_id(wire):
    repo, _ = wire()
    resp = client.post("/rejectionFeedbackObservation", json={})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Contest ID is required"
    assert body["aiAnalysis"] == MISSING_ID_NARRATIVE
    assert repo.calls == []


def test_feedback_without_body(wire):
    repo, _ = wire()
    resp = client.post("/rejectionFeedbackObservation")
    assert resp.status_code == 400
    assert repo.calls == []


@pytest.mark.parametrize("bad_id", ["123", "64f1c2a9e3b4d5f6a7b8c9dZ", 12345])
def test_feedback_malformed_contest_id(wire, bad_id):
    repo, llm = wire()
    resp = client.post("/rejectionFeedbackObservation", json={"contestId": bad_id})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Invalid Contest ID format"
    assert body["aiAnalysis"] == INVALID_ID_NARRATIVE
    assert repo.calls == []
    assert llm.requests == []


def test_feedback_not_found(wire, make_repository, contest_id):
    repo, llm = wire(repo=make_repository(contest=None))
    resp = client.post("/rejectionFeedbackObservation", json={"contestId": contest_id})
    assert resp.status_code == 200
    assert resp.json() == {"success": False, "error": "Contest not found with this ID"}
    assert llm.requests == []


def test_feedback_zero_rejected(wire, make_repository, contest_id):
    wire(repo=make_repository(contest={"_id": 1}))
    resp = client.post("/rejectionFeedbackObservation", json={"contestId": contest_id})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["totalRejected"] == 0
    assert "rejectionBreakdown" not in body


def test_feedback_success(wire, make_repository, make_llm, contest_id, rejection_reply):
    rows = [{"_id": 1, "jobseekerDetails": {"empStatus": "Rejected", "rejectedReason": "skills missing"}}]
    wire(repo=make_repository(contest={"_id": 1}, rejected=rows), llm=make_llm(content=rejection_reply))
    resp = client.post("/rejectionFeedbackObservation", json={"contestId": contest_id})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["rejectionBreakdown"] == [{"reason": "skills missing", "count": 1, "percentage": "100.0"}]
    assert set(body["aiAnalysis"]) == {"observation", "recommendedAction"}
    assert body["generatedAt"].endswith("Z")


def test_feedback_upstream_failure(wire, make_repository, contest_id):
    wire(repo=make_repository(error=RuntimeError("connection reset")))
    resp = client.post("/rejectionFeedbackObservation", json={"contestId": contest_id})
    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Failed to generate rejection feedback observation"
    assert body["details"] == "connection reset"
    assert body["aiAnalysis"] == REJECTION_ERROR_NARRATIVE


@pytest.fixture
def unkeyed(monkeypatch, make_repository):
    """Real LLM client dependency with no API key configured."""
    monkeypatch.setattr(config, "MISTRAL_API_KEY", None)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    get_llm_client.cache_clear()
    repo = make_repository()
    app.dependency_overrides[get_repository] = lambda: repo
    yield repo
    app.dependency_overrides.clear()
    get_llm_client.cache_clear()


def test_llm_client_builds_without_api_key(unkeyed):
    assert isinstance(get_llm_client(), OpenAI)


@pytest.mark.parametrize("path, payload, error", [
    ("/rejectionFeedbackObservation", {}, "Contest ID is required"),
    ("/rejectionFeedbackObservation", {"contestId": "bad"}, "Invalid Contest ID format"),
    ("/contestAnalytics", {}, "Contest ID is required"),
    ("/contestAnalytics", {"contestId": "bad"}, "Invalid Contest ID format"),
])
def test_validation_without_api_key(unkeyed, path, payload, error):
    resp = client.post(path, json=payload)
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == error
    assert unkeyed.calls == []


# -------------------------------
# GET /analysis/rejections/{contestId}
# -------------------------------
def test_stats_invalid_id(wire):
    repo, _ = wire()
    resp = client.get("/analysis/rejections/not-an-id")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid Contest ID format."
    assert repo.calls == []


def test_stats_not_found(wire, make_repository, contest_id):
    wire(repo=make_repository(contest=None))
    resp = client.get(f"/analysis/rejections/{contest_id}")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Contest not found."}


def test_stats_report(wire, make_repository, contest_id):
    wire(repo=make_repository(contest={"jobseekerDetails": [{}, {}]}, reasons=["budget", "skill"]))
    resp = client.get(f"/analysis/rejections/{contest_id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["totalCandidatesParticipated"] == 2
    assert body["expectedCTC"] == 1
    assert body["primarySkills"] == 1
    assert body["recruiterRatingComments"] == 0


def test_stats_upstream_failure(wire, make_repository, contest_id):
    wire(repo=make_repository(error=RuntimeError("timeout")))
    resp = client.get(f"/analysis/rejections/{contest_id}")
    assert resp.status_code == 500
    assert resp.json()["details"] == "timeout"


# -------------------------------
# POST /contestAnalytics
# -------------------------------
def test_analytics_validation(wire):
    repo, _ = wire()
    assert client.post("/contestAnalytics", json={}).status_code == 400
    resp = client.post("/contestAnalytics", json={"contestId": "xyz"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Invalid Contest ID format"}
    assert repo.calls == []


def test_analytics_no_data(wire, contest_id):
    wire()
    resp = client.post("/contestAnalytics", json={"contestId": contest_id})
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "No data found for the given contestId"}


def test_analytics_llm_failure(wire, make_repository, make_llm, contest_id):
    wire(
        repo=make_repository(entries=[{"empStatus": "L1"}]),
        llm=make_llm(error=RuntimeError("502 Bad Gateway")),
    )
    resp = client.post("/contestAnalytics", json={"contestId": contest_id})
    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Failed to generate contest analytics"
    assert body["details"] == "502 Bad Gateway"
    assert body["aiAnalysis"] == CONTEST_ERROR_NARRATIVE


def test_analytics_success(wire, make_repository, make_llm, contest_id, contest_reply):
    wire(repo=make_repository(entries=[{"empStatus": "L1"}]), llm=make_llm(content=contest_reply))
    resp = client.post("/contestAnalytics", json={"contestId": contest_id})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == 200
    assert body["rawData"] == {"lifecycleEvents": 0, "recruitersCount": 0, "totalCandidates": 1}
    assert "contest-lifecycle" in body["aiAnalysis"]


# -------------------------------
# Debug & health
# -------------------------------
def test_debug_contest_check(wire, make_repository, contest_id):
    contest = {"_id": ObjectId(), "contestId": ObjectId(contest_id), "jobseekerDetails": [{}, {}, {}]}
    statuses = [{"_id": "Rejected", "count": 2, "samples": ["A", "B"]}, {"_id": "L1", "count": 1, "samples": ["C"]}]
    repo, _ = wire(repo=make_repository(contest=contest, statuses=statuses))

    resp = client.get(f"/debug-contest-check/{contest_id}")

    assert resp.status_code == 200
    body = resp.json()
    assert body["found"] is True
    assert body["totalCandidates"] == 3
    assert body["empStatusBreakdown"] == statuses
    assert body["sampleDocument"]["contestId"] == contest_id
    assert ("status_breakdown", contest_id, True) in repo.calls


def test_debug_contest_check_not_found_and_invalid(wire, contest_id):
    wire()
    body = client.get(f"/debug-contest-check/{contest_id}").json()
    assert body == {"found": False, "message": "Contest not found", "searchedFor": contest_id}
    assert client.get("/debug-contest-check/bad").status_code == 400


def test_debug_rejected_limits_to_two(wire, make_repository, contest_id):
    rows = [{"_id": ObjectId(), "jobseekerDetails": {"empStatus": "Rejected"}} for _ in range(3)]
    wire(repo=make_repository(rejected=rows))
    body = client.get(f"/debug-rejected/{contest_id}").json()
    assert body["count"] == 2
    assert isinstance(body["fullDocuments"][0]["_id"], str)


def test_debug_contest_data(wire, make_repository, contest_id):
    wire(repo=make_repository(entries=[{"empStatus": "HR"}]))
    body = client.get(f"/debug-contest-data/{contest_id}").json()
    assert body["lifecycleEvents"] == 0
    assert body["recruiterCount"] == 0
    assert body["overallStats"]["totalHR"] == 1


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert body["database"] == "Marketplace-ifin"
