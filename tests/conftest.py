# tests/conftest.py
import json
from types import SimpleNamespace

import pytest

CONTEST_ID = "64f1c2a9e3b4d5f6a7b8c9d0"


class FakeRepository:
    """In-memory stand-in for ContestRepository; records every call."""

    def __init__(
        self,
        contest=None,
        rejected=(),
        reasons=(),
        statuses=(),
        lifecycle=(),
        submissions=(),
        names=None,
        entries=(),
        error=None,
    ):
        self.contest = contest
        self.rejected = list(rejected)
        self.reasons = list(reasons)
        self.statuses = list(statuses)
        self.lifecycle = list(lifecycle)
        self.submissions = list(submissions)
        self.names = names or {}
        self.entries = list(entries)
        self.error = error
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if self.error is not None:
            raise self.error

    def find_contest(self, contest_id):
        self._record("find_contest", contest_id)
        return self.contest

    def status_breakdown(self, contest_id, with_samples=False):
        self._record("status_breakdown", contest_id, with_samples)
        return self.statuses

    def rejected_entries(self, contest_id, limit=None):
        self._record("rejected_entries", contest_id, limit)
        return self.rejected if limit is None else self.rejected[:limit]

    def rejected_reasons(self, contest_id):
        self._record("rejected_reasons", contest_id)
        return self.reasons

    def lifecycle_events(self, contest_id):
        self._record("lifecycle_events", contest_id)
        return self.lifecycle

    def recruiter_submissions(self, contest_id):
        self._record("recruiter_submissions", contest_id)
        return self.submissions

    def recruiter_name(self, recruiter_id):
        self._record("recruiter_name", recruiter_id)
        return self.names.get(recruiter_id, "Unknown Recruiter")

    def contest_entries(self, contest_id):
        self._record("contest_entries", contest_id)
        return self.entries


def make_llm_client(content=None, error=None):
    """OpenAI-shaped client whose chat.completions.create returns `content` (or raises `error`)."""
    requests = []

    def create(*args, **kwargs):
        requests.append(kwargs)
        if error is not None:
            raise error
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
        )

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    client.requests = requests
    return client


@pytest.fixture
def contest_id():
    return CONTEST_ID


@pytest.fixture
def rejection_reply():
    return json.dumps({
        "observation": "Most rejections cite missing skills.",
        "recommendedAction": "Tighten the skills screen before submission.",
    })


@pytest.fixture
def contest_reply():
    return json.dumps({
        "contest-lifecycle": {"summary": "s", "detailedAnalysis": "d", "currentStatus": "c"},
        "candidate-funnel-analysis": {"summary": "s", "detailedAnalysis": "d"},
        "recruiter-performance": {"summary": "s", "detailedAnalysis": "d"},
        "overall-ai-powered-insights-and-recommendations": {"summary": "s", "recommendations": "r"},
    })


@pytest.fixture
def make_repository():
    return FakeRepository


@pytest.fixture
def make_llm():
    return make_llm_client
