# contest_insights/deps.py
from functools import lru_cache

from fastapi import Depends, Request
from openai import OpenAI

from contest_insights import config
from contest_insights.services.narrative import NarrativeGenerator
from contest_insights.services.repository import ContestRepository


@lru_cache()
def get_llm_client():
    # one attempt per request, no retries; a missing key surfaces as a 401 on the call
    return OpenAI(
        api_key=config.MISTRAL_API_KEY or "",
        base_url=config.LLM_BASE_URL,
        max_retries=0,
    )


def get_database(request: Request):
    return request.app.state.db


def get_repository(db=Depends(get_database)) -> ContestRepository:
    return ContestRepository(db)


def get_narrator(llm_client=Depends(get_llm_client)) -> NarrativeGenerator:
    return NarrativeGenerator(llm_client)
