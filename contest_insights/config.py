# contest_insights/config.py

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

MONGODB_URI = os.getenv("MONGODB_URI")
DB_NAME = os.getenv("DB_NAME", "Marketplace-ifin")

PROFILES_COLLECTION = "recruiterAddProfiles"
LIFECYCLE_COLLECTION = "contestLifeCycle"
RECRUITER_PROFILE_COLLECTION = "recruiterProfile"

# Mistral exposes an OpenAI-compatible chat completions API
MISTRAL_API_KEY = os.getenv("MISTRAL_API_KEY")
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://api.mistral.ai/v1")
LLM_MODEL = os.getenv("LLM_MODEL", "mistral-small")
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "800"))
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.4"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
