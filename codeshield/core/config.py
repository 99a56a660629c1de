"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    GEMINI_API_KEY       — Google Gemini API key (default provider)
    GROQ_API_KEY         — Groq API key (OpenAI-compatible)
    OPENROUTER_API_KEY   — OpenRouter API key (OpenAI-compatible)
    LLM_PROVIDER         — Preferred provider name (default: gemini)
    LLM_TIMEOUT_SECONDS  — Per-call HTTP timeout (default: 30)
    LLM_TEMPERATURE      — Sampling temperature (default: 0.3)
    MAX_CODE_LENGTH      — Largest snippet accepted, in characters (default: 50000)
    CORS_ALLOW_ORIGINS   — Comma-separated origins (default: *)
    LOG_LEVEL            — Root log level name (default: INFO)
    LOG_DIR              — Directory for daily log files; empty disables them

Provider Selection:
    Only one provider is called per request. LLM_PROVIDER is used when its
    key is set, otherwise the first provider with a key. No key at all means
    the service answers 500 "AI service not configured".
"""
import os
from dotenv import load_dotenv

load_dotenv()

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "gemini").strip().lower()

LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", 30))
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", 0.3))

# Request limits
MAX_CODE_LENGTH = int(os.getenv("MAX_CODE_LENGTH", 50000))

# CORS
CORS_ALLOW_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR", "logs")
