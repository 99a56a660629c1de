"""
LLM Router
==========
Decides which LLM provider serves an analysis request.

Routing Strategy:
    1. Use the preferred provider (LLM_PROVIDER) when its API key is set
    2. Otherwise use the first provider, in table order, that has a key
    3. No key anywhere → None (the API answers "AI service not configured")

Each request is served by exactly one provider. There is no retry and no
switching to another provider after a failure.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from codeshield.core.config import (
    GEMINI_API_KEY, GROQ_API_KEY, OPENROUTER_API_KEY,
    LLM_PROVIDER, LLM_TIMEOUT_SECONDS, LLM_TEMPERATURE,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Provider Configuration
# ---------------------------------------------------------------------------
@dataclass
class ProviderConfig:
    """Configuration for a single LLM provider."""
    name: str
    api_key: str
    base_url: str
    model: str
    timeout_seconds: float = 30.0
    temperature: float = 0.3

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


def default_providers() -> list[ProviderConfig]:
    """Build provider configs from the current environment settings."""
    return [
        ProviderConfig(
            name="gemini",
            api_key=GEMINI_API_KEY or "",
            base_url="https://generativelanguage.googleapis.com/v1beta",
            model="gemini-2.5-flash",
            timeout_seconds=LLM_TIMEOUT_SECONDS,
            temperature=LLM_TEMPERATURE,
        ),
        ProviderConfig(
            name="groq",
            api_key=GROQ_API_KEY or "",
            base_url="https://api.groq.com/openai/v1",
            model="llama-3.3-70b-versatile",
            timeout_seconds=LLM_TIMEOUT_SECONDS,
            temperature=LLM_TEMPERATURE,
        ),
        ProviderConfig(
            name="openrouter",
            api_key=OPENROUTER_API_KEY or "",
            base_url="https://openrouter.ai/api/v1",
            model="google/gemini-2.5-flash",
            timeout_seconds=LLM_TIMEOUT_SECONDS,
            temperature=LLM_TEMPERATURE,
        ),
    ]


# ---------------------------------------------------------------------------
# LLM Router
# ---------------------------------------------------------------------------
class LLMRouter:
    """
    Picks the provider for a request.

    Usage:
        router = LLMRouter()
        config = router.get_provider()
        if config is None:
            ...  # not configured
    """

    def __init__(
        self,
        providers: Optional[list[ProviderConfig]] = None,
        preferred: str = LLM_PROVIDER,
    ) -> None:
        self._providers = providers if providers is not None else default_providers()
        self._preferred = preferred

    def get_provider(self) -> Optional[ProviderConfig]:
        """
        Get the provider to call.

        Returns
        -------
        ProviderConfig or None
            The preferred provider when configured, else the first configured
            one, else None.
        """
        configured = [p for p in self._providers if p.is_configured]
        for provider in configured:
            if provider.name == self._preferred:
                logger.debug("Selected preferred provider: %s", provider.name)
                return provider
        if configured:
            logger.info(
                "Preferred provider %r not configured, using %s",
                self._preferred, configured[0].name,
            )
            return configured[0]
        logger.error("No LLM provider API key configured")
        return None
