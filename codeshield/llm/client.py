"""
LLM Client
==========
Asynchronous client wrapper for the analysis model.
Supports Gemini (native REST) and OpenAI-compatible providers (Groq, OpenRouter).

Failure Handling:
    - Transport, HTTP status and unreadable-body failures never raise out
      of ``call``. They come back as ``LLMResponse(success=False)``
      carrying the upstream status code so the API layer can choose
      429 / 402 / 502.
    - Reply text that is not a string is treated as empty.
    - ``parse_analysis_payload`` is strict: non-JSON or non-object content
      raises ``AnalysisPayloadError``. Missing or malformed fields inside a
      valid object are the result assembler's concern, not this module's.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from codeshield.llm.router import ProviderConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# LLM Response
# ---------------------------------------------------------------------------
@dataclass
class LLMResponse:
    """Raw outcome of one provider call."""
    content: str
    provider_name: str
    success: bool = True
    error: str = ""
    status_code: Optional[int] = None


class AnalysisPayloadError(ValueError):
    """The model's reply could not be read as a JSON object."""


# ---------------------------------------------------------------------------
# Response Parsing
# ---------------------------------------------------------------------------
def strip_code_fences(raw: str) -> str:
    """Remove a surrounding ```json ... ``` (or bare ```) fence, if present."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        first_newline = cleaned.find("\n")
        if first_newline != -1:
            cleaned = cleaned[first_newline + 1:]
        else:
            cleaned = cleaned[3:]
        if cleaned.rstrip().endswith("```"):
            cleaned = cleaned.rstrip()[:-3].rstrip()
    return cleaned.strip()


def parse_analysis_payload(raw: str) -> Dict[str, Any]:
    """
    Parse the model's analysis JSON.

    Parameters
    ----------
    raw : str
        Text content returned by the model, optionally fenced.

    Returns
    -------
    dict
        The decoded JSON object.

    Raises
    ------
    AnalysisPayloadError
        If the content is not valid JSON or not a JSON object.
    """
    cleaned = strip_code_fences(raw or "")
    try:
        data = json.loads(cleaned)
    except (json.JSONDecodeError, ValueError) as e:
        raise AnalysisPayloadError(f"Response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise AnalysisPayloadError(f"Expected JSON object, got {type(data).__name__}")
    return data


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


# ---------------------------------------------------------------------------
# LLM Client
# ---------------------------------------------------------------------------
class LLMClient:
    """
    Async HTTP client for calling LLM providers.

    Usage:
        client = LLMClient()
        response = await client.call(user_prompt, SYSTEM_PROMPT, config)
        await client.close()
    """

    def __init__(self) -> None:
        self._http: Optional[httpx.AsyncClient] = None

    async def _get_http(self, timeout_seconds: float) -> httpx.AsyncClient:
        """Lazy-initialise the HTTP client."""
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))
        return self._http

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http and not self._http.is_closed:
            await self._http.aclose()
            self._http = None

    async def call(
        self,
        user_prompt: str,
        system_prompt: str,
        provider: ProviderConfig,
    ) -> LLMResponse:
        """
        Send one prompt to the given provider.

        Parameters
        ----------
        user_prompt : str
            The snippet-bearing user prompt.
        system_prompt : str
            The fixed analysis instructions.
        provider : ProviderConfig
            Provider configuration.

        Returns
        -------
        LLMResponse
            ``success=False`` with ``status_code`` set on HTTP errors, or
            with ``status_code=None`` on timeouts, transport errors and
            unreadable response bodies.
        """
        try:
            if provider.name == "gemini":
                content = await self._call_gemini(user_prompt, system_prompt, provider)
            else:
                content = await self._call_openai_compatible(user_prompt, system_prompt, provider)
            return LLMResponse(content=content, provider_name=provider.name)

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("Provider %s: HTTP %d", provider.name, status)
            return LLMResponse(
                content="", provider_name=provider.name, success=False,
                error=f"HTTP {status}", status_code=status,
            )
        except httpx.TimeoutException:
            logger.warning("Provider %s: timeout after %.0fs", provider.name, provider.timeout_seconds)
            return LLMResponse(content="", provider_name=provider.name, success=False, error="timeout")
        except httpx.HTTPError as e:
            logger.warning("Provider %s: %s", provider.name, e)
            return LLMResponse(content="", provider_name=provider.name, success=False, error=str(e))
        except ValueError as e:
            # 200 with a body that is not JSON (gateway or proxy error page)
            logger.warning("Provider %s: unreadable response body: %s", provider.name, e)
            return LLMResponse(
                content="", provider_name=provider.name, success=False, error="invalid response body",
            )

    async def _call_gemini(
        self,
        user_prompt: str,
        system_prompt: str,
        provider: ProviderConfig,
    ) -> str:
        """Call Gemini REST API."""
        http = await self._get_http(provider.timeout_seconds)
        url = f"{provider.base_url}/models/{provider.model}:generateContent"
        payload = {
            "system_instruction": {
                "parts": [{"text": system_prompt}]
            },
            "contents": [
                {"role": "user", "parts": [{"text": user_prompt}]}
            ],
            "generationConfig": {
                "temperature": provider.temperature,
                "responseMimeType": "application/json",
            },
        }
        resp = await http.post(url, json=payload, headers={"x-goog-api-key": provider.api_key})
        resp.raise_for_status()
        data = resp.json()

        try:
            candidates = data.get("candidates", [])
            if candidates:
                parts = candidates[0].get("content", {}).get("parts", [])
                if parts:
                    return _as_text(parts[0].get("text"))
        except (IndexError, KeyError, TypeError, AttributeError):
            pass
        return ""

    async def _call_openai_compatible(
        self,
        user_prompt: str,
        system_prompt: str,
        provider: ProviderConfig,
    ) -> str:
        """Call OpenAI-compatible API (Groq, OpenRouter)."""
        http = await self._get_http(provider.timeout_seconds)
        url = f"{provider.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {provider.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": provider.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": provider.temperature,
        }
        resp = await http.post(url, json=payload, headers=headers)
        resp.raise_for_status()
        data = resp.json()

        try:
            choices = data.get("choices", [])
            if choices:
                return _as_text(choices[0].get("message", {}).get("content"))
        except (IndexError, KeyError, TypeError, AttributeError):
            pass
        return ""
