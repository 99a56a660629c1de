"""
POST /api/analyze-code
======================
Security review of a single code snippet.

Flow:
    validate input ──> pick provider ──> call model ──> parse JSON
        ──> assemble (mismatch reconciliation + fix synthesis) ──> respond

Every failure before assembly maps to a failure reason and is raised as an
HTTPException with a calm, retryable message. Once the model's JSON has been
parsed, the request always succeeds.
"""
import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, field_validator

from codeshield.core.config import MAX_CODE_LENGTH
from codeshield.llm.client import AnalysisPayloadError, LLMClient, parse_analysis_payload
from codeshield.llm.prompts import SYSTEM_PROMPT, build_user_prompt
from codeshield.llm.router import LLMRouter
from codeshield.models.analysis_result import AnalysisResult
from codeshield.services.result_assembler import assemble
from codeshield.utils import failure_reasons

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Analysis"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------
class AnalyzeRequest(BaseModel):
    # Untyped so a non-string "code" gets the 400 below instead of a 422
    code: Any = None
    language: Optional[Any] = None

    @field_validator("language")
    @classmethod
    def language_as_text(cls, v: Any) -> Optional[str]:
        if not isinstance(v, str) or not v.strip():
            return None
        return v.strip()


class AnalyzeResponse(BaseModel):
    analysis: AnalysisResult


def _fail(reason: str) -> HTTPException:
    return HTTPException(
        status_code=failure_reasons.get_status_code(reason),
        detail=failure_reasons.get_message(reason),
    )


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------
@router.post("/analyze-code", response_model=AnalyzeResponse, response_model_by_alias=True)
async def analyze_code(request: AnalyzeRequest):
    """
    Analyze a snippet for security issues and return the assembled result.
    """
    code = request.code
    if not isinstance(code, str) or not code.strip():
        raise _fail(failure_reasons.INVALID_INPUT)
    if len(code) > MAX_CODE_LENGTH:
        logger.info("[API] Rejected snippet of %d chars (limit %d)", len(code), MAX_CODE_LENGTH)
        raise _fail(failure_reasons.CODE_TOO_LARGE)

    provider = LLMRouter().get_provider()
    if provider is None:
        raise _fail(failure_reasons.NOT_CONFIGURED)

    logger.info(
        "[API] Analysis request: %d chars, language=%s, provider=%s",
        len(code), request.language, provider.name,
    )

    client = LLMClient()
    try:
        response = await client.call(
            build_user_prompt(code, request.language), SYSTEM_PROMPT, provider,
        )
    finally:
        await client.close()

    if not response.success:
        reason = failure_reasons.reason_for_upstream_status(response.status_code)
        logger.error("[API] Model call failed (%s): %s", provider.name, response.error)
        raise _fail(reason)

    if not response.content.strip():
        logger.error("[API] Empty response from %s", provider.name)
        raise _fail(failure_reasons.EMPTY_RESPONSE)

    try:
        payload = parse_analysis_payload(response.content)
    except AnalysisPayloadError as e:
        logger.error("[API] Could not parse model response: %s", e)
        raise _fail(failure_reasons.UNPARSEABLE_RESPONSE) from e

    analysis = assemble(payload, code, request.language)
    logger.info(
        "[API] Analysis complete: %d issue(s), fix=%s, mismatch=%s",
        len(analysis.issues),
        analysis.suggested_fix is not None,
        analysis.language_mismatch is not None,
    )
    return AnalyzeResponse(analysis=analysis)
