"""
Failure Reasons
===============
Standardised constants for why an analysis request could not be completed.

Each reason maps to an HTTP status and a calm, retryable message. The API
layer turns them into HTTPException responses; nothing else needs to know
the status codes.
"""


# ---------------------------------------------------------------------------
# Failure Reason Constants
# ---------------------------------------------------------------------------
INVALID_INPUT = "INVALID_INPUT"
CODE_TOO_LARGE = "CODE_TOO_LARGE"
NOT_CONFIGURED = "NOT_CONFIGURED"
RATE_LIMITED = "RATE_LIMITED"
CREDITS_EXHAUSTED = "CREDITS_EXHAUSTED"
UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
EMPTY_RESPONSE = "EMPTY_RESPONSE"
UNPARSEABLE_RESPONSE = "UNPARSEABLE_RESPONSE"


# ---------------------------------------------------------------------------
# HTTP Mapping
# ---------------------------------------------------------------------------
STATUS_CODES = {
    INVALID_INPUT: 400,
    CODE_TOO_LARGE: 400,
    NOT_CONFIGURED: 500,
    RATE_LIMITED: 429,
    CREDITS_EXHAUSTED: 402,
    UPSTREAM_UNAVAILABLE: 502,
    EMPTY_RESPONSE: 502,
    UNPARSEABLE_RESPONSE: 502,
}

MESSAGES = {
    INVALID_INPUT: "Code is required.",
    CODE_TOO_LARGE: "Code is too long to analyze. Please submit a smaller snippet.",
    NOT_CONFIGURED: "AI service not configured.",
    RATE_LIMITED: "Rate limit exceeded. Please try again in a moment.",
    CREDITS_EXHAUSTED: "AI service credits exhausted.",
    UPSTREAM_UNAVAILABLE: "Failed to analyze code. Please try again.",
    EMPTY_RESPONSE: "No analysis received. Please try again.",
    UNPARSEABLE_RESPONSE: "Failed to parse analysis results. Please try again.",
}


def get_status_code(reason: str) -> int:
    """
    Map a failure reason to its HTTP status.

    Parameters
    ----------
    reason : str
        One of the failure reason constants.

    Returns
    -------
    int
        HTTP status code; unknown reasons map to 500.
    """
    return STATUS_CODES.get(reason, 500)


def get_message(reason: str) -> str:
    return MESSAGES.get(reason, MESSAGES[UPSTREAM_UNAVAILABLE])


def reason_for_upstream_status(status_code: int | None) -> str:
    """Classify an upstream provider HTTP status into a failure reason."""
    if status_code == 429:
        return RATE_LIMITED
    if status_code == 402:
        return CREDITS_EXHAUSTED
    return UPSTREAM_UNAVAILABLE
