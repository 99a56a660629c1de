"""
Output Formatter
================
THE SINGLE SOURCE OF TRUTH for user-visible strings produced by the core.

STRICT DETERMINISM CONTRACT:
  - This module NEVER calls an LLM.
  - This module NEVER reads environment variables.
  - Given the same inputs, it ALWAYS returns the exact same string.

Strings owned here:
    - the language mismatch warning
    - the inline SECURITY FIX marker comment used by annotated rewrites
"""
from codeshield.core.constants import FIX_MARKER


# ---------------------------------------------------------------------------
# Validation Helpers
# ---------------------------------------------------------------------------
def validate_label(label: str) -> None:
    """
    Raises ValueError if label is empty or not a string.
    """
    if not isinstance(label, str):
        raise TypeError(f"label must be str, got {type(label).__name__}")
    if not label.strip():
        raise ValueError("label must not be empty or whitespace-only")


def validate_comment_token(token: str) -> None:
    """
    Raises ValueError unless token is a single-line comment opener.
    """
    if token not in ("//", "#"):
        raise ValueError(f"Unsupported comment token '{token}'. Allowed values: ['#', '//']")


# ---------------------------------------------------------------------------
# Mismatch Warning
# ---------------------------------------------------------------------------
def format_mismatch_message(detected: str, declared: str) -> str:
    """
    Build the warning shown when the declared language disagrees with the
    classifier.

    Output format:
        The code appears to be written in {detected}, not {declared}.
        Please select {detected} from the dropdown for more accurate analysis.
    """
    validate_label(detected)
    validate_label(declared)
    return (
        f"The code appears to be written in {detected}, not {declared}. "
        f"Please select {detected} from the dropdown for more accurate analysis."
    )


# ---------------------------------------------------------------------------
# Fix Marker
# ---------------------------------------------------------------------------
def format_marker(comment_token: str, note: str, indent: str = "") -> str:
    """
    Build one inline marker line, e.g. ``    # SECURITY FIX: Bind user_id``.

    Parameters
    ----------
    comment_token : str
        "#" or "//".
    note : str
        Short description of the change made on the following line(s).
    indent : str
        Leading whitespace copied from the changed line.
    """
    validate_comment_token(comment_token)
    if not note.strip():
        raise ValueError("note must be a non-empty string")
    return f"{indent}{comment_token} {FIX_MARKER} {note}"
