"""
Mismatch Reconciler
===================
Decides whether the user's declared language disagrees with the snippet.

Decision Rules (in order):
    1. No declared language                     → no mismatch
    2. Classifier says "none"                   → no mismatch (no evidence)
    3. Declared name not a known label          → no mismatch (cannot compare)
    4. Declared label equals detected label     → no mismatch
    5. Otherwise                                → MismatchReport

This verdict is authoritative. Any mismatch claim made by the model is
discarded in favour of it, and a report here suppresses every suggested fix.
"""
import logging
from typing import Optional

from codeshield.core.output_formatter import format_mismatch_message
from codeshield.language.classifier import classify
from codeshield.language.normalizer import is_known_label, normalize
from codeshield.models.language_mismatch import MismatchReport

logger = logging.getLogger(__name__)


def reconcile(declared_raw: Optional[str], snippet: str) -> Optional[MismatchReport]:
    """
    Compare the declared language against the classifier verdict.

    Parameters
    ----------
    declared_raw : str or None
        Free-text language name supplied by the caller.
    snippet : str
        Source text under review.

    Returns
    -------
    MismatchReport or None
        A report only when both sides resolve to known, unequal labels.
    """
    if declared_raw is None or not declared_raw.strip():
        return None

    detected = classify(snippet)
    declared = normalize(declared_raw)

    logger.info(
        "Language detection: detected=%s (score=%d) declared=%s normalized=%s",
        detected.label, detected.score, declared_raw, declared,
    )

    if not detected.is_known or not is_known_label(declared):
        return None
    if detected.label == declared:
        return None

    logger.info("Language mismatch: %s declared, %s detected", declared, detected.label)
    return MismatchReport(
        detected_label=detected.label,
        message=format_mismatch_message(detected.label, declared),
    )
