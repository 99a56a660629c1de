"""
Language Classifier
===================
Scores a snippet against every language signature and returns one best-guess
label, or "none" when no language has positive evidence.

Scoring:
    score = (positive patterns present) - NEGATIVE_PATTERN_PENALTY * (negative patterns present)

    - Presence test per pattern: a pattern matching ten times counts once.
    - A language is a candidate only if score > 0.
    - Highest score wins. Ties go to the earliest entry in SIGNATURES.

Never uses an LLM. Same snippet → same verdict.
"""
from dataclasses import dataclass
from typing import Iterable

from codeshield.core.constants import NO_LANGUAGE
from codeshield.language.signatures import SIGNATURES, LanguageSignature


# ---------------------------------------------------------------------------
# Tunables
# ---------------------------------------------------------------------------
# Each disqualifying pattern hit costs this many positive hits.
NEGATIVE_PATTERN_PENALTY = 2


# ---------------------------------------------------------------------------
# Classification Verdict
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ClassificationVerdict:
    """Immutable classifier output for a single snippet."""
    label: str
    score: int

    @property
    def is_known(self) -> bool:
        return self.label != NO_LANGUAGE


def score_signature(snippet: str, signature: LanguageSignature) -> int:
    """Score one language signature against a snippet."""
    positives = sum(1 for p in signature.positive_patterns if p.search(snippet))
    negatives = sum(1 for p in signature.negative_patterns if p.search(snippet))
    return positives - NEGATIVE_PATTERN_PENALTY * negatives


def score_languages(
    snippet: str,
    signatures: Iterable[LanguageSignature] = SIGNATURES,
) -> dict[str, int]:
    """
    Return the raw score of every language, in declaration order.

    Useful for debugging why a snippet was (or was not) classified.
    """
    return {sig.name: score_signature(snippet, sig) for sig in signatures}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def classify(
    snippet: str,
    signatures: Iterable[LanguageSignature] = SIGNATURES,
) -> ClassificationVerdict:
    """
    Classify a snippet into a single language label.

    Parameters
    ----------
    snippet : str
        Source text to classify.
    signatures : Iterable[LanguageSignature]
        Signature table to score against (defaults to the built-in registry).

    Returns
    -------
    ClassificationVerdict
        Best candidate and its score, or label "none" with score 0.
    """
    best_label = NO_LANGUAGE
    best_score = 0

    for signature in signatures:
        score = score_signature(snippet, signature)
        # Strict ">" keeps the first-registered language on ties.
        if score > best_score:
            best_label = signature.name
            best_score = score

    return ClassificationVerdict(label=best_label, score=best_score)
