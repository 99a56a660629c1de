"""
Result Assembler
================
Turns the model's parsed JSON payload into the final AnalysisResult.

Order of operations:
    1. Defensive copy of issues / explanation / saferPractices
    2. Mismatch reconciliation (the classifier's verdict always wins)
    3. Suggested fix:
         mismatch reported             → no fix
         well-formed model fix         → used verbatim, gaps defaulted
         issues present                → synthesized from fix templates
         otherwise                     → no fix

The model's own "languageMismatch" claim is ignored entirely.
"""
import logging
from typing import Any, List, Optional

from codeshield.core.constants import (
    DEFAULT_EXPLANATION,
    DEFAULT_FIX_RATIONALE,
    DEFAULT_ISSUE_TITLE,
    DEFAULT_SEVERITY,
    SEVERITIES,
)
from codeshield.language.reconciler import reconcile
from codeshield.models.analysis_result import AnalysisResult
from codeshield.models.security_issue import SecurityIssue, Severity
from codeshield.models.suggested_fix import SuggestedFix
from codeshield.remediation.synthesizer import annotated_rewrite, synthesize_fix

logger = logging.getLogger(__name__)

# Wire names of the fix fields a model may supply
_FIX_FIELDS = ("vulnerabilityName", "whyThisWorks", "vulnerableCode", "secureCode", "completeFixedCode")


# ---------------------------------------------------------------------------
# Defensive Copies
# ---------------------------------------------------------------------------
def _non_blank(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _copy_issues(raw: Any) -> List[SecurityIssue]:
    if not isinstance(raw, list):
        return []
    issues: List[SecurityIssue] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        severity = entry.get("severity")
        severity = severity.strip().lower() if isinstance(severity, str) else DEFAULT_SEVERITY
        if severity not in SEVERITIES:
            severity = DEFAULT_SEVERITY
        issues.append(SecurityIssue(
            title=_non_blank(entry.get("title")) or DEFAULT_ISSUE_TITLE,
            severity=Severity(severity),
            description=entry.get("description") if isinstance(entry.get("description"), str) else "",
        ))
    return issues


def _copy_practices(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, str) and item.strip()]


# ---------------------------------------------------------------------------
# Suggested Fix
# ---------------------------------------------------------------------------
def _is_well_formed_fix(raw: Any) -> bool:
    return isinstance(raw, dict) and any(_non_blank(raw.get(field)) for field in _FIX_FIELDS)


def _adopt_model_fix(raw: dict, issues: List[SecurityIssue], snippet: str) -> SuggestedFix:
    name = _non_blank(raw.get("vulnerabilityName")) or issues[0].title
    complete = _non_blank(raw.get("completeFixedCode"))
    if complete is None:
        # same key as synthesis: the first issue title, not the model's fix name
        complete = annotated_rewrite(issues[0].title, snippet)
    return SuggestedFix(
        vulnerability_name=name,
        rationale=_non_blank(raw.get("whyThisWorks")) or DEFAULT_FIX_RATIONALE,
        vulnerable_fragment=_non_blank(raw.get("vulnerableCode")),
        secure_fragment=_non_blank(raw.get("secureCode")),
        complete_annotated_code=complete,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def assemble(model_output: Any, snippet: str, declared_raw: Optional[str]) -> AnalysisResult:
    """
    Build the final AnalysisResult.

    Parameters
    ----------
    model_output : Any
        Parsed JSON from the model. Anything other than a dict is treated
        as an empty payload.
    snippet : str
        Source text under review.
    declared_raw : str or None
        Language the user selected.

    Returns
    -------
    AnalysisResult
        Always satisfies: mismatch ⇒ no fix, fix ⇒ at least one issue.
    """
    payload = model_output if isinstance(model_output, dict) else {}

    issues = _copy_issues(payload.get("issues"))
    explanation = _non_blank(payload.get("explanation")) or DEFAULT_EXPLANATION
    practices = _copy_practices(payload.get("saferPractices"))

    mismatch = reconcile(declared_raw, snippet)
    if mismatch is not None:
        return AnalysisResult(
            issues=issues,
            explanation=explanation,
            safer_practices=practices,
            suggested_fix=None,
            language_mismatch=mismatch,
        )

    fix: Optional[SuggestedFix] = None
    raw_fix = payload.get("suggestedFix")
    if issues and _is_well_formed_fix(raw_fix):
        logger.info("Using model-supplied fix for %r", issues[0].title)
        fix = _adopt_model_fix(raw_fix, issues, snippet)
    elif issues:
        logger.info("Model supplied no usable fix, synthesizing one for %r", issues[0].title)
        fix = synthesize_fix(issues[0].title, snippet)

    return AnalysisResult(
        issues=issues,
        explanation=explanation,
        safer_practices=practices,
        suggested_fix=fix,
        language_mismatch=None,
    )
