"""
Fix Synthesizer
===============
Builds a SuggestedFix from the fix template table when the model did not
supply one.

Pipeline:
    issue title ──> select_template ──> template
    snippet ──> classify ──> RewriteContext (dialect, comment token)
    template.extract(snippet) or template.illustrative() ──> fragments
    template.rewrite(snippet) ──> complete annotated rewrite (if it changed)

The synthesizer is pure: same title and snippet, same fix.
"""
import logging
from typing import Optional

from codeshield.language.classifier import classify
from codeshield.models.suggested_fix import SuggestedFix
from codeshield.remediation.templates import (
    FIX_TEMPLATES,
    GENERIC_TEMPLATE,
    FixTemplate,
    RewriteContext,
    VulnClass,
)

logger = logging.getLogger(__name__)


def select_template(issue_title: str) -> FixTemplate:
    """Return the first template whose keywords appear in the title, else the generic one."""
    for template in FIX_TEMPLATES:
        if template.matches(issue_title):
            return template
    return GENERIC_TEMPLATE


def annotated_rewrite(issue_title: str, snippet: str) -> Optional[str]:
    """
    Return the complete annotated rewrite for ``snippet``, or None when the
    selected template changes nothing, is the generic one, or cannot be
    rendered in the snippet's language.
    """
    template = select_template(issue_title)
    if template.rewrite is None:
        return None
    ctx = RewriteContext.for_language(classify(snippet).label)
    if not ctx.renders_snippet:
        return None
    rewritten = template.rewrite(snippet, ctx)
    return rewritten if rewritten != snippet else None


def synthesize_fix(issue_title: str, snippet: str) -> Optional[SuggestedFix]:
    """
    Derive a remediation for the named issue directly from the snippet.

    Parameters
    ----------
    issue_title : str
        Title of the first reported issue; selects the fix template.
    snippet : str
        Source text under review.

    Returns
    -------
    SuggestedFix or None
        None only for a blank title. A matched class always yields both
        fragments (extracted, or the illustrative pair); the generic
        template yields a rationale only. Languages outside the rewrite
        dialects get the illustrative pair and no complete rewrite.
    """
    if not isinstance(issue_title, str) or not issue_title.strip():
        return None

    template = select_template(issue_title)
    logger.info("Fix template selected: title=%r class=%s", issue_title, template.vuln_class.value)

    if template.vuln_class is VulnClass.GENERIC:
        return SuggestedFix(vulnerability_name=issue_title, rationale=template.rationale)

    ctx = RewriteContext.for_language(classify(snippet).label)
    if not ctx.renders_snippet:
        logger.info("No %s rendering for this language, using illustrative fix", template.vuln_class.value)
        vulnerable, secure = template.illustrative(ctx)
        return SuggestedFix(
            vulnerability_name=issue_title,
            rationale=template.rationale,
            vulnerable_fragment=vulnerable,
            secure_fragment=secure,
        )

    pair = template.extract(snippet, ctx)
    if pair is None:
        logger.info("No %s pattern found in snippet, using illustrative fix", template.vuln_class.value)
        pair = template.illustrative(ctx)
    vulnerable, secure = pair

    rewritten = template.rewrite(snippet, ctx)
    return SuggestedFix(
        vulnerability_name=issue_title,
        rationale=template.rationale,
        vulnerable_fragment=vulnerable,
        secure_fragment=secure,
        complete_annotated_code=rewritten if rewritten != snippet else None,
    )
