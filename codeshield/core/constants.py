"""
Constants
Centralised storage for labels, markers and defaults shared across modules.
"""
# Classifier verdict when no language scores above zero
NO_LANGUAGE = "none"

# Inline marker placed before every line changed by an annotated rewrite
FIX_MARKER = "SECURITY FIX:"

SEVERITIES = ("high", "medium", "low")
DEFAULT_SEVERITY = "medium"

DEFAULT_ISSUE_TITLE = "Security Issue"
DEFAULT_EXPLANATION = "No explanation provided."
DEFAULT_FIX_RATIONALE = "This fix addresses the identified vulnerability."
