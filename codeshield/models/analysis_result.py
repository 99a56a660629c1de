"""
Analysis Result Model
=====================
The final record returned to the caller. Serialises with camelCase wire names
(``model_dump(by_alias=True)``), which FastAPI applies automatically.

Fields (python name — wire name):
    issues             — issues
    explanation        — explanation (never empty)
    safer_practices    — saferPractices
    suggested_fix      — suggestedFix (object or null)
    language_mismatch  — languageMismatch (object or null)

Invariants (checked on construction):
    language_mismatch present ⇒ suggested_fix absent
    suggested_fix present     ⇒ issues non-empty
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .language_mismatch import MismatchReport
from .security_issue import SecurityIssue
from .suggested_fix import SuggestedFix


class AnalysisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    issues: List[SecurityIssue] = Field(default_factory=list)
    explanation: str
    safer_practices: List[str] = Field(default_factory=list, alias="saferPractices")
    suggested_fix: Optional[SuggestedFix] = Field(default=None, alias="suggestedFix")
    language_mismatch: Optional[MismatchReport] = Field(default=None, alias="languageMismatch")

    @model_validator(mode="after")
    def _check_fix_invariants(self) -> "AnalysisResult":
        if self.suggested_fix is not None:
            if self.language_mismatch is not None:
                raise ValueError("suggested_fix must be absent when a language mismatch is reported")
            if not self.issues:
                raise ValueError("suggested_fix requires at least one issue")
        return self
