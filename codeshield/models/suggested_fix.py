"""
Suggested Fix Model
===================
At most one remediation per analysis, either supplied by the model or
synthesized locally from a fix template.

Fields (python name — wire name):
    vulnerability_name       — vulnerabilityName
    rationale                — whyThisWorks: how the fix mitigates the issue
    vulnerable_fragment      — vulnerableCode: offending lines (optional)
    secure_fragment          — secureCode: corrected lines (optional)
    complete_annotated_code  — completeFixedCode: full snippet with inline
                               SECURITY FIX markers (optional)
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SuggestedFix(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    vulnerability_name: str = Field(alias="vulnerabilityName")
    rationale: str = Field(alias="whyThisWorks")
    vulnerable_fragment: Optional[str] = Field(default=None, alias="vulnerableCode")
    secure_fragment: Optional[str] = Field(default=None, alias="secureCode")
    complete_annotated_code: Optional[str] = Field(default=None, alias="completeFixedCode")
