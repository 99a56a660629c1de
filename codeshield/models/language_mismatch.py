"""
Language Mismatch Model
=======================
Present only when the declared language and the classifier verdict are both
known labels and disagree.

Fields (python name — wire name):
    detected_label  — detected: the classifier's label
    message         — human-readable prompt to re-select that language
"""
from pydantic import BaseModel, ConfigDict, Field


class MismatchReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    detected_label: str = Field(alias="detected")
    message: str
