"""
Security Issue Model
====================
One finding reported by the model. Order as received is display order; the
first issue is the primary issue used for fallback fix synthesis.

Fields:
    title        — short issue title (e.g. "SQL Injection")
    severity     — high / medium / low
    description  — calm, educational explanation of the risk
"""
from enum import Enum

from pydantic import BaseModel


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SecurityIssue(BaseModel):
    title: str
    severity: Severity = Severity.MEDIUM
    description: str = ""
