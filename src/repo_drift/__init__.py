"""Repository drift auditor."""

from .models import DriftReport, Finding, FindingCategory, FindingSeverity
from .service import DriftAuditor

__all__ = [
    "DriftAuditor",
    "DriftReport",
    "Finding",
    "FindingCategory",
    "FindingSeverity",
]
