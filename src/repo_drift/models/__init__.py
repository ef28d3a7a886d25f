"""Data models for drift findings, scanned trees and reports."""

from .finding import CATEGORY_ORDER, Finding, FindingCategory, FindingSeverity
from .report import DriftReport
from .snapshot import RepoSnapshot

__all__ = [
    "CATEGORY_ORDER",
    "DriftReport",
    "Finding",
    "FindingCategory",
    "FindingSeverity",
    "RepoSnapshot",
]
