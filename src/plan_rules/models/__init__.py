"""Data models for plan resource changes, violations and findings."""

from .finding import Finding, FindingSeverity
from .report import ViolationReport
from .resource import ChangeAction, ResourceChange

__all__ = [
    "ChangeAction",
    "Finding",
    "FindingSeverity",
    "ResourceChange",
    "ViolationReport",
]
