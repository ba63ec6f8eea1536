"""Finding models shared by the check service and reporting layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .resource import ResourceChange


class FindingSeverity(str, Enum):
    """Severity levels a check can be assigned."""

    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    FindingSeverity.INFO: 0,
    FindingSeverity.LOW: 1,
    FindingSeverity.MEDIUM: 2,
    FindingSeverity.HIGH: 3,
    FindingSeverity.CRITICAL: 4,
}


@dataclass(slots=True)
class Finding:
    """A single violation raised by a check against one resource."""

    rule_id: str
    message: str
    severity: FindingSeverity
    address: str = ""
    resource: Optional["ResourceChange"] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
