"""Violation report returned by every filter pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator


@dataclass(slots=True)
class ViolationReport:
    """Violating resources and their messages, both keyed by address.

    ``resources`` and ``messages`` always share the same key set; use
    :meth:`add` rather than writing to either mapping directly.
    """

    resources: Dict[str, Any] = field(default_factory=dict)
    messages: Dict[str, str] = field(default_factory=dict)

    def add(self, address: str, resource: Any, message: str) -> None:
        self.resources[address] = resource
        self.messages[address] = message

    def __len__(self) -> int:
        return len(self.resources)

    def __iter__(self) -> Iterator[str]:
        return iter(self.resources)

    def __contains__(self, address: object) -> bool:
        return address in self.resources

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {"resources": dict(self.resources), "messages": dict(self.messages)}
