"""Resource change models consumed by the rule helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ChangeAction(str, Enum):
    """Enumeration of the planned action for a Terraform resource."""

    NOOP = "no-op"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    REPLACE = "replace"
    READ = "read"
    UNKNOWN = "unknown"

    @classmethod
    def from_actions(cls, actions: List[str]) -> "ChangeAction":
        """Collapse a plan ``actions`` list into a single action."""

        if not actions:
            return cls.UNKNOWN
        if set(actions) == {"delete", "create"}:
            return cls.REPLACE
        if len(actions) == 1:
            try:
                return cls(actions[0])
            except ValueError:
                return cls.UNKNOWN
        return cls.UNKNOWN


@dataclass(slots=True)
class ResourceChange:
    """A proposed change to one resource, as listed in ``resource_changes``."""

    address: str
    type: str = ""
    name: str = ""
    mode: str = "managed"
    module_path: List[str] = field(default_factory=list)
    provider_name: Optional[str] = None
    index: Optional[str | int] = None
    actions: List[str] = field(default_factory=list)
    before: Any = None
    after: Any = None

    @property
    def change_action(self) -> ChangeAction:
        return ChangeAction.from_actions(self.actions)

    @property
    def change(self) -> Dict[str, Any]:
        """Return the change block in the plan's own shape."""

        return {"actions": list(self.actions), "before": self.before, "after": self.after}
