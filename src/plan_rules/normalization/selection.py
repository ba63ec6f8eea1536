"""Selection of the resource changes a check should look at."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterable

from ..models import ResourceChange

ALL_TYPES = "*"

_CHANGING_ACTIONS = frozenset({"create", "update"})
_SKIPPED_DATA_ACTIONS = frozenset({"delete", "no-op"})


def find_resources(resource_changes: Mapping[str, Any], resource_type: str) -> Dict[str, Any]:
    """Return managed resources of ``resource_type`` being created or updated.

    ``resource_type`` may be ``"*"`` to match every type.
    """

    return {
        address: record
        for address, record in resource_changes.items()
        if _mode(record) == "managed"
        and _matches_type(record, resource_type)
        and _CHANGING_ACTIONS.intersection(_actions(record))
    }


def find_all_resources(resource_changes: Mapping[str, Any]) -> Dict[str, Any]:
    """Return every managed resource being created or updated."""

    return find_resources(resource_changes, ALL_TYPES)


def find_datasources(resource_changes: Mapping[str, Any], datasource_type: str) -> Dict[str, Any]:
    """Return data sources of ``datasource_type`` that are read by the plan."""

    selected: Dict[str, Any] = {}
    for address, record in resource_changes.items():
        if _mode(record) != "data" or not _matches_type(record, datasource_type):
            continue
        actions = _actions(record)
        if not actions or _SKIPPED_DATA_ACTIONS.issuperset(actions):
            continue
        selected[address] = record
    return selected


# Record accessors ------------------------------------------------------------
def _mode(record: Any) -> str:
    if isinstance(record, ResourceChange):
        return record.mode
    if isinstance(record, Mapping):
        return str(record.get("mode", "managed"))
    return ""


def _matches_type(record: Any, resource_type: str) -> bool:
    if resource_type == ALL_TYPES:
        return True
    if isinstance(record, ResourceChange):
        return record.type == resource_type
    if isinstance(record, Mapping):
        return record.get("type") == resource_type
    return False


def _actions(record: Any) -> Iterable[str]:
    if isinstance(record, ResourceChange):
        return record.actions
    if isinstance(record, Mapping):
        change = record.get("change")
        if isinstance(change, Mapping):
            return list(change.get("actions") or [])
    return []


__all__ = ["ALL_TYPES", "find_all_resources", "find_datasources", "find_resources"]
