"""Conversion helpers that turn raw Terraform plan JSON into resource changes."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from ..models import ResourceChange


class ResourceNormalizer:
    """Index a plan's ``resource_changes`` by address as :class:`ResourceChange` records."""

    def normalize(self, plan: Mapping[str, Any]) -> Dict[str, ResourceChange]:
        """Return resource changes keyed by address, in plan order."""

        resource_changes: Iterable[Mapping[str, Any]] = plan.get("resource_changes", []) or []

        indexed: Dict[str, ResourceChange] = {}
        for change in resource_changes:
            resource = self._normalize_change(change)
            indexed[resource.address] = resource
        return indexed

    # ------------------------------------------------------------------
    def _normalize_change(self, change: Mapping[str, Any]) -> ResourceChange:
        block = change.get("change") or {}

        return ResourceChange(
            address=change.get("address", ""),
            type=change.get("type", ""),
            name=change.get("name", ""),
            mode=change.get("mode", "managed"),
            module_path=self._module_path(change.get("module_address")),
            provider_name=change.get("provider_name"),
            index=change.get("index"),
            actions=[str(action) for action in block.get("actions", []) or []],
            before=block.get("before"),
            after=block.get("after"),
        )

    def _module_path(self, module_address: str | None) -> List[str]:
        if not module_address:
            return []

        parts: List[str] = []
        for segment in module_address.split("."):
            if segment == "module":
                continue
            parts.append(segment)
        return parts
