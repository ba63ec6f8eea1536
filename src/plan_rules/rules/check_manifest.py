"""Loading and merging of check manifest files."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, MutableMapping, Sequence

import yaml

from ..evaluation import (
    Sink,
    filter_attribute_does_not_match_regex,
    filter_attribute_greater_than_value,
    filter_attribute_in_list,
    filter_attribute_is_not_value,
    filter_attribute_is_value,
    filter_attribute_less_than_value,
    filter_attribute_matches_regex,
    filter_attribute_not_in_list,
    to_number,
)
from ..models import FindingSeverity, ViolationReport
from ..normalization import find_resources

logger = logging.getLogger(__name__)

PREDICATES: Dict[str, Callable[..., ViolationReport]] = {
    "is_not_value": filter_attribute_is_not_value,
    "is_value": filter_attribute_is_value,
    "greater_than": filter_attribute_greater_than_value,
    "less_than": filter_attribute_less_than_value,
    "not_in_list": filter_attribute_not_in_list,
    "in_list": filter_attribute_in_list,
    "does_not_match_regex": filter_attribute_does_not_match_regex,
    "matches_regex": filter_attribute_matches_regex,
}

_LIST_PREDICATES = frozenset({"not_in_list", "in_list"})
_NUMERIC_PREDICATES = frozenset({"greater_than", "less_than"})
_REGEX_PREDICATES = frozenset({"matches_regex", "does_not_match_regex"})


class CheckManifestError(RuntimeError):
    """Raised when check manifests cannot be loaded or parsed."""


@dataclass(slots=True)
class Check:
    """A single attribute check applied to one resource type."""

    name: str
    resource_type: str = ""
    attribute: str = ""
    predicate: str = "is_not_value"
    value: Any = None
    severity: FindingSeverity = FindingSeverity.MEDIUM
    enabled: bool = True
    message_prefix: str = ""

    def run(
        self,
        resource_changes: Mapping[str, Any],
        *,
        report: bool = False,
        sink: Sink = print,
    ) -> ViolationReport:
        """Select this check's resources and filter them with its predicate."""

        selected = find_resources(resource_changes, self.resource_type)
        predicate = PREDICATES[self.predicate]
        return predicate(selected, self.attribute, self.value, report, sink=sink)


class CheckManifestLoader:
    """Load check manifests and expose the enabled checks."""

    def __init__(self, default_manifests: Sequence[Path | str] | None = None) -> None:
        self._default_manifests = [Path(path) for path in default_manifests or []]

    # ------------------------------------------------------------------
    def load(self, manifests: Sequence[Path | str] | None = None) -> List[Check]:
        """Return all checks defined by the provided manifests, merged by name."""

        manifest_paths = list(self._default_manifests)
        if manifests:
            manifest_paths.extend(Path(path) for path in manifests)

        checks: MutableMapping[str, Check] = {}
        for manifest_path in manifest_paths:
            data = self._load_manifest(manifest_path)
            entries = data.get("checks")
            if entries is None:
                entries = []
            if not isinstance(entries, list):
                raise CheckManifestError(f"'checks' must be a list in manifest {manifest_path}")

            for entry in entries:
                if not isinstance(entry, Mapping) or not entry.get("name"):
                    raise CheckManifestError(
                        f"Every check needs a name in manifest {manifest_path}"
                    )

                name = str(entry["name"])
                check = checks.get(name, Check(name=name))
                self._apply(check, entry, manifest_path)
                checks[name] = check

        for check in checks.values():
            self._validate(check)

        logger.info("Loaded %d checks from %d manifests", len(checks), len(manifest_paths))
        return list(checks.values())

    # ------------------------------------------------------------------
    def enabled_checks(self, manifests: Sequence[Path | str] | None = None) -> List[Check]:
        """Return only the checks that are enabled after merging manifests."""

        return [check for check in self.load(manifests) if check.enabled]

    # ------------------------------------------------------------------
    def _apply(self, check: Check, entry: Mapping[str, Any], source: Path) -> None:
        if "enabled" in entry:
            check.enabled = bool(entry["enabled"])
        if entry.get("resource_type"):
            check.resource_type = str(entry["resource_type"])
        if entry.get("attribute"):
            check.attribute = str(entry["attribute"])
        if entry.get("predicate"):
            check.predicate = str(entry["predicate"]).strip()
        if "value" in entry:
            check.value = entry["value"]
        if entry.get("message_prefix"):
            check.message_prefix = str(entry["message_prefix"])

        severity = entry.get("severity")
        if severity is not None:
            try:
                check.severity = FindingSeverity(str(severity).strip().lower())
            except ValueError as exc:
                raise CheckManifestError(
                    f"Unknown severity '{severity}' for check '{check.name}' in {source}"
                ) from exc

    def _validate(self, check: Check) -> None:
        if check.predicate not in PREDICATES:
            raise CheckManifestError(
                f"Unknown predicate '{check.predicate}' for check '{check.name}'"
            )
        if not check.resource_type:
            raise CheckManifestError(f"Check '{check.name}' has no resource_type")
        if not check.attribute:
            raise CheckManifestError(f"Check '{check.name}' has no attribute")
        if check.predicate in _LIST_PREDICATES and not isinstance(check.value, list):
            raise CheckManifestError(
                f"Check '{check.name}' uses '{check.predicate}' and needs a list value"
            )
        if check.predicate in _NUMERIC_PREDICATES and to_number(check.value) is None:
            raise CheckManifestError(
                f"Check '{check.name}' uses '{check.predicate}' and needs a numeric value"
            )
        if check.predicate in _REGEX_PREDICATES:
            if not isinstance(check.value, str):
                raise CheckManifestError(
                    f"Check '{check.name}' uses '{check.predicate}' and needs a pattern string"
                )
            try:
                re.compile(check.value)
            except re.error as exc:
                raise CheckManifestError(
                    f"Invalid pattern for check '{check.name}': {exc}"
                ) from exc

    # ------------------------------------------------------------------
    def _load_manifest(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise CheckManifestError(f"Check manifest not found: {path}")

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem errors surfaced to caller
            raise CheckManifestError(f"Failed to read check manifest {path}") from exc

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as exc:
            raise CheckManifestError(f"Invalid YAML in check manifest {path}") from exc

        if not isinstance(data, Mapping):
            raise CheckManifestError(f"Check manifest must be a mapping: {path}")

        return dict(data)
