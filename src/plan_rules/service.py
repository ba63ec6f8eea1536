"""Orchestration layer used by the CLI to run checks against a plan."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Mapping, Sequence

from .adapters import PlanLoader, PlanLoaderError
from .evaluation import Sink
from .models import Finding, ResourceChange, ViolationReport
from .normalization import ResourceNormalizer
from .rules import Check, CheckManifestError, CheckManifestLoader

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CheckOutcome:
    """The violation report produced by one check."""

    check: Check
    report: ViolationReport

    def findings(self) -> List[Finding]:
        findings: List[Finding] = []
        for address, message in self.report.messages.items():
            resource = self.report.resources[address]
            findings.append(
                Finding(
                    rule_id=self.check.name,
                    message=message,
                    severity=self.check.severity,
                    address=address,
                    resource=resource if isinstance(resource, ResourceChange) else None,
                    metadata={
                        "resource_type": self.check.resource_type,
                        "attribute": self.check.attribute,
                        "predicate": self.check.predicate,
                    },
                )
            )
        return findings


@dataclass(slots=True)
class CheckRunResult:
    """Result returned by :class:`PlanCheckService` runs."""

    outcomes: List[CheckOutcome]
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def findings(self) -> List[Finding]:
        return [finding for outcome in self.outcomes for finding in outcome.findings()]


PlanLoaderFactory = Callable[..., PlanLoader]


class PlanCheckService:
    """High level service responsible for plan ingestion and check evaluation."""

    def __init__(
        self,
        *,
        plan_loader_factory: PlanLoaderFactory | None = None,
        normalizer: ResourceNormalizer | None = None,
        manifest_loader: CheckManifestLoader | None = None,
    ) -> None:
        self._plan_loader_factory = plan_loader_factory or PlanLoader
        self._normalizer = normalizer or ResourceNormalizer()
        self._manifest_loader = manifest_loader or CheckManifestLoader()

    # ------------------------------------------------------------------
    def run(
        self,
        working_dir: Path,
        *,
        plan_json_path: Path | None = None,
        plan_file_path: Path | None = None,
        manifests: Sequence[str | Path] | None = None,
        terraform_bin: str = "terraform",
        report: bool = False,
        sink: Sink = print,
    ) -> CheckRunResult:
        """Load the plan, run every enabled check and collect the outcomes."""

        checks = self._manifest_loader.enabled_checks(manifests)

        loader = self._plan_loader_factory(
            working_dir=working_dir,
            plan_json_path=plan_json_path,
            plan_file_path=plan_file_path,
            terraform_bin=terraform_bin,
        )
        plan = loader.load_plan()
        resource_changes = self._normalizer.normalize(plan)

        outcomes = self.evaluate(resource_changes, checks, report=report, sink=sink)

        metadata: dict[str, Any] = {
            "working_dir": str(working_dir),
            "plan": str(plan_json_path or plan_file_path or ""),
            "resource_count": len(resource_changes),
            "checks_run": len(outcomes),
        }
        return CheckRunResult(outcomes=outcomes, metadata=metadata)

    # ------------------------------------------------------------------
    def evaluate(
        self,
        resource_changes: Mapping[str, Any],
        checks: Sequence[Check],
        *,
        report: bool = False,
        sink: Sink = print,
    ) -> List[CheckOutcome]:
        """Run ``checks`` over already-normalized resource changes."""

        outcomes: List[CheckOutcome] = []
        for check in checks:
            prefix = check.message_prefix or f"[{check.name}]"
            violations = check.run(
                resource_changes, report=report, sink=functools.partial(sink, prefix)
            )
            logger.info("Check %s found %d violations", check.name, len(violations))
            outcomes.append(CheckOutcome(check=check, report=violations))
        return outcomes


__all__ = [
    "CheckManifestError",
    "CheckOutcome",
    "CheckRunResult",
    "PlanCheckService",
    "PlanLoaderError",
]
