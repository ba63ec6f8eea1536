from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from plan_rules.adapters import PlanLoaderError
from plan_rules.models import FindingSeverity, ResourceChange
from plan_rules.rules import Check, CheckManifestLoader
from plan_rules.service import CheckRunResult, PlanCheckService

FIXTURES = Path(__file__).resolve().parent / "fixtures"


class DummyPlanLoader:
    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs

    def load_plan(self) -> dict[str, Any]:
        return {
            "resource_changes": [
                {
                    "address": "aws_s3_bucket.example",
                    "type": "aws_s3_bucket",
                    "mode": "managed",
                    "change": {"actions": ["create"], "after": {"acl": "public-read"}},
                }
            ]
        }


class DummyManifestLoader(CheckManifestLoader):
    def __init__(self, checks: list[Check]) -> None:
        super().__init__()
        self._checks = checks
        self.requested: Any = None

    def enabled_checks(self, manifests=None):  # noqa: D401 - part of test double
        self.requested = manifests
        return list(self._checks)


def acl_check(**overrides: Any) -> Check:
    fields: dict[str, Any] = {
        "name": "s3-private-acl",
        "resource_type": "aws_s3_bucket",
        "attribute": "acl",
        "value": "private",
        "severity": FindingSeverity.HIGH,
    }
    fields.update(overrides)
    return Check(**fields)


def test_service_runs_pipeline() -> None:
    manifest_loader = DummyManifestLoader([acl_check()])
    service = PlanCheckService(
        plan_loader_factory=DummyPlanLoader,
        manifest_loader=manifest_loader,
    )

    result = service.run(Path("/workspace"), plan_json_path=Path("plan.json"), manifests=["a.yaml"])

    assert isinstance(result, CheckRunResult)
    assert manifest_loader.requested == ["a.yaml"]
    assert result.metadata["resource_count"] == 1
    assert result.metadata["checks_run"] == 1

    [finding] = result.findings
    assert finding.rule_id == "s3-private-acl"
    assert finding.severity is FindingSeverity.HIGH
    assert finding.address == "aws_s3_bucket.example"
    assert isinstance(finding.resource, ResourceChange)
    assert finding.message == (
        "aws_s3_bucket.example has acl with value public-read that is not equal to private"
    )
    assert finding.metadata["predicate"] == "is_not_value"


def test_service_reports_with_check_prefix() -> None:
    calls: list[tuple[Any, ...]] = []
    service = PlanCheckService(
        plan_loader_factory=DummyPlanLoader,
        manifest_loader=DummyManifestLoader(
            [acl_check(), acl_check(name="prefixed", message_prefix="ACL:")]
        ),
    )

    service.run(Path("."), report=True, sink=lambda *parts: calls.append(parts))

    assert [call[0] for call in calls] == ["[s3-private-acl]", "ACL:"]
    assert all(call[1].startswith("aws_s3_bucket.example has acl") for call in calls)


def test_service_against_fixture_plan() -> None:
    service = PlanCheckService()

    result = service.run(
        FIXTURES,
        plan_json_path=FIXTURES / "aws" / "plan.json",
        manifests=[FIXTURES / "aws" / "checks.yaml"],
    )

    by_check = {outcome.check.name: outcome.report for outcome in result.outcomes}
    assert list(by_check["s3-private-acl"]) == ["aws_s3_bucket.assets"]
    assert by_check["s3-versioning"].messages == {
        "aws_s3_bucket.assets": (
            "aws_s3_bucket.assets has versioning.0.enabled that is null or undefined"
        )
    }
    assert list(by_check["instance-volume-size"]) == ["module.network.aws_instance.bastion"]
    assert len(result.findings) == 3


def test_plan_errors_propagate() -> None:
    service = PlanCheckService(manifest_loader=DummyManifestLoader([acl_check()]))

    with pytest.raises(PlanLoaderError):
        service.run(Path("."), plan_json_path=Path("/nonexistent/plan.json"))
