"""Command-line interface for running attribute checks against Terraform plans."""

from __future__ import annotations

import argparse
import functools
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Sequence

from ..adapters import PlanLoaderError
from ..models import Finding, FindingSeverity
from ..rules import CheckManifestError, CheckManifestLoader
from ..service import CheckRunResult, PlanCheckService


@dataclass(slots=True)
class CheckReport:
    """Collection of findings plus contextual metadata."""

    findings: Sequence[Finding]
    metadata: Mapping[str, Any]

    @property
    def highest_severity(self) -> FindingSeverity | None:
        if not self.findings:
            return None
        return max(self.findings, key=lambda finding: finding.severity.rank).severity

    def counts_by_severity(self) -> dict[str, int]:
        counts: MutableMapping[FindingSeverity, int] = {
            severity: 0 for severity in FindingSeverity
        }
        for finding in self.findings:
            counts[finding.severity] += 1
        return {severity.value: count for severity, count in counts.items()}

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": dict(self.metadata),
            "summary": {
                "total_findings": len(self.findings),
                "highest_severity": self.highest_severity.value if self.highest_severity else None,
                "counts": self.counts_by_severity(),
            },
            "findings": [_serialize_finding(finding) for finding in self.findings],
        }


def _serialize_finding(finding: Finding) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "rule_id": finding.rule_id,
        "message": finding.message,
        "severity": finding.severity.value,
        "address": finding.address,
        "metadata": dict(finding.metadata),
    }

    if finding.resource:
        payload["resource"] = {
            "address": finding.resource.address,
            "module_path": list(finding.resource.module_path),
            "type": finding.resource.type,
            "name": finding.resource.name,
            "provider_name": finding.resource.provider_name,
            "mode": finding.resource.mode,
            "index": finding.resource.index,
            "change_action": finding.resource.change_action.value,
        }
    else:
        payload["resource"] = None

    return payload


def render_table(report: CheckReport) -> str:
    """Render findings as a simple text table for terminal output."""

    if not report.findings:
        return "No violations detected."

    headers = ("Severity", "Check", "Resource", "Message")
    rows = [headers]
    for finding in report.findings:
        rows.append(
            (
                finding.severity.value,
                finding.rule_id,
                finding.address or "-",
                finding.message,
            )
        )

    widths = [max(len(str(row[idx])) for row in rows) for idx in range(len(headers))]

    def format_row(values: tuple[str, str, str, str]) -> str:
        return "  ".join(value.ljust(width) for value, width in zip(values, widths, strict=True))

    lines = [format_row(headers)]
    lines.append("  ".join("=" * width for width in widths))
    for row in rows[1:]:
        lines.append(format_row(row))
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""

    parser = argparse.ArgumentParser(
        prog="iac-plan-rules", description="Attribute checks for Terraform plans"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command")

    check_parser = subparsers.add_parser(
        "check", help="Run manifest checks against a Terraform plan and report violations."
    )
    check_parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=Path.cwd(),
        help="Working directory used when running Terraform.",
    )
    source = check_parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--plan-json",
        type=Path,
        default=None,
        help="Path to a Terraform plan exported with `terraform show -json`.",
    )
    source.add_argument(
        "--plan-file",
        type=Path,
        default=None,
        help="Path to a binary Terraform plan file generated via `terraform plan -out`.",
    )
    check_parser.add_argument(
        "--manifest",
        dest="manifests",
        action="append",
        required=True,
        type=str,
        help="Path to a YAML/JSON check manifest. May be given more than once.",
    )
    check_parser.add_argument(
        "--terraform-bin",
        default="terraform",
        help="Name or path of the Terraform executable used to read plan files.",
    )
    check_parser.add_argument(
        "--report",
        action="store_true",
        help=(
            "Print each violation as soon as it is found "
            "(to stderr when --format json is used)."
        ),
    )
    check_parser.add_argument(
        "--fail-on",
        choices=[severity.value for severity in FindingSeverity],
        default=FindingSeverity.HIGH.value,
        help="Exit non-zero when violations at or above the provided severity are present.",
    )
    check_parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format for check results.",
    )

    return parser


def create_service() -> PlanCheckService:
    """Create a check service backed by the Terraform plan loader."""

    return PlanCheckService(manifest_loader=CheckManifestLoader())


def _build_report(result: CheckRunResult) -> CheckReport:
    return CheckReport(findings=result.findings, metadata=result.metadata)


def _format_report(
    report: CheckReport,
    *,
    fail_on: FindingSeverity,
    output_format: str,
) -> tuple[str, bool]:
    if output_format not in {"table", "json"}:
        raise ValueError("format must be either 'table' or 'json'")

    highest = report.highest_severity
    should_fail = highest is not None and highest.rank >= fail_on.rank

    if output_format == "json":
        output = json.dumps(report.to_dict(), indent=2)
    else:
        output = render_table(report)

    return output, should_fail


def _handle_check(args: argparse.Namespace) -> int:
    service = create_service()
    # keep stdout a single JSON document when live reporting is on
    sink = functools.partial(print, file=sys.stderr) if args.format == "json" else print

    try:
        result = service.run(
            args.path.resolve(),
            plan_json_path=args.plan_json.resolve() if args.plan_json else None,
            plan_file_path=args.plan_file.resolve() if args.plan_file else None,
            manifests=list(args.manifests),
            terraform_bin=args.terraform_bin,
            report=args.report,
            sink=sink,
        )
    except (PlanLoaderError, CheckManifestError) as exc:
        print(f"Error: {exc}")
        return 2

    output, should_fail = _format_report(
        _build_report(result),
        fail_on=FindingSeverity(args.fail_on),
        output_format=args.format,
    )

    print(output)
    return 1 if should_fail else 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by tests and the console script."""

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "check":
        return _handle_check(args)

    parser.print_help()
    return 0


def run() -> None:  # pragma: no cover - thin wrapper for module execution
    """Execute the CLI and exit with the produced status code."""

    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover - module execution guard
    run()
