from __future__ import annotations

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


class PlanLoaderError(RuntimeError):
    """Exception raised when terraform plan ingestion fails."""


class PlanLoader:
    """Load Terraform plan JSON from an exported artifact or a saved plan file."""

    def __init__(
        self,
        working_dir: str | os.PathLike[str] = ".",
        *,
        plan_json_path: str | os.PathLike[str] | None = None,
        plan_file_path: str | os.PathLike[str] | None = None,
        env: Optional[dict[str, str]] = None,
        inherit_environment: bool = False,
        terraform_bin: str = "terraform",
    ) -> None:
        self.working_dir = Path(working_dir).resolve()
        self.plan_json_path = Path(plan_json_path).resolve() if plan_json_path else None
        self.plan_file_path = Path(plan_file_path).resolve() if plan_file_path else None
        self.env = env or {}
        self.inherit_environment = inherit_environment
        self.terraform_bin = terraform_bin

    @property
    def source(self) -> str:
        """Describe where the plan is read from."""

        if self.plan_json_path:
            return str(self.plan_json_path)
        if self.plan_file_path:
            return str(self.plan_file_path)
        return ""

    def load_plan(self) -> dict[str, Any]:
        """Load plan data from a JSON artifact or a binary plan file."""

        if self.plan_json_path:
            plan = self._load_json_artifact(self.plan_json_path)
        elif self.plan_file_path:
            plan = self._load_plan_file(self.plan_file_path)
        else:
            raise PlanLoaderError("Either a plan JSON artifact or a plan file is required")

        if not isinstance(plan, dict):
            raise PlanLoaderError(f"Terraform plan must be a JSON object: {self.source}")

        logger.info(
            "Loaded plan from %s with %d resource changes",
            self.source,
            len(plan.get("resource_changes") or []),
        )
        return plan

    # Artifact ingestion helpers -------------------------------------------------
    def _load_json_artifact(self, path: Path) -> Any:
        if not path.exists():
            raise PlanLoaderError(f"Terraform plan JSON artifact not found: {path}")

        with path.open("r", encoding="utf-8") as handle:
            try:
                return json.load(handle)
            except json.JSONDecodeError as exc:
                raise PlanLoaderError(f"Invalid JSON in plan artifact: {path}") from exc

    def _load_plan_file(self, path: Path) -> Any:
        if not path.exists():
            raise PlanLoaderError(f"Terraform plan file not found: {path}")

        completed = self._run_command(
            [self.terraform_bin, "show", "-json", str(path)],
            cwd=self.working_dir,
            env=self._build_environment(),
        )
        return self._parse_command_output(completed.stdout)

    def _build_environment(self) -> dict[str, str]:
        if self.inherit_environment:
            env_vars = os.environ.copy()
        else:
            env_vars = {"PATH": os.environ.get("PATH", "")}

        env_vars.update(self.env)
        return env_vars

    def _parse_command_output(self, output: str) -> Any:
        try:
            return json.loads(output)
        except json.JSONDecodeError as exc:
            raise PlanLoaderError("Command output was not valid JSON") from exc

    # Command runner -------------------------------------------------------------
    def _run_command(
        self,
        args: List[str],
        *,
        cwd: Path | None = None,
        env: Optional[dict[str, str]] = None,
    ) -> subprocess.CompletedProcess[str]:
        logger.debug("Running %s", " ".join(args))
        try:
            completed = subprocess.run(
                args,
                cwd=cwd,
                env=env,
                check=True,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise PlanLoaderError(f"Executable not found: {args[0]}") from exc
        except subprocess.CalledProcessError as exc:
            raise PlanLoaderError(
                f"Command '{' '.join(args)}' failed with exit code {exc.returncode}"
            ) from exc

        return completed


__all__ = ["PlanLoader", "PlanLoaderError"]
