"""
Applies change plans to source files, one step and one change at a time.

Nothing is transactional: a missing file skips its step, an unmatched snippet
skips its change, and a formatter failure writes the unformatted text.
"""
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from .formatter import PrettierFormatter
from .models import ChangePlan, PlanStep
from ..config import settings
from ..errors import InvalidPlanError, PatchMismatchError
from ..types import PlanReport, StepReport, StepStatus
from ..utils.logger import app_logger

DIAGNOSTIC_SNIPPET = 80
DIAGNOSTIC_FILE_PREFIX = 200


class MatchStatus(str, Enum):
    APPLIED = "applied"
    NOT_FOUND = "not-found"


@dataclass
class MatchResult:
    status: MatchStatus
    text: str
    error: Optional[PatchMismatchError] = None


def normalize_code(code: str) -> str:
    """Collapse whitespace runs and drop whitespace between tags."""
    code = re.sub(r"\s+", " ", code)
    code = re.sub(r">\s+<", "><", code)
    return code.strip()


def replace_exact(code: str, old: str, new: str) -> MatchResult:
    """Exact-substring stage: replace the first occurrence of ``old``."""
    # TODO: add a whitespace-normalized matching stage for snippets that differ only in formatting
    if old in code:
        return MatchResult(MatchStatus.APPLIED, code.replace(old, new, 1))

    error = PatchMismatchError(
        f"Could not find code to replace:\n"
        f"   Old: \"{old[:DIAGNOSTIC_SNIPPET]}...\"\n"
        f"   Normalized old: \"{normalize_code(old)[:DIAGNOSTIC_SNIPPET]}...\"\n"
        f"   File starts with: \"{normalize_code(code)[:DIAGNOSTIC_FILE_PREFIX]}...\""
    )
    return MatchResult(MatchStatus.NOT_FOUND, code, error)


def load_plan(plan: Union[ChangePlan, Dict[str, Any]]) -> ChangePlan:
    """Validate a raw plan payload; raises InvalidPlanError on a bad shape."""
    if isinstance(plan, ChangePlan):
        return plan
    if not isinstance(plan, dict):
        raise InvalidPlanError("Invalid plan: expected a JSON object with a 'plan' array")
    try:
        return ChangePlan.model_validate(plan)
    except ValidationError as e:
        raise InvalidPlanError(f"Invalid plan: {e}") from e


class PatchEngine:
    """Applies change plans under a fixed project root."""

    def __init__(self, project_root: Optional[str] = None, formatter: Optional[PrettierFormatter] = None):
        self.project_root = Path(project_root if project_root is not None else settings.project_root).resolve()
        self.formatter = formatter or PrettierFormatter()
        self.logger = app_logger.bind(component="patch_engine")

    def apply_plan(self, plan: Union[ChangePlan, Dict[str, Any]], dry_run: bool = False) -> PlanReport:
        """Apply every step in order; failures never stop later steps."""
        change_plan = load_plan(plan)
        report = PlanReport(dry_run=dry_run)
        self.logger.info(f"Applying {len(change_plan.plan)} modification(s){' (dry run)' if dry_run else ''}")

        for step in change_plan.plan:
            try:
                step_report = self.apply_step(step, dry_run=dry_run)
            except Exception as e:
                self.logger.error(f"Error modifying {step.file}: {e}")
                step_report = StepReport(file=step.file, status=StepStatus.FAILED, error=str(e))
            report.steps.append(step_report)

        self.logger.info(f"Applied {report.applied_steps}/{len(report.steps)} step(s)")
        return report

    def apply_step(self, step: PlanStep, dry_run: bool = False) -> StepReport:
        file_path = (self.project_root / step.file).resolve()
        if not file_path.exists():
            self.logger.error(f"File not found: {step.file} (looked in: {file_path})")
            return StepReport(file=step.file, status=StepStatus.SKIPPED, error="file not found")

        self.logger.info(f"Modifying {step.file} ({step.action}); reason: {step.reason or 'N/A'}")
        with open(file_path, "r", encoding="utf-8", newline="") as f:
            code = f.read()

        applied = 0
        missed = 0
        for change in step.changes:
            if not change.old:
                self.logger.warning("Skipping invalid change (missing 'old')")
                missed += 1
                continue
            if change.new is None:
                self.logger.warning("Skipping invalid change (missing 'new')")
                missed += 1
                continue

            result = replace_exact(code, change.old, change.new)
            if result.status == MatchStatus.NOT_FOUND:
                self.logger.warning(f"{step.file}: {result.error}")
                missed += 1
                continue

            code = result.text
            applied += 1

        if applied == 0 and missed > 0:
            status = StepStatus.SKIPPED
        elif missed > 0:
            status = StepStatus.PARTIAL
        else:
            status = StepStatus.APPLIED

        if dry_run:
            self.logger.info(f"Would apply {applied} of {len(step.changes)} change(s) to {step.file}")
            return StepReport(file=step.file, status=status, applied_changes=applied, missed_changes=missed)

        code, formatted = self.formatter.format_or_original(code, str(file_path))
        with open(file_path, "w", encoding="utf-8", newline="") as f:
            f.write(code)

        self.logger.info(f"Modified {step.file}{'' if formatted else ' (unformatted)'}: {applied} applied, {missed} skipped")
        return StepReport(file=step.file, status=status, applied_changes=applied, missed_changes=missed,
                          formatted=formatted)


def apply_plan(plan: Union[ChangePlan, Dict[str, Any]], project_root: Optional[str] = None,
               dry_run: bool = False) -> PlanReport:
    return PatchEngine(project_root).apply_plan(plan, dry_run=dry_run)
