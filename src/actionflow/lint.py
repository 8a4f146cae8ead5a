# lint.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, List, Optional

from .errors import LintError
from .model import CompiledWorkflow
from .ui.console import get_console

RESERVED_ENV_PREFIX = "GITHUB_"
SECRET_COUNT_LIMIT = 100


class Severity(IntEnum):
    ALLOW = 0
    ERROR = 1


@dataclass(frozen=True)
class LintViolation:
    rule: str
    message: str
    action: Optional[str] = None

    def __str__(self) -> str:
        if self.action is not None:
            return f"Error: in action '{self.action}': {self.message}"
        return f"Error: {self.message}"


Report = Callable[[LintViolation], None]


def _default_report(violation: LintViolation) -> None:
    get_console().print_lint_violation(str(violation))


# ---------------------------------------------------------------------
# Passes
# ---------------------------------------------------------------------

def lint_reserved_prefix(h: CompiledWorkflow, report: Report) -> Severity:
    """Env var names must not start with GITHUB_ (literal, case-sensitive)."""
    outcome = Severity.ALLOW
    for act in h.actions():
        for var_name in act.env:
            if var_name.startswith(RESERVED_ENV_PREFIX):
                outcome = max(outcome, Severity.ERROR)
                report(LintViolation(
                    rule="reserved_prefix",
                    action=act.name,
                    message=(
                        f"in env var '{var_name}': var name starts with "
                        f"reserved prefix {RESERVED_ENV_PREFIX}"
                    ),
                ))
    return outcome


def lint_secret_budget(h: CompiledWorkflow, report: Report) -> Severity:
    secrets = set()
    for act in h.actions():
        secrets.update(act.secrets)
    if len(secrets) > SECRET_COUNT_LIMIT:
        report(LintViolation(
            rule="secret_budget",
            message=(
                f"you are using {len(secrets)} secrets, which exceeds "
                f"GitHub limit of {SECRET_COUNT_LIMIT}"
            ),
        ))
        return Severity.ERROR
    return Severity.ALLOW


def lint_empty_collections(h: CompiledWorkflow, report: Report) -> Severity:
    """`runs = []` / `args = []` are errors; leaving them out is fine."""
    outcome = Severity.ALLOW
    for act in h.actions():
        for field_name, value in (("runs", act.runs), ("args", act.args)):
            if value is not None and not value:
                outcome = max(outcome, Severity.ERROR)
                report(LintViolation(
                    rule="empty_collection",
                    action=act.name,
                    message=f"{field_name} is defined to empty value",
                ))
    return outcome


PASSES = (
    lint_reserved_prefix,
    lint_secret_budget,
    lint_empty_collections,
)


# ---------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------

@dataclass
class LintReport:
    severity: Severity = Severity.ALLOW
    violations: List[LintViolation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.severity < Severity.ERROR

    def raise_for_errors(self) -> None:
        if not self.ok:
            raise LintError(self.violations)


def run_lint(h: CompiledWorkflow, report: Optional[Report] = None) -> LintReport:
    """
    Run every pass, even after one has failed, and aggregate the outcome.

    Each violation goes to `report` as soon as it is found (the console by
    default) and is also kept on the returned LintReport.
    """
    sink = report or _default_report
    result = LintReport()

    def collect(violation: LintViolation) -> None:
        result.violations.append(violation)
        sink(violation)

    for lint_pass in PASSES:
        result.severity = max(result.severity, lint_pass(h, collect))
    return result


def lint(h: CompiledWorkflow, report: Optional[Report] = None) -> LintReport:
    """run_lint(), then raise LintError if any pass reported an error."""
    result = run_lint(h, report)
    result.raise_for_errors()
    return result
