# errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .model import Span


@dataclass(eq=False)
class WorkflowError(Exception):
    """
    Structured workflow error with enough context for:
      - clean CLI output
      - fixing the input without re-running in debug mode
    """
    kind: str
    message: str
    span: Optional[Span] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.span is not None:
            return f"{self.span}: {self.message}"
        return self.message


# ---------------------------------------------------------------------
# Syntax / decoding
# ---------------------------------------------------------------------

class WorkflowSyntaxError(WorkflowError):
    def __init__(self, message: str, span: Span):
        super().__init__(kind="syntax", message=message, span=span)


class TypeMismatchError(WorkflowError):
    def __init__(self, expected: str, actual: str, span: Optional[Span] = None):
        super().__init__(
            kind="type_mismatch",
            message=f"expected {expected}, got {actual}",
            span=span,
            details={"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


class DuplicateKeyError(WorkflowError):
    def __init__(self, key: str, span: Optional[Span] = None):
        super().__init__(
            kind="duplicate_key",
            message=f"key {key} redefined",
            span=span,
            details={"key": key},
        )
        self.key = key


class MissingRequiredKeyError(WorkflowError):
    def __init__(self, key: str, span: Optional[Span] = None):
        super().__init__(
            kind="missing_required_key",
            message=f"key {key} required but not set",
            span=span,
            details={"key": key},
        )
        self.key = key


class UnexpectedKeyError(WorkflowError):
    def __init__(self, key: str, span: Optional[Span] = None):
        super().__init__(
            kind="unexpected_key",
            message=f"unexpected key {key}",
            span=span,
            details={"key": key},
        )
        self.key = key


# ---------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------

class DuplicateActionNameError(WorkflowError):
    def __init__(self, name: str, span: Optional[Span] = None):
        super().__init__(
            kind="duplicate_action",
            message=f"action with name {name} already defined",
            span=span,
            details={"action": name},
        )
        self.name = name


class UnknownActionReferenceError(WorkflowError):
    def __init__(self, referrer: str, name: str, span: Optional[Span] = None):
        super().__init__(
            kind="unknown_action",
            message=f"{referrer} refers to unknown action {name}",
            span=span,
            details={"referrer": referrer, "action": name},
        )
        self.referrer = referrer
        self.name = name


class MultipleWorkflowError(WorkflowError):
    def __init__(self, span: Optional[Span] = None):
        super().__init__(
            kind="multiple_workflows",
            message="multiple workflows are not supported",
            span=span,
        )


class MissingWorkflowError(WorkflowError):
    def __init__(self):
        super().__init__(kind="missing_workflow", message="no workflows found")


class UnknownTriggerError(WorkflowError):
    def __init__(self, trigger: str, span: Optional[Span] = None):
        super().__init__(
            kind="unknown_trigger",
            message=f"unknown workflow trigger: {trigger}",
            span=span,
            details={"trigger": trigger},
        )
        self.trigger = trigger


# ---------------------------------------------------------------------
# Lint / scheduling
# ---------------------------------------------------------------------

class LintError(WorkflowError):
    def __init__(self, violations: Sequence[Any]):
        count = len(violations)
        super().__init__(
            kind="lint",
            message=f"workflow failed validation with {count} error(s)",
            details={"violations": count},
        )
        self.violations = list(violations)


class DependencyCycleError(WorkflowError):
    def __init__(self, cycle: List[str]):
        # cycle holds the names on the loop, without repeating the first one
        path = " -> ".join([*cycle, cycle[0]])
        super().__init__(
            kind="cycle",
            message=f"actions are cycled: {path}",
            details={"cycle": path},
        )
        self.cycle = list(cycle)

    @property
    def edges(self) -> List[tuple[str, str]]:
        return [
            (self.cycle[i], self.cycle[(i + 1) % len(self.cycle)])
            for i in range(len(self.cycle))
        ]

    @property
    def path(self) -> str:
        return " -> ".join([*self.cycle, self.cycle[0]])


# ---------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------

class WorkflowNotFoundError(WorkflowError):
    def __init__(self, path: str):
        super().__init__(
            kind="workflow_not_found",
            message=f"{path} does not exist",
            details={"path": path},
        )


class WorkflowUnreadableError(WorkflowError):
    def __init__(self, path: str, reason: str):
        super().__init__(
            kind="workflow_unreadable",
            message=f"cannot read {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class UnsupportedImageError(WorkflowError):
    def __init__(self, action: str, uses: str):
        super().__init__(
            kind="unsupported_image",
            message=(
                f"action '{action}' uses '{uses}': only pre-built image "
                "references (docker://*) are supported currently"
            ),
            details={"action": action, "uses": uses},
        )


class DockerUnavailableError(WorkflowError):
    def __init__(self, binary: str):
        super().__init__(
            kind="docker_unavailable",
            message=f"failed to start docker ({binary})",
            details={"hint": "Install Docker and ensure the daemon is running."},
        )


class GitError(WorkflowError):
    def __init__(self, message: str):
        super().__init__(kind="git", message=message)
