# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Union

if TYPE_CHECKING:
    from .environment import EnvironmentView
    from .inspector import SystemInspector
    from .prompts import Prompter
    from .tools import Toolbox
    from .workstation import Settings


class Presence(Enum):
    """Tri-state answer of a probe."""
    PRESENT = "present"
    ABSENT = "absent"
    INDETERMINATE = "indeterminate"

    @classmethod
    def of(cls, value: Union["Presence", bool, None]) -> "Presence":
        # probes may return a plain bool
        if isinstance(value, Presence):
            return value
        if value is None:
            return cls.INDETERMINATE
        return cls.PRESENT if value else cls.ABSENT


class StepStatus(Enum):
    NOT_RUN = "not-run"
    SATISFIED = "satisfied"
    APPLIED = "applied"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def succeeded(self) -> bool:
        return self in (StepStatus.SATISFIED, StepStatus.APPLIED)


class FailureKind(Enum):
    DEPENDENCY_UNAVAILABLE = "dependency-unavailable"
    PROBE_INCONCLUSIVE = "probe-inconclusive"
    APPLY_FAILED = "apply-failed"
    POSTCONDITION_MISMATCH = "postcondition-mismatch"
    USER_ABORTED = "user-aborted"


@dataclass(frozen=True)
class StepResult:
    """Terminal outcome of one step in one run."""
    name: str
    status: StepStatus
    detail: str = ""
    kind: Optional[FailureKind] = None
    hint: Optional[str] = None


@dataclass
class StepContext:
    """Collaborators handed to every probe and apply."""
    env: "EnvironmentView"
    inspector: "SystemInspector"
    tools: "Toolbox"
    prompter: "Prompter"
    settings: Optional["Settings"] = None


ProbeFn = Callable[[StepContext], Union[Presence, bool]]
ApplyFn = Callable[[StepContext], Any]


@dataclass
class Step:
    """
    A provisioning step: probe + conditional apply + dependencies.

    `needs` lists step names that must end satisfied/applied before this one
    is attempted. `fatal` marks the bootstrap step whose failure halts the run.
    """
    name: str
    probe: ProbeFn
    apply: ApplyFn

    needs: List[str] = field(default_factory=list)
    description: Optional[str] = None
    hint: Optional[str] = None          # manual remediation command
    confirm: Optional[str] = None       # yes/no question asked before apply
    fatal: bool = False

    # None means NotRun
    last_result: Optional[StepResult] = None

    @property
    def label(self) -> str:
        return self.description or self.name

    @property
    def status(self) -> StepStatus:
        if self.last_result is None:
            return StepStatus.NOT_RUN
        return self.last_result.status


@dataclass
class RunReport:
    results: List[StepResult] = field(default_factory=list)
    halted: bool = False

    @property
    def ok(self) -> bool:
        return not self.halted and all(r.status.succeeded for r in self.results)

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def by_name(self) -> dict[str, StepResult]:
        return {r.name: r for r in self.results}

    def count(self, status: StepStatus) -> int:
        return sum(1 for r in self.results if r.status is status)
