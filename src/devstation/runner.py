# runner.py
from __future__ import annotations

import inspect
import logging
import runpy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .dag import PlanError, topo_order
from .model import (
    FailureKind,
    Presence,
    RunReport,
    Step,
    StepContext,
    StepResult,
    StepStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class ProvisioningError(Exception):
    """
    Structured provisioning error with enough context for:
      - clean CLI output
      - the remediation hint in the final summary
      - debugging without full tracebacks
    """
    kind: FailureKind
    step: str | None
    message: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind.value}: {self.message}"]
        if self.step:
            lines.append(f"step={self.step}")
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


# ----------------------------------------------------------------------
# Plan loading (local file)
# ----------------------------------------------------------------------

def load_plan(path: str | Path, settings: Any = None) -> List[Step]:
    """
    Load a plan from a python file path.

    The file must define either:
      - build_plan(settings) -> List[Step]   (or build_plan() with no arguments)
      - STEPS = [Step, ...]

    The plan is ordered once before it is returned, so a cycle fails here.
    """
    plan_path = Path(path).expanduser().resolve()
    if not plan_path.exists():
        raise FileNotFoundError(f"Plan file not found: {plan_path}")
    if plan_path.suffix != ".py":
        raise ValueError(f"Plan must be a .py file, got: {plan_path.name}")

    module_name = f"devstation_plan_{plan_path.stem}"
    globals_dict = runpy.run_path(str(plan_path), run_name=module_name)

    steps = None
    factory = globals_dict.get("build_plan")
    if callable(factory):
        if inspect.signature(factory).parameters:
            steps = factory(settings)
        else:
            steps = factory()
    elif "STEPS" in globals_dict:
        steps = globals_dict["STEPS"]

    if not isinstance(steps, list) or not all(isinstance(s, Step) for s in steps):
        raise TypeError(
            "Plan must return/define a List[Step]. "
            "Define build_plan(settings) -> List[Step] or STEPS = [Step, ...]."
        )

    # rejects duplicates, unknown needs and cycles before anything runs
    topo_order(steps)
    return steps


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

def _probe(step: Step, ctx: StepContext) -> Tuple[Presence, str]:
    """Evaluate a probe; exceptions count as an inconclusive answer."""
    try:
        return Presence.of(step.probe(ctx)), ""
    except Exception as e:
        logger.warning("[%s] probe raised: %s", step.name, e)
        return Presence.INDETERMINATE, str(e)


def _apply(step: Step, ctx: StepContext) -> Tuple[Optional[str], FailureKind]:
    """Invoke apply. Returns (failure reason, kind); the reason is None on success."""
    try:
        outcome = step.apply(ctx)
    except ProvisioningError as e:
        logger.warning("[%s] apply failed: %s", step.name, e)
        return e.message, e.kind
    except Exception as e:
        logger.warning("[%s] apply failed: %s", step.name, e)
        return (str(e) or e.__class__.__name__), FailureKind.APPLY_FAILED
    if outcome is False:
        return "apply reported failure", FailureKind.APPLY_FAILED
    return None, FailureKind.APPLY_FAILED


def _result(step: Step, status: StepStatus, detail: str = "", kind: FailureKind | None = None) -> StepResult:
    hint = step.hint if not status.succeeded else None
    return StepResult(name=step.name, status=status, detail=detail, kind=kind, hint=hint)


def _attempt(step: Step, ctx: StepContext) -> StepResult:
    """apply, refresh the environment, then confirm the postcondition."""
    reason, kind = _apply(step, ctx)

    # installers write the persisted search path, even on partial failure
    try:
        ctx.env.refresh()
    except Exception as e:
        logger.warning("Search path refresh failed after %s: %s", step.name, e)

    if reason is not None:
        return _result(step, StepStatus.FAILED, reason, kind)

    after, why = _probe(step, ctx)
    if after is Presence.PRESENT:
        return _result(step, StepStatus.APPLIED, "installed/configured")
    if after is Presence.ABSENT:
        return _result(
            step,
            StepStatus.FAILED,
            "apply reported success but the check still fails",
            FailureKind.POSTCONDITION_MISMATCH,
        )
    return _result(
        step,
        StepStatus.FAILED,
        why or "state could not be verified after apply",
        FailureKind.PROBE_INCONCLUSIVE,
    )


def _run_step(
    step: Step,
    ctx: StepContext,
    results: Dict[str, StepResult],
    *,
    retry_prompt: bool,
) -> StepResult:
    blocked = [d for d in step.needs if not results[d].status.succeeded]
    if blocked:
        detail = ", ".join(f"{d} {results[d].status.value}" for d in blocked)
        return _result(step, StepStatus.SKIPPED, f"dependency not met ({detail})", FailureKind.DEPENDENCY_UNAVAILABLE)

    before, why = _probe(step, ctx)
    if before is Presence.PRESENT:
        return _result(step, StepStatus.SATISFIED, "already in place")
    if before is Presence.INDETERMINATE:
        return _result(
            step,
            StepStatus.FAILED,
            why or "current state could not be determined",
            FailureKind.PROBE_INCONCLUSIVE,
        )

    if step.confirm and not ctx.prompter.confirm(step.confirm):
        return _result(step, StepStatus.SKIPPED, "declined by user", FailureKind.USER_ABORTED)

    while True:
        result = _attempt(step, ctx)
        if result.status is not StepStatus.FAILED or not retry_prompt:
            return result
        logger.info("[%s] failed: %s", step.name, result.detail)
        if not ctx.prompter.confirm(f"{step.label} failed ({result.detail}). Retry?"):
            return result


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def run_steps(
    steps: Sequence[Step],
    ctx: StepContext,
    *,
    retry_prompt: bool = False,
    on_result: Optional[Callable[[StepResult], None]] = None,
) -> RunReport:
    """
    Run every step once, in dependency order.

    - A failed step never halts the run; its dependents are skipped.
    - A failed fatal step (the bootstrap) halts it immediately.
    """
    ordered = topo_order(steps)
    for s in ordered:
        s.last_result = None

    results: Dict[str, StepResult] = {}
    report = RunReport()

    for s in ordered:
        logger.info("Step %s", s.name)
        result = _run_step(s, ctx, results, retry_prompt=retry_prompt)
        s.last_result = result
        results[s.name] = result
        report.results.append(result)
        logger.info("Step %s -> %s %s", s.name, result.status.value, result.detail)

        if on_result is not None:
            on_result(result)

        if s.fatal and result.status is StepStatus.FAILED:
            logger.error("Fatal step %s failed; halting", s.name)
            report.halted = True
            break

    return report


def check_steps(steps: Sequence[Step], ctx: StepContext) -> List[Tuple[str, Presence]]:
    """Probe every step in dependency order without applying anything."""
    return [(s.name, _probe(s, ctx)[0]) for s in topo_order(steps)]


__all__ = [
    "PlanError",
    "ProvisioningError",
    "check_steps",
    "load_plan",
    "run_steps",
]
