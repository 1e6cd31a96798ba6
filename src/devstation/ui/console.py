"""Console output formatting utilities for devstation."""

from __future__ import annotations

import sys
import traceback
from typing import Iterable, Optional, Tuple

from ..model import Presence, RunReport, StepResult, StepStatus


STATUS_MARKS = {
    StepStatus.SATISFIED: "✓",
    StepStatus.APPLIED: "+",
    StepStatus.FAILED: "✗",
    StepStatus.SKIPPED: "⏭",
    StepStatus.NOT_RUN: " ",
}


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))

    def print_run_started(
        self,
        machine: str,
        plan: str,
        step_count: int,
        log_path: Optional[str] = None,
    ) -> None:
        """Print run start information."""
        print("\nPROVISIONING STARTED")
        print(f"Machine: {machine}")
        print(f"Plan: {plan}")
        print(f"Steps: {step_count}")
        if log_path:
            print(f"Log: {log_path}")
        print()

    def print_step_result(self, result: StepResult) -> None:
        """Print the one status line of a resolved step."""
        mark = STATUS_MARKS.get(result.status, "?")
        line = f"{mark} {result.name}: {result.status.value}"
        if result.detail:
            line += f" ({result.detail})"
        print(line)

    def print_check(self, probes: Iterable[Tuple[str, Presence]]) -> None:
        """Print the outcome of a probe-only run."""
        self.print_header("CHECK")
        for name, presence in probes:
            state = {
                Presence.PRESENT: "ok",
                Presence.ABSENT: "would apply",
                Presence.INDETERMINATE: "unknown",
            }[presence]
            print(f"  {name}: {state}")

    def print_results(self, report: RunReport) -> None:
        """Print final results summary."""
        print("\n" + "=" * 40)
        print("RESULTS")
        print("=" * 40)
        for r in report.results:
            print(f"  {r.name}: {r.status.value.upper()}")
            if r.kind is not None and not r.status.succeeded:
                print(f"    reason: {r.kind.value}: {r.detail}")
            if r.hint and not r.status.succeeded:
                print(f"    try manually: {r.hint}")
        if report.halted:
            print("\nStopped early: the package manager bootstrap failed.")
        applied = report.count(StepStatus.APPLIED)
        satisfied = report.count(StepStatus.SATISFIED)
        failed = report.count(StepStatus.FAILED)
        skipped = report.count(StepStatus.SKIPPED)
        print(f"\n{applied} applied, {satisfied} already satisfied, {failed} failed, {skipped} skipped")
        if report.ok:
            print("Done. Open a new terminal so the updated PATH is picked up.")
        else:
            print("Some steps did not complete. Re-run devstation after fixing them.")

    def print_error(self, title: str, message: str, suggestion: Optional[str] = None) -> None:
        """Print a problem that stops devstation before or outside a step, on stderr."""
        print(f"\nERROR: {title}", file=sys.stderr)
        for line in message.splitlines() or [""]:
            print(f"  {line}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: BaseException) -> None:
        # full traceback with --debug only
        if self.debug:
            traceback.print_exception(exc)
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        print(message)

    def print_debug(self, message: str) -> None:
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)
