# dsl.py
from __future__ import annotations

from typing import List, Optional

from .model import ApplyFn, ProbeFn, Step


# ---------------------------------------------------------------------
# Functional step helper
# ---------------------------------------------------------------------

def step(
    name: str,
    *,
    probe: ProbeFn,
    apply: ApplyFn,
    needs: Optional[List[str]] = None,
    description: Optional[str] = None,
    hint: Optional[str] = None,
    confirm: Optional[str] = None,
    fatal: bool = False,
) -> Step:
    """Create a provisioning step."""
    if not name:
        raise ValueError("step() needs a non-empty name")
    return Step(
        name=name,
        probe=probe,
        apply=apply,
        needs=list(needs or []),
        description=description,
        hint=hint,
        confirm=confirm,
        fatal=fatal,
    )


# ---------------------------------------------------------------------
# Builder API
# ---------------------------------------------------------------------

class StepBuilder:
    def __init__(self, name: str):
        self.name = name
        self._needs: list[str] = []
        self._probe: Optional[ProbeFn] = None
        self._apply: Optional[ApplyFn] = None
        self._description: Optional[str] = None
        self._hint: Optional[str] = None
        self._confirm: Optional[str] = None
        self._fatal: bool = False

    def depends_on(self, *step_names: str):
        self._needs.extend(step_names)
        return self

    def probe_with(self, fn: ProbeFn):
        self._probe = fn
        return self

    def apply_with(self, fn: ApplyFn):
        self._apply = fn
        return self

    def describe(self, text: str):
        self._description = text
        return self

    def with_hint(self, text: str):
        self._hint = text
        return self

    def ask_first(self, question: str):
        self._confirm = question
        return self

    def mark_fatal(self, fatal: bool = True):
        self._fatal = fatal
        return self

    def build(self) -> Step:
        if self._probe is None:
            raise ValueError(f"Step '{self.name}' has no probe")
        if self._apply is None:
            raise ValueError(f"Step '{self.name}' has no apply")

        return step(
            self.name,
            probe=self._probe,
            apply=self._apply,
            needs=self._needs,
            description=self._description,
            hint=self._hint,
            confirm=self._confirm,
            fatal=self._fatal,
        )


def build(name: str) -> StepBuilder:
    """Convenience: build('git').probe_with(...).apply_with(...).build()"""
    return StepBuilder(name)


# ---------------------------------------------------------------------
# Plan helper (single-file story)
# ---------------------------------------------------------------------

def plan(*steps: Step) -> List[Step]:
    """
    Plan definition helper.

    Users can write, in a plan file:
        from devstation import plan, step

        def build_plan(settings):
            return plan(
                step(...),
                step(...),
            )

    Or define STEPS directly:
        STEPS = plan(step(...), step(...))
    """
    return list(steps)
