# step_workflows/git.py
from __future__ import annotations

from typing import List, Optional

from ..dsl import step
from ..model import Presence, Step, StepContext
from ..tools.command import format_argv


def git_config_step(
    name: str,
    key: str,
    value: str,
    *,
    needs: Optional[List[str]] = None,
    description: Optional[str] = None,
) -> Step:
    """Ensure a global git configuration key holds `value` (overwriting any other)."""

    def probe(ctx: StepContext) -> Presence:
        return ctx.inspector.git_config_matches(key, value)

    def apply(ctx: StepContext) -> None:
        ctx.tools.set_git_config(key, value)

    return step(
        name,
        probe=probe,
        apply=apply,
        needs=needs or ["git"],
        description=description or f"git {key}",
        hint=format_argv(["git", "config", "--global", key, value]),
    )
