# step_workflows/github.py
from __future__ import annotations

from typing import List, Optional

from ..dsl import step
from ..model import Presence, Step, StepContext


def gh_auth_step(
    name: str = "github-auth",
    *,
    needs: Optional[List[str]] = None,
) -> Step:
    """Walk the user through `gh auth login` unless already logged in."""

    def probe(ctx: StepContext) -> Presence:
        return ctx.inspector.gh_authenticated()

    def apply(ctx: StepContext) -> None:
        ctx.tools.gh_login()

    return step(
        name,
        probe=probe,
        apply=apply,
        needs=needs or ["github-cli"],
        description="GitHub CLI authentication",
        hint="gh auth login",
        confirm="Log in to GitHub with the GitHub CLI now?",
    )
