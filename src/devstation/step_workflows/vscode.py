# step_workflows/vscode.py
from __future__ import annotations

from typing import List, Optional

from ..dsl import step
from ..model import Presence, Step, StepContext
from ..tools.command import format_argv


def extension_step(
    name: str,
    extension_id: str,
    *,
    needs: Optional[List[str]] = None,
    description: Optional[str] = None,
) -> Step:
    """Install an editor extension through the `code` CLI."""

    def probe(ctx: StepContext) -> Presence:
        return ctx.inspector.vscode_extension(extension_id)

    def apply(ctx: StepContext) -> None:
        ctx.tools.install_extension(extension_id)

    return step(
        name,
        probe=probe,
        apply=apply,
        needs=needs or ["vscode"],
        description=description or f"VS Code extension {extension_id}",
        hint=format_argv(["code", "--install-extension", extension_id]),
    )
