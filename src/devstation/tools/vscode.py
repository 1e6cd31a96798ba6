# vscode.py
from __future__ import annotations

from typing import TYPE_CHECKING, List

from .command import CommandRunner, run_cmd

if TYPE_CHECKING:
    from ..environment import EnvironmentView


def list_extensions(env: "EnvironmentView", *, runner: CommandRunner = run_cmd) -> List[str]:
    """Installed extension ids, lower-cased."""
    r = runner(["code", "--list-extensions"], env=env)
    return [line.strip().lower() for line in r.stdout.splitlines() if line.strip()]


def install_extension(env: "EnvironmentView", extension_id: str, *, runner: CommandRunner = run_cmd) -> None:
    runner(["code", "--install-extension", extension_id, "--force"], env=env)
