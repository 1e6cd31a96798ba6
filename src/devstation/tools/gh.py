# gh.py
from __future__ import annotations

from typing import TYPE_CHECKING

from .command import CommandRunner, run_cmd

if TYPE_CHECKING:
    from ..environment import EnvironmentView


def auth_status(env: "EnvironmentView", *, runner: CommandRunner = run_cmd) -> bool:
    """True when `gh auth status` reports a logged-in account."""
    r = runner(["gh", "auth", "status"], env=env, check=False)
    return r.ok


def auth_login(env: "EnvironmentView", *, runner: CommandRunner = run_cmd) -> None:
    """
    Run the interactive login flow on the user's console.

    The flow is awaited, not parsed; success is decided by probing
    `auth_status` afterwards.
    """
    runner(["gh", "auth", "login"], env=env, capture=False)
    # let git use gh as its credential helper
    runner(["gh", "auth", "setup-git"], env=env, check=False)
