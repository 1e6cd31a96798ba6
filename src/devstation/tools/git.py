# git.py
# Small, focused wrapper around the Git CLI.
# All global-configuration reads and writes go through here so steps
# never build `git config` command lines themselves.

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from .command import CmdResult, CommandFailed, CommandRunner, run_cmd

if TYPE_CHECKING:
    from ..environment import EnvironmentView


def _git(
    env: "EnvironmentView",
    args: List[str],
    *,
    runner: CommandRunner = run_cmd,
    check: bool = True,
) -> CmdResult:
    """
    Execute a git command through the environment view.

    This is the single low-level entry point for all Git operations in this file.

    Args:
        env: Environment view used to resolve `git` and build its environment.
        args: List of git arguments (e.g. ["config", "--global", "--get", "user.name"])
        check: Raise CommandFailed on a non-zero exit.
    """
    return runner(["git", *args], env=env, check=check)


def config_get(
    env: "EnvironmentView",
    key: str,
    *,
    runner: CommandRunner = run_cmd,
) -> Optional[str]:
    """
    Return the global value of a configuration key, or None if unset.

    `git config --get` exits 1 when the key is missing; any other non-zero
    exit is a real error and is raised.
    """
    r = _git(env, ["config", "--global", "--get", key], runner=runner, check=False)
    if r.returncode == 1:
        return None
    if not r.ok:
        # e.g. unreadable ~/.gitconfig
        raise CommandFailed(argv=r.argv, exit_code=r.returncode, stderr=r.stderr)
    return r.stdout.strip()


def config_set(
    env: "EnvironmentView",
    key: str,
    value: str,
    *,
    runner: CommandRunner = run_cmd,
) -> None:
    """Write a global configuration key, replacing any previous value."""
    _git(env, ["config", "--global", key, value], runner=runner)
