from __future__ import annotations

from typing import TYPE_CHECKING

from . import gh, git, vscode, winget
from .command import CmdResult, CommandFailed, CommandRunner, ToolNotFound, run_cmd

if TYPE_CHECKING:
    from ..environment import EnvironmentView


class Toolbox:
    """The mutating side of the external tools, as called by apply actions."""

    def __init__(self, env: "EnvironmentView", runner: CommandRunner = run_cmd):
        self.env = env
        self.runner = runner

    def bootstrap_package_manager(self) -> None:
        winget.bootstrap(self.env, runner=self.runner)

    def install_package(self, package_id: str) -> None:
        winget.install_package(self.env, package_id, runner=self.runner)

    def set_git_config(self, key: str, value: str) -> None:
        git.config_set(self.env, key, value, runner=self.runner)

    def install_extension(self, extension_id: str) -> None:
        vscode.install_extension(self.env, extension_id, runner=self.runner)

    def gh_login(self) -> None:
        gh.auth_login(self.env, runner=self.runner)


__all__ = [
    "Toolbox",
    "CmdResult",
    "CommandFailed",
    "CommandRunner",
    "ToolNotFound",
    "run_cmd",
]
