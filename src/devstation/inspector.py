"""Read-only checks of machine state, answered as tri-state Presence."""

from __future__ import annotations

import logging
from typing import Optional

from .environment import EnvironmentView
from .model import Presence
from .tools import gh, git, vscode, winget
from .tools.command import CommandRunner, ToolNotFound, run_cmd

logger = logging.getLogger(__name__)


class SystemInspector:
    """
    Probes used by steps. Nothing here mutates the machine.

    A tool that cannot be run, or an error such as permission denied,
    yields INDETERMINATE rather than ABSENT: the state is unknown, not missing.
    """

    def __init__(self, env: EnvironmentView, runner: CommandRunner = run_cmd):
        self.env = env
        self.runner = runner

    def executable(self, name: str, *version_args: str) -> Presence:
        """
        Is `name` resolvable and does it answer a version query?

        Running it catches stubs that resolve but do nothing useful, such as
        the Store alias for python.exe.
        """
        if self.env.which(name) is None:
            return Presence.ABSENT
        args = list(version_args) or ["--version"]
        try:
            r = self.runner([name, *args], env=self.env, check=False, timeout=60)
        except ToolNotFound:
            return Presence.ABSENT
        except Exception as e:
            logger.warning("Could not run %s: %s", name, e)
            return Presence.INDETERMINATE
        return Presence.PRESENT if r.ok else Presence.ABSENT

    def package(self, package_id: str) -> Presence:
        try:
            return Presence.of(winget.is_listed(self.env, package_id, runner=self.runner))
        except Exception as e:
            logger.warning("winget list %s failed: %s", package_id, e)
            return Presence.INDETERMINATE

    def git_config(self, key: str) -> Optional[str]:
        """Current global value, or None when unset or unreadable."""
        try:
            return git.config_get(self.env, key, runner=self.runner)
        except Exception as e:
            logger.debug("git config --get %s failed: %s", key, e)
            return None

    def git_config_matches(self, key: str, value: str) -> Presence:
        try:
            current = git.config_get(self.env, key, runner=self.runner)
        except Exception as e:
            logger.warning("git config --get %s failed: %s", key, e)
            return Presence.INDETERMINATE
        return Presence.of(current == value)

    def vscode_extension(self, extension_id: str) -> Presence:
        try:
            installed = vscode.list_extensions(self.env, runner=self.runner)
        except Exception as e:
            logger.warning("code --list-extensions failed: %s", e)
            return Presence.INDETERMINATE
        return Presence.of(extension_id.lower() in installed)

    def gh_authenticated(self) -> Presence:
        try:
            return Presence.of(gh.auth_status(self.env, runner=self.runner))
        except Exception as e:
            logger.warning("gh auth status failed: %s", e)
            return Presence.INDETERMINATE
