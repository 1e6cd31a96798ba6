"""Pytest fixtures for devstation tests.

Nothing here runs a real external tool: the machine is simulated by
``FakeMachine``, which plays both the inspector and the toolbox.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pytest

from devstation.dsl import step
from devstation.environment import EnvironmentView, StaticPathSource
from devstation.model import Presence, Step, StepContext
from devstation.tools.command import CmdResult, CommandFailed
from devstation.workstation import Settings


class ScriptedPrompter:
    """Answers prompts from pre-recorded lists and remembers what was asked."""

    def __init__(self, texts: Sequence[str] = (), confirms: Sequence[bool] = ()):
        self.texts = list(texts)
        self.confirms = list(confirms)
        self.asked: List[str] = []

    def ask_text(self, message: str, default: Optional[str] = None) -> str:
        self.asked.append(message)
        if self.texts:
            return self.texts.pop(0)
        if default:
            return default
        raise AssertionError(f"unexpected text prompt: {message}")

    def confirm(self, message: str) -> bool:
        self.asked.append(message)
        # default-yes once the script runs out
        return self.confirms.pop(0) if self.confirms else True


PACKAGE_EXECUTABLES = {
    "Git.Git": "git",
    "GitHub.cli": "gh",
    "Microsoft.VisualStudioCode": "code",
    "Python.Python.3.12": "python",
}


def bin_dir(executable: str) -> str:
    return f"/fake/{executable}/bin"


@dataclass
class FakeMachine:
    """
    A simulated Windows box.

    Installing a package appends its directory to the persisted machine path
    only, so a probe sees it only after the runner refreshed the view.
    """
    env: EnvironmentView
    packages: set = field(default_factory=set)
    gitconfig: Dict[str, str] = field(default_factory=dict)
    extensions: set = field(default_factory=set)
    gh_logged_in: bool = False

    bootstrap_fails: bool = False
    fail_install: set = field(default_factory=set)
    silent_fail: set = field(default_factory=set)
    calls: List[str] = field(default_factory=list)

    # -- helpers -------------------------------------------------------

    def _add_to_path(self, executable: str) -> None:
        source = self.env.source
        entries = [e for e in source.machine.split(os.pathsep) if e]
        entries.append(bin_dir(executable))
        source.machine = os.pathsep.join(entries)

    def preinstall(self, *package_ids: str, winget: bool = True) -> None:
        if winget:
            self._add_to_path("winget")
        for pid in package_ids:
            self.packages.add(pid)
            if pid in PACKAGE_EXECUTABLES:
                self._add_to_path(PACKAGE_EXECUTABLES[pid])
        self.env.refresh()

    def on_path(self, executable: str) -> bool:
        return bin_dir(executable) in self.env.path.split(os.pathsep)

    # -- inspector side -------------------------------------------------

    def executable(self, name: str, *version_args: str) -> Presence:
        return Presence.of(self.on_path(name))

    def package(self, package_id: str) -> Presence:
        return Presence.of(package_id in self.packages)

    def git_config(self, key: str) -> Optional[str]:
        return self.gitconfig.get(key)

    def git_config_matches(self, key: str, value: str) -> Presence:
        if not self.on_path("git"):
            return Presence.INDETERMINATE
        return Presence.of(self.gitconfig.get(key) == value)

    def vscode_extension(self, extension_id: str) -> Presence:
        if not self.on_path("code"):
            return Presence.INDETERMINATE
        return Presence.of(extension_id in self.extensions)

    def gh_authenticated(self) -> Presence:
        return Presence.of(self.gh_logged_in)

    # -- toolbox side ---------------------------------------------------

    def bootstrap_package_manager(self) -> None:
        self.calls.append("bootstrap")
        if self.bootstrap_fails:
            raise CommandFailed(argv=["powershell"], exit_code=1, stderr="network unreachable")
        self._add_to_path("winget")

    def install_package(self, package_id: str) -> None:
        self.calls.append(f"install {package_id}")
        if package_id in self.fail_install:
            raise CommandFailed(argv=["winget", "install", "--id", package_id], exit_code=1)
        if package_id in self.silent_fail:
            return
        self.packages.add(package_id)
        if package_id in PACKAGE_EXECUTABLES:
            self._add_to_path(PACKAGE_EXECUTABLES[package_id])

    def set_git_config(self, key: str, value: str) -> None:
        self.calls.append(f"git config {key}")
        self.gitconfig[key] = value

    def install_extension(self, extension_id: str) -> None:
        self.calls.append(f"extension {extension_id}")
        self.extensions.add(extension_id)

    def gh_login(self) -> None:
        self.calls.append("gh login")
        self.gh_logged_in = True


@pytest.fixture
def env() -> EnvironmentView:
    return EnvironmentView(variables={"PATH": ""}, source=StaticPathSource())


@pytest.fixture
def machine(env: EnvironmentView) -> FakeMachine:
    return FakeMachine(env=env)


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def settings() -> Settings:
    return Settings(git_name="Ada Lovelace", git_email="ada@example.com")


@pytest.fixture
def ctx(env: EnvironmentView, machine: FakeMachine, prompter: ScriptedPrompter, settings: Settings) -> StepContext:
    return StepContext(env=env, inspector=machine, tools=machine, prompter=prompter, settings=settings)


# ---------------------------------------------------------------------
# Generic steps for runner tests
# ---------------------------------------------------------------------

@dataclass
class Probeable:
    """State behind a hand-made step, with call counters."""
    present: bool = False
    apply_raises: Optional[Exception] = None
    apply_returns: object = None
    takes_effect: bool = True
    probe_raises: Optional[Exception] = None
    probes: int = 0
    applies: int = 0

    def probe(self, ctx: StepContext) -> bool:
        self.probes += 1
        if self.probe_raises is not None:
            raise self.probe_raises
        return self.present

    def apply(self, ctx: StepContext):
        self.applies += 1
        if self.apply_raises is not None:
            raise self.apply_raises
        if self.takes_effect:
            self.present = True
        return self.apply_returns


def tracked(name: str, state: Probeable, needs: Sequence[str] = (), **kwargs) -> Step:
    return step(name, probe=state.probe, apply=state.apply, needs=list(needs), **kwargs)


def fake_result(argv: Sequence[str], returncode: int = 0, stdout: str = "", stderr: str = "") -> CmdResult:
    return CmdResult(argv=list(argv), returncode=returncode, stdout=stdout, stderr=stderr)
