from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from ..environment import EnvironmentView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class CommandFailed(Exception):
    argv: list[str]
    exit_code: Optional[int]
    stderr: str = ""

    def __str__(self) -> str:
        msg = f"Command failed (exit={self.exit_code}): {format_argv(self.argv)}"
        if self.stderr.strip():
            msg += f"\n{self.stderr.strip()[-2000:]}"
        return msg


@dataclass
class ToolNotFound(CommandFailed):
    def __str__(self) -> str:
        return f"'{self.argv[0]}' is not resolvable on the search path"


class CommandRunner(Protocol):
    def __call__(
        self,
        argv: Sequence[str],
        *,
        env: Optional["EnvironmentView"] = None,
        check: bool = True,
        capture: bool = True,
        timeout: Optional[float] = None,
    ) -> CmdResult:
        ...


def format_argv(argv: Sequence[str]) -> str:
    return subprocess.list2cmdline(list(argv))


def run_cmd(
    argv: Sequence[str],
    *,
    env: Optional["EnvironmentView"] = None,
    check: bool = True,
    capture: bool = True,
    timeout: Optional[float] = None,
) -> CmdResult:
    """Run an external command with consistent logging.

    - argv[0] is resolved against the environment view, so tools installed
      earlier in the same run are found without restarting the process.
    - capture=False inherits the console (interactive flows).
    - check=True raises CommandFailed on a non-zero exit.
    """

    argv_list = list(argv)
    logger.info("CMD %s", format_argv(argv_list))

    resolved = env.which(argv_list[0]) if env is not None else None
    if env is not None and resolved is None:
        raise ToolNotFound(argv=argv_list, exit_code=None)
    exe_argv = [resolved or argv_list[0], *argv_list[1:]]

    try:
        p = subprocess.run(
            exe_argv,
            text=True,
            # winget and git write UTF-8 regardless of the console code page
            encoding="utf-8",
            errors="replace",
            stdout=subprocess.PIPE if capture else None,
            stderr=subprocess.PIPE if capture else None,
            env=env.environ() if env is not None else None,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise ToolNotFound(argv=argv_list, exit_code=None) from e

    stdout = p.stdout or ""
    stderr = p.stderr or ""
    if stdout:
        logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())

    if check and p.returncode != 0:
        raise CommandFailed(argv=argv_list, exit_code=p.returncode, stderr=stderr)

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)
