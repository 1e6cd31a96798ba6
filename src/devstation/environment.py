"""Explicit view of the process environment and its search path.

Installers update the persisted machine/user ``Path`` values, not the
environment of the process that launched them. Steps therefore read and
resolve executables through an :class:`EnvironmentView`, which the runner
refreshes after every apply.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


MACHINE_ENV_KEY = r"SYSTEM\CurrentControlSet\Control\Session Manager\Environment"
USER_ENV_KEY = r"Environment"


def platform_supported() -> bool:
    return sys.platform == "win32"


class PathSource(Protocol):
    """Where the persisted search path lives."""

    def machine_path(self) -> str:
        ...

    def user_path(self) -> str:
        ...


class RegistryPathSource:
    """Reads the persisted ``Path`` values from the Windows registry."""

    def _read(self, hive_name: str, key: str) -> str:
        import winreg

        hive = getattr(winreg, hive_name)
        try:
            with winreg.OpenKey(hive, key) as handle:
                value, _kind = winreg.QueryValueEx(handle, "Path")
        except FileNotFoundError:
            # a user without a personal Path has no value at all
            return ""
        return winreg.ExpandEnvironmentStrings(str(value))

    def machine_path(self) -> str:
        return self._read("HKEY_LOCAL_MACHINE", MACHINE_ENV_KEY)

    def user_path(self) -> str:
        return self._read("HKEY_CURRENT_USER", USER_ENV_KEY)


@dataclass
class StaticPathSource:
    """Fixed machine/user values. Mutable so tests can simulate installers."""
    machine: str = ""
    user: str = ""

    def machine_path(self) -> str:
        return self.machine

    def user_path(self) -> str:
        return self.user


def combine_paths(*parts: str, sep: str = os.pathsep) -> str:
    """Join search-path strings, dropping blanks and case-insensitive duplicates."""
    seen: set[str] = set()
    entries: List[str] = []
    for part in parts:
        for entry in (part or "").split(sep):
            entry = entry.strip()
            if not entry:
                continue
            key = entry.rstrip("\\/").lower()
            if key in seen:
                continue
            seen.add(key)
            entries.append(entry)
    return sep.join(entries)


@dataclass
class EnvironmentView:
    """
    A working copy of the process environment.

    Nothing here touches ``os.environ``; subprocesses get ``environ()``
    explicitly, and executables are resolved with ``which()``.
    """
    variables: Dict[str, str] = field(default_factory=dict)
    source: PathSource = field(default_factory=StaticPathSource)

    @classmethod
    def from_os(cls, source: Optional[PathSource] = None) -> "EnvironmentView":
        if source is None:
            source = RegistryPathSource() if platform_supported() else StaticPathSource(
                machine=os.environ.get("PATH", "")
            )
        return cls(variables=dict(os.environ), source=source)

    def _path_key(self) -> str:
        # Windows spells it "Path"; keep whatever casing is already there
        for key in self.variables:
            if key.upper() == "PATH":
                return key
        return "PATH"

    @property
    def path(self) -> str:
        return self.variables.get(self._path_key(), "")

    @path.setter
    def path(self, value: str) -> None:
        self.variables[self._path_key()] = value

    def refresh(self) -> str:
        """Recombine the persisted machine and user paths into the working copy."""
        combined = combine_paths(self.source.machine_path(), self.source.user_path())
        if combined != self.path:
            logger.info("Search path refreshed (%d entries)", len(combined.split(os.pathsep)) if combined else 0)
        self.path = combined
        return combined

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name, path=self.path)

    def environ(self) -> Dict[str, str]:
        return dict(self.variables)
