# winget.py
# Wrapper around the Windows package manager and its bootstrap.

from __future__ import annotations

import logging
import tempfile
import urllib.request
from pathlib import Path
from typing import TYPE_CHECKING, List

from .command import CmdResult, CommandRunner, ToolNotFound, run_cmd

if TYPE_CHECKING:
    from ..environment import EnvironmentView

logger = logging.getLogger(__name__)


APP_INSTALLER_FAMILY = "Microsoft.DesktopAppInstaller_8wekyb3d8bbwe"
APP_INSTALLER_URL = "https://aka.ms/getwinget"
BUNDLE_NAME = "Microsoft.DesktopAppInstaller.msixbundle"

# silent, no license prompts, pinned to the community source
INSTALL_FLAGS = [
    "--exact",
    "--source", "winget",
    "--silent",
    "--accept-package-agreements",
    "--accept-source-agreements",
]


def install_args(package_id: str) -> List[str]:
    return ["winget", "install", "--id", package_id, *INSTALL_FLAGS]


def install_package(
    env: "EnvironmentView",
    package_id: str,
    *,
    runner: CommandRunner = run_cmd,
) -> CmdResult:
    """Install a package by id. winget is a no-op when it is already present."""
    return runner(install_args(package_id), env=env)


def is_listed(
    env: "EnvironmentView",
    package_id: str,
    *,
    runner: CommandRunner = run_cmd,
) -> bool:
    """
    True if `winget list` reports the package as installed.

    winget exits non-zero with "No installed package found" when absent,
    so both the exit code and the id in the output are checked.
    """
    r = runner(
        ["winget", "list", "--id", package_id, "--exact", "--accept-source-agreements"],
        env=env,
        check=False,
    )
    return r.ok and package_id.lower() in r.stdout.lower()


def _powershell(
    env: "EnvironmentView",
    script: str,
    *,
    runner: CommandRunner,
) -> CmdResult:
    return runner(
        ["powershell", "-NoProfile", "-NonInteractive", "-ExecutionPolicy", "Bypass", "-Command", script],
        env=env,
    )


def register_app_installer(env: "EnvironmentView", *, runner: CommandRunner = run_cmd) -> CmdResult:
    """Re-register the App Installer package that ships winget with Windows."""
    return _powershell(
        env,
        f"Add-AppxPackage -RegisterByFamilyName -MainPackage {APP_INSTALLER_FAMILY}",
        runner=runner,
    )


def download_app_installer(dest_dir: Path, *, url: str = APP_INSTALLER_URL) -> Path:
    """Download the App Installer bundle into dest_dir. Returns the local path."""
    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    target = dest_dir / BUNDLE_NAME

    logger.info("Downloading %s -> %s", url, target)
    req = urllib.request.Request(url, headers={"User-Agent": "devstation"})
    with urllib.request.urlopen(req) as response, target.open("wb") as fh:
        while True:
            chunk = response.read(1 << 16)
            if not chunk:
                break
            fh.write(chunk)
    return target


def install_bundle(env: "EnvironmentView", bundle: Path, *, runner: CommandRunner = run_cmd) -> CmdResult:
    return _powershell(env, f"Add-AppxPackage -Path '{bundle}'", runner=runner)


def bootstrap(env: "EnvironmentView", *, runner: CommandRunner = run_cmd) -> None:
    """
    Make winget available.

    Registering the preinstalled App Installer is enough on most machines;
    otherwise the bundle is downloaded and installed.
    """
    try:
        register_app_installer(env, runner=runner)
        env.refresh()
        if env.which("winget"):
            return
        logger.info("winget still missing after registration; downloading App Installer")
    except ToolNotFound:
        raise
    except Exception as e:
        logger.warning("App Installer registration failed: %s", e)

    with tempfile.TemporaryDirectory(prefix="devstation-", ignore_cleanup_errors=True) as tmp:
        bundle = download_app_installer(Path(tmp))
        install_bundle(env, bundle, runner=runner)
