# step_workflows/winget.py
from __future__ import annotations

from typing import List, Optional

from ..dsl import step
from ..model import FailureKind, Presence, Step, StepContext
from ..runner import ProvisioningError
from ..tools.command import ToolNotFound, format_argv
from ..tools.winget import APP_INSTALLER_URL, install_args


BOOTSTRAP_STEP = "winget"


# ---------------------------------------------------------------------
# Package manager bootstrap
# ---------------------------------------------------------------------

def bootstrap_step(name: str = BOOTSTRAP_STEP) -> Step:
    """The step every other step depends on. Its failure halts the run."""

    def probe(ctx: StepContext) -> Presence:
        return ctx.inspector.executable("winget", "--version")

    def apply(ctx: StepContext) -> None:
        try:
            ctx.tools.bootstrap_package_manager()
        except ToolNotFound as e:
            raise ProvisioningError(
                kind=FailureKind.DEPENDENCY_UNAVAILABLE,
                step=name,
                message=str(e),
                details={"needed_for": "App Installer registration"},
            ) from e

    return step(
        name,
        probe=probe,
        apply=apply,
        description="Windows Package Manager (winget)",
        hint=f"Install 'App Installer' from the Microsoft Store or {APP_INSTALLER_URL}",
        fatal=True,
    )


# ---------------------------------------------------------------------
# Package install
# ---------------------------------------------------------------------

def package_step(
    name: str,
    package_id: str,
    *,
    executable: Optional[str] = None,
    needs: Optional[List[str]] = None,
    description: Optional[str] = None,
    confirm: Optional[str] = None,
) -> Step:
    """
    Install a winget package.

    With `executable`, the check is "does it resolve and run", which also
    catches installers that exit 0 without putting anything on the path.
    Without it (e.g. a browser) the check falls back to `winget list`.
    """

    def probe(ctx: StepContext) -> Presence:
        if executable:
            return ctx.inspector.executable(executable, "--version")
        return ctx.inspector.package(package_id)

    def apply(ctx: StepContext) -> None:
        ctx.tools.install_package(package_id)

    return step(
        name,
        probe=probe,
        apply=apply,
        needs=[BOOTSTRAP_STEP] if needs is None else needs,
        description=description or package_id,
        hint=format_argv(install_args(package_id)),
        confirm=confirm,
    )
