# workstation.py
# The default developer workstation: package manager, git + identity,
# GitHub CLI + login, VS Code + Python extension, Python, browser.
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .dsl import plan
from .model import Step
from .step_workflows import (
    BOOTSTRAP_STEP,
    bootstrap_step,
    extension_step,
    gh_auth_step,
    git_config_step,
    package_step,
)


@dataclass
class Settings:
    """What to install and who the git identity belongs to."""
    git_name: str = ""
    git_email: str = ""
    default_branch: str = "main"

    # winget package identifiers
    git_package: str = "Git.Git"
    gh_package: str = "GitHub.cli"
    vscode_package: str = "Microsoft.VisualStudioCode"
    python_package: str = "Python.Python.3.12"
    browser_package: str = "Google.Chrome"

    editor_extension: str = "ms-python.python"

    def missing_identity(self) -> List[str]:
        return [f for f in ("git_name", "git_email") if not getattr(self, f).strip()]


def default_plan(settings: Settings) -> List[Step]:
    missing = settings.missing_identity()
    if missing:
        raise ValueError(f"Settings incomplete, missing: {missing}")

    return plan(
        bootstrap_step(),

        # Version control
        package_step("git", settings.git_package, executable="git", description="Git"),
        git_config_step("git-user-name", "user.name", settings.git_name, description="Git user.name"),
        git_config_step("git-user-email", "user.email", settings.git_email, description="Git user.email"),
        git_config_step(
            "git-default-branch",
            "init.defaultBranch",
            settings.default_branch,
            description="Git default branch",
        ),

        # GitHub CLI + login
        package_step("github-cli", settings.gh_package, executable="gh", description="GitHub CLI"),
        gh_auth_step("github-auth", needs=["github-cli"]),

        # Editor
        package_step("vscode", settings.vscode_package, executable="code", description="Visual Studio Code"),
        extension_step(
            "vscode-python-extension",
            settings.editor_extension,
            needs=["vscode"],
            description="VS Code Python extension",
        ),

        # Language runtime
        package_step("python", settings.python_package, executable="python", description="Python"),

        # Browser (no CLI on the path; checked through winget)
        package_step(
            "browser",
            settings.browser_package,
            needs=[BOOTSTRAP_STEP],
            description="Google Chrome",
        ),
    )
