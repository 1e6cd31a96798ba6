from .git import git_config_step
from .github import gh_auth_step
from .vscode import extension_step
from .winget import BOOTSTRAP_STEP, bootstrap_step, package_step

__all__ = [
    "BOOTSTRAP_STEP",
    "bootstrap_step",
    "package_step",
    "git_config_step",
    "extension_step",
    "gh_auth_step",
]
