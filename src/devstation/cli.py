# cli.py
from __future__ import annotations

import platform
import sys
from pathlib import Path
from typing import List, Optional

import click

from devstation.dag import PlanError
from devstation.environment import EnvironmentView, platform_supported
from devstation.inspector import SystemInspector
from devstation.logging_utils import configure_logging
from devstation.model import Step, StepContext
from devstation.prompts import ConsolePrompter, Prompter
from devstation.runner import check_steps, load_plan, run_steps
from devstation.tools import Toolbox
from devstation.ui.console import Console
from devstation.workstation import Settings, default_plan


UNSET_IDENTITY = "(not set)"

INTRO = (
    "This will install and configure Git, the GitHub CLI, VS Code, Python and "
    "Google Chrome on this machine. Continue?"
)


def build_context(prompter: Prompter) -> StepContext:
    """Wire the real collaborators around the current process environment."""
    env = EnvironmentView.from_os()
    return StepContext(
        env=env,
        inspector=SystemInspector(env),
        tools=Toolbox(env),
        prompter=prompter,
    )


def collect_identity(settings: Settings, ctx: StepContext) -> None:
    """
    Ask for the git display name and email unless given on the command line.

    The current global values, when git is already installed, are offered
    as defaults.
    """
    if not settings.git_name:
        settings.git_name = ctx.prompter.ask_text(
            "Your name (for git commits)",
            default=ctx.inspector.git_config("user.name"),
        )
    if not settings.git_email:
        settings.git_email = ctx.prompter.ask_text(
            "Your email address (for git commits)",
            default=ctx.inspector.git_config("user.email"),
        )


def current_identity(settings: Settings, ctx: StepContext) -> None:
    """Identity for a probe-only run: options, then current git values. Never prompts."""
    settings.git_name = settings.git_name or ctx.inspector.git_config("user.name") or UNSET_IDENTITY
    settings.git_email = settings.git_email or ctx.inspector.git_config("user.email") or UNSET_IDENTITY


def resolve_plan(plan_file: Optional[str], settings: Settings) -> List[Step]:
    if plan_file:
        return load_plan(plan_file, settings)
    return default_plan(settings)


@click.command()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed log output)",
)
@click.option("--log-file", default=None, help="Log file path (defaults to %LOCALAPPDATA%\\devstation\\devstation.log)")
@click.option("--plan", "plan_file", default=None, help="Python plan file defining build_plan(settings) or STEPS")
@click.option("--name", default=None, envvar="DEVSTATION_GIT_NAME", help="Git user.name (prompted if omitted)")
@click.option("--email", default=None, envvar="DEVSTATION_GIT_EMAIL", help="Git user.email (prompted if omitted)")
@click.option("--yes", "-y", "assume_yes", is_flag=True, default=False, help="Answer yes to every confirmation")
@click.option(
    "--retry-prompts/--no-retry-prompts",
    default=False,
    show_default=True,
    help="Offer to retry a step after it fails",
)
@click.option("--check", is_flag=True, default=False, help="Only probe; report what would be applied")
def cli(debug, log_file, plan_file, name, email, assume_yes, retry_prompts, check):
    """devstation: provision a Windows developer workstation."""
    console = Console(debug=debug)

    if not platform_supported():
        console.print_error(
            "Unsupported platform",
            f"devstation provisions Windows machines; this is {platform.system() or sys.platform}.",
        )
        sys.exit(1)

    try:
        log_path = configure_logging(log_file, debug=debug)
        console.print_debug(f"Logging to {log_path}")
        prompter = ConsolePrompter(assume_yes=assume_yes)
        ctx = build_context(prompter)

        if not check and not ctx.prompter.confirm(INTRO):
            console.print_info("Aborted by user.")
            sys.exit(1)

        settings = Settings(git_name=(name or "").strip(), git_email=(email or "").strip())
        if check:
            current_identity(settings, ctx)
        else:
            collect_identity(settings, ctx)
        ctx.settings = settings

        try:
            steps = resolve_plan(plan_file, settings)
        except (PlanError, FileNotFoundError, TypeError, ValueError) as e:
            console.print_error(
                "Invalid plan",
                str(e),
                suggestion="Fix the plan file, or run without --plan to use the default workstation plan.",
            )
            if debug:
                console.print_exception(e)
            sys.exit(1)

        if check:
            console.print_check(check_steps(steps, ctx))
            return

        console.print_run_started(
            machine=platform.node() or "localhost",
            plan=Path(plan_file).name if plan_file else "default workstation",
            step_count=len(steps),
            log_path=log_path,
        )

        report = run_steps(
            steps,
            ctx,
            retry_prompt=retry_prompts,
            on_result=console.print_step_result,
        )

        console.print_results(report)
        sys.exit(report.exit_code)

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


if __name__ == "__main__":
    cli()
