from __future__ import annotations

from typing import Optional, Protocol

import click


class Prompter(Protocol):
    """Interactive input, injected so runs can be scripted."""

    def ask_text(self, message: str, default: Optional[str] = None) -> str:
        ...

    def confirm(self, message: str) -> bool:
        ...


NO_ANSWERS = {"n", "no"}


def is_yes(answer: Optional[str]) -> bool:
    """Default-yes: only an explicit "n"/"no" declines."""
    return (answer or "").strip().lower() not in NO_ANSWERS


class ConsolePrompter:
    """Prompts on the terminal through click."""

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    def ask_text(self, message: str, default: Optional[str] = None) -> str:
        while True:
            value = click.prompt(
                message,
                default=default or "",
                show_default=bool(default),
            )
            value = str(value).strip()
            if value:
                return value
            click.echo("A value is required.")

    def confirm(self, message: str) -> bool:
        if self.assume_yes:
            click.echo(f"{message} [Y/n]: y")
            return True
        answer = click.prompt(f"{message} [Y/n]", default="", show_default=False)
        return is_yes(answer)
