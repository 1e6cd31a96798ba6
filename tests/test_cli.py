"""Tests for the command line, with the machine simulated."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from devstation import cli as cli_module
from devstation.cli import cli

from conftest import ScriptedPrompter


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def wired(monkeypatch, ctx, tmp_path):
    """Point the CLI at the simulated machine instead of the real one."""
    ctx.settings = None
    monkeypatch.setattr(cli_module, "platform_supported", lambda: True)
    monkeypatch.setattr(cli_module, "build_context", lambda prompter: ctx)
    monkeypatch.setattr(
        cli_module,
        "configure_logging",
        lambda log_file, debug=False: str(tmp_path / "devstation.log"),
    )
    return ctx


IDENTITY = ["--name", "Ada Lovelace", "--email", "ada@example.com"]


class TestCli:
    def test_unsupported_platform(self, runner, monkeypatch):
        monkeypatch.setattr(cli_module, "platform_supported", lambda: False)

        result = runner.invoke(cli, IDENTITY)

        assert result.exit_code == 1
        assert "Unsupported platform" in result.output

    def test_fresh_machine_run(self, runner, wired, machine):
        result = runner.invoke(cli, IDENTITY)

        assert result.exit_code == 0, result.output
        assert "PROVISIONING STARTED" in result.output
        assert "RESULTS" in result.output
        assert "11 applied, 0 already satisfied, 0 failed, 0 skipped" in result.output
        assert machine.gitconfig["user.name"] == "Ada Lovelace"

    def test_intro_declined(self, runner, wired, machine):
        wired.prompter = ScriptedPrompter(confirms=[False])

        result = runner.invoke(cli, IDENTITY)

        assert result.exit_code == 1
        assert "Aborted by user." in result.output
        assert machine.calls == []

    def test_identity_prompted_when_missing(self, runner, wired, machine):
        machine.preinstall("Git.Git")
        machine.gitconfig.update({"user.name": "Ada L.", "user.email": "ada@example.com"})
        wired.prompter = ScriptedPrompter(texts=["Ada Lovelace"])

        result = runner.invoke(cli, [])

        assert result.exit_code == 0, result.output
        # typed answer for the name, current value accepted for the email
        assert wired.settings.git_name == "Ada Lovelace"
        assert wired.settings.git_email == "ada@example.com"
        assert any("email" in q for q in wired.prompter.asked)
        assert machine.gitconfig["user.name"] == "Ada Lovelace"

    def test_identity_from_options_is_not_prompted(self, runner, wired):
        wired.prompter = ScriptedPrompter()

        runner.invoke(cli, IDENTITY)

        assert not any("Your name" in q for q in wired.prompter.asked)

    def test_bootstrap_failure_exits_non_zero(self, runner, wired, machine):
        machine.bootstrap_fails = True

        result = runner.invoke(cli, IDENTITY)

        assert result.exit_code == 1
        assert "Stopped early" in result.output
        assert "try manually" in result.output

    def test_partial_failure_exits_non_zero(self, runner, wired, machine):
        machine.fail_install.add("Google.Chrome")

        result = runner.invoke(cli, IDENTITY)

        assert result.exit_code == 1
        assert "browser: FAILED" in result.output
        assert "winget install --id Google.Chrome" in result.output

    def test_check_only_probes(self, runner, wired, machine):
        machine.preinstall("Git.Git")

        result = runner.invoke(cli, [*IDENTITY, "--check"])

        assert result.exit_code == 0
        assert "CHECK" in result.output
        assert "git: ok" in result.output
        assert "browser: would apply" in result.output
        assert machine.calls == []

    def test_missing_plan_file(self, runner, wired, tmp_path):
        result = runner.invoke(cli, [*IDENTITY, "--plan", str(tmp_path / "nope.py")])

        assert result.exit_code == 1
        assert "Invalid plan" in result.output

    def test_custom_plan_file(self, runner, wired, tmp_path):
        plan_file = tmp_path / "myplan.py"
        plan_file.write_text(
            "from devstation import step\n"
            "STEPS = [step('hello', probe=lambda ctx: True, apply=lambda ctx: None)]\n",
            encoding="utf-8",
        )

        result = runner.invoke(cli, [*IDENTITY, "--plan", str(plan_file)])

        assert result.exit_code == 0, result.output
        assert "Plan: myplan.py" in result.output
        assert "hello: satisfied" in result.output

    def test_keyboard_interrupt(self, runner, monkeypatch, tmp_path):
        def interrupted(prompter):
            raise KeyboardInterrupt

        monkeypatch.setattr(cli_module, "platform_supported", lambda: True)
        monkeypatch.setattr(cli_module, "configure_logging", lambda *a, **k: str(tmp_path / "x.log"))
        monkeypatch.setattr(cli_module, "build_context", interrupted)

        result = runner.invoke(cli, IDENTITY)

        assert result.exit_code == 130

    def test_debug_prints_log_location(self, runner, wired, tmp_path):
        result = runner.invoke(cli, [*IDENTITY, "--debug", "--check"])

        assert f"[DEBUG] Logging to {tmp_path / 'devstation.log'}" in result.output

    def test_cyclic_plan_is_invalid_before_anything_runs(self, runner, wired, machine, tmp_path):
        plan_file = tmp_path / "cyclic.py"
        plan_file.write_text(
            "from devstation import step\n"
            "STEPS = [\n"
            "    step('a', probe=lambda ctx: False, apply=lambda ctx: None, needs=['b']),\n"
            "    step('b', probe=lambda ctx: False, apply=lambda ctx: None, needs=['a']),\n"
            "]\n",
            encoding="utf-8",
        )

        result = runner.invoke(cli, [*IDENTITY, "--yes", "--plan", str(plan_file)])

        assert result.exit_code == 1
        assert "Invalid plan" in result.output
        assert "cycle" in result.output
        assert "PROVISIONING STARTED" not in result.output
        assert machine.calls == []

    def test_check_never_prompts_for_identity(self, runner, wired, machine):
        machine.preinstall("Git.Git")
        machine.gitconfig["user.name"] = "Ada Lovelace"
        wired.prompter = ScriptedPrompter()

        result = runner.invoke(cli, ["--check"])

        assert result.exit_code == 0, result.output
        assert wired.prompter.asked == []
        assert wired.settings.git_name == "Ada Lovelace"
        assert wired.settings.git_email == "(not set)"
        assert "git-user-name: ok" in result.output
        assert "git-user-email: would apply" in result.output
