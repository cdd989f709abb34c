"""Tests for argument parsing and dispatch (cli/parser.py, cli/app.py).

Handlers are mocked at the ``siroc.commands`` boundary — no rollup, no
child processes.

Coverage:
* Declared defaults reach the handler when flags are omitted.
* ``--help`` output for every command.
* Unknown options: rejected for ``build``, forwarded for ``run``.
* Default command dispatch (``siroc pkgA`` == ``siroc build pkgA``).
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from siroc.cli import exit_codes
from siroc.cli.app import build_registry, builtin_commands, main
from siroc.cli.parser import build_parser, parse_invocation, with_default_command
from siroc.core.models import BuildOptions, RootContext, RunOptions
from siroc.infra.manifest import load_root_package


def _parse(context: RootContext, argv: list[str]):
    registry = build_registry(context)
    return parse_invocation(build_parser(registry), registry, argv)


@pytest.fixture
def context(project: Path, logger) -> RootContext:
    return load_root_package(project, logger)


# ---------------------------------------------------------------------------
# Defaults and flags
# ---------------------------------------------------------------------------

class TestBuildFlags:
    def test_defaults_applied_when_flags_absent(self, context: RootContext) -> None:
        invocation = _parse(context, ["build"])
        assert invocation.command == "build"
        assert invocation.positionals == {"packages": ()}
        assert invocation.flags == {
            "watch": False,
            "dev": False,
            "input": None,
            "output": None,
            "format": None,
        }

    def test_packages_and_watch(self, context: RootContext) -> None:
        invocation = _parse(context, ["build", "pkgA", "pkgB", "-w"])
        assert invocation.positionals["packages"] == ("pkgA", "pkgB")
        assert invocation.flags["watch"] is True
        assert invocation.flags["dev"] is False

    def test_packages_around_flags(self, context: RootContext) -> None:
        invocation = _parse(context, ["build", "pkgA", "-w", "pkgB"])
        assert invocation.positionals["packages"] == ("pkgA", "pkgB")
        assert invocation.flags["watch"] is True

    def test_packages_around_value_option(self, context: RootContext) -> None:
        invocation = _parse(context, ["build", "pkgA", "-f", "es", "pkgB", "--dev", "pkgC"])
        assert invocation.positionals["packages"] == ("pkgA", "pkgB", "pkgC")
        assert invocation.flags["format"] == "es"
        assert invocation.flags["dev"] is True

    def test_value_options(self, context: RootContext) -> None:
        invocation = _parse(context, ["build", "-i", "src/main.ts", "-o", "out.mjs", "-f", "es"])
        assert invocation.flags["input"] == "src/main.ts"
        assert invocation.flags["output"] == "out.mjs"
        assert invocation.flags["format"] == "es"

    def test_every_declared_default_is_present(self, context: RootContext) -> None:
        registry = build_registry(context)
        parser = build_parser(registry)
        for spec in builtin_commands(context):
            argv = [spec.name, "file"] if spec.name == "run" else [spec.name]
            invocation = parse_invocation(parser, registry, argv)
            for option in spec.options:
                assert invocation.flags[option.dest] == option.default


class TestDispatch:
    @patch("siroc.commands.build.build")
    def test_build_receives_packages_and_flags(
        self, mock_build: MagicMock, project: Path, console: Console,
    ) -> None:
        code = main(["build", "pkgA", "pkgB", "-w"], cwd=project, console=console)

        assert code == exit_codes.SUCCESS
        options = mock_build.call_args.args[1]
        assert options == BuildOptions(packages=("pkgA", "pkgB"), watch=True, dev=False)

    @patch("siroc.commands.build.build")
    def test_bare_packages_default_to_build(
        self, mock_build: MagicMock, project: Path, console: Console,
    ) -> None:
        code = main(["pkgA", "--dev"], cwd=project, console=console)

        assert code == exit_codes.SUCCESS
        assert mock_build.call_args.args[1] == BuildOptions(packages=("pkgA",), dev=True)

    @patch("siroc.commands.build.build")
    def test_bare_packages_around_flag_default_to_build(
        self, mock_build: MagicMock, project: Path, console: Console,
    ) -> None:
        code = main(["pkgA", "--dev", "pkgB"], cwd=project, console=console)

        assert code == exit_codes.SUCCESS
        assert mock_build.call_args.args[1] == BuildOptions(packages=("pkgA", "pkgB"), dev=True)

    @patch("siroc.commands.build.build")
    def test_no_arguments_builds_everything(
        self, mock_build: MagicMock, project: Path, console: Console,
    ) -> None:
        assert main([], cwd=project, console=console) == exit_codes.SUCCESS
        assert mock_build.call_args.args[1] == BuildOptions()

    @patch("siroc.commands.dev.dev")
    def test_dev_dispatches(self, mock_dev: MagicMock, project: Path, console: Console) -> None:
        assert main(["dev", "pkgA"], cwd=project, console=console) == exit_codes.SUCCESS
        assert mock_dev.call_args.args[1] == BuildOptions(packages=("pkgA",))

    @patch("siroc.commands.changelog.changelog")
    def test_changelog_dispatches_with_context_only(
        self, mock_changelog: MagicMock, project: Path, console: Console,
    ) -> None:
        assert main(["changelog"], cwd=project, console=console) == exit_codes.SUCCESS
        (context,) = mock_changelog.call_args.args
        assert isinstance(context, RootContext)
        assert context.name == "@demo/app"

    @patch("siroc.commands.run.run")
    def test_run_forwards_unknown_options(
        self, mock_run: MagicMock, project: Path, console: Console,
    ) -> None:
        code = main(
            ["run", "script.py", "--workspaces", "extraFlag", "--color=always"],
            cwd=project,
            console=console,
        )

        assert code == exit_codes.SUCCESS
        assert mock_run.call_args.args[1] == RunOptions(
            file="script.py",
            args=("extraFlag", "--color=always"),
            workspaces=True,
            sequential=False,
        )

    @patch("siroc.commands.run.run")
    def test_run_keeps_argument_order(
        self, mock_run: MagicMock, project: Path, console: Console,
    ) -> None:
        main(["run", "-s", "echo", "a", "--loud", "b"], cwd=project, console=console)
        options = mock_run.call_args.args[1]
        assert options.file == "echo"
        assert options.args == ("a", "--loud", "b")
        assert options.sequential is True


# ---------------------------------------------------------------------------
# Parse errors
# ---------------------------------------------------------------------------

class TestParseErrors:
    @patch("siroc.commands.build.build")
    def test_unknown_build_flag_fails(
        self, mock_build: MagicMock, project: Path, console: Console,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["build", "--bogus"], cwd=project, console=console)

        assert exc_info.value.code == exit_codes.GENERAL_ERROR
        assert "--bogus" in capsys.readouterr().err
        mock_build.assert_not_called()

    @patch("siroc.commands.run.run")
    def test_run_without_file_fails(self, mock_run: MagicMock, project: Path, console: Console) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run"], cwd=project, console=console)
        assert exc_info.value.code == exit_codes.GENERAL_ERROR
        mock_run.assert_not_called()

    def test_changelog_rejects_arguments(self, project: Path, console: Console) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["changelog", "--since", "v1"], cwd=project, console=console)
        assert exc_info.value.code == exit_codes.GENERAL_ERROR


# ---------------------------------------------------------------------------
# Help
# ---------------------------------------------------------------------------

class TestHelp:
    def test_top_level_help_lists_commands(
        self, project: Path, console: Console, capsys: pytest.CaptureFixture[str],
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"], cwd=project, console=console)

        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        for name, description in [
            ("build", "Bundle input files"),
            ("dev", "Generate package stubs for quick development"),
            ("run", "Run a script or command"),
            ("changelog", "Generate changelog"),
        ]:
            assert name in out
            assert description in out

    @pytest.mark.parametrize(
        ("command", "pattern"),
        [
            ("build", "build [...packages]"),
            ("dev", "dev [...packages]"),
            ("run", "run <file> [...args]"),
            ("changelog", "changelog"),
        ],
    )
    def test_command_help_shows_pattern_and_description(
        self,
        command: str,
        pattern: str,
        context: RootContext,
        project: Path,
        console: Console,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([command, "-h"], cwd=project, console=console)

        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        spec = build_registry(context)[command]
        assert pattern in out
        assert spec.description in out

    def test_build_help_examples_use_package_name(
        self, project: Path, console: Console, capsys: pytest.CaptureFixture[str],
    ) -> None:
        with pytest.raises(SystemExit):
            main(["build", "--help"], cwd=project, console=console)
        assert "siroc build @demo/app -w" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Default command insertion
# ---------------------------------------------------------------------------

class TestWithDefaultCommand:
    def test_empty(self, context: RootContext) -> None:
        assert with_default_command([], build_registry(context)) == ["build"]

    def test_known_command_untouched(self, context: RootContext) -> None:
        assert with_default_command(["dev", "a"], build_registry(context)) == ["dev", "a"]

    def test_reserved_flags_untouched(self, context: RootContext) -> None:
        registry = build_registry(context)
        assert with_default_command(["--help"], registry) == ["--help"]
        assert with_default_command(["-v"], registry) == ["-v"]

    def test_package_name_gets_build(self, context: RootContext) -> None:
        registry = build_registry(context)
        assert with_default_command(["@demo/app", "-w"], registry) == ["build", "@demo/app", "-w"]
