from taskscout import __version__
from click.testing import CliRunner

from taskscout.cli.main import cli


def test_version():
    assert __version__ == "0.1.0"


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Discover, search and run project commands" in result.output


def test_cli_version():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_subcommands_registered():
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    for name in ("scan", "search", "scanners", "runbook"):
        assert name in result.output
