"""Unit tests for the command-line interface."""

from click.testing import CliRunner

from shelfbase.cli import cli


def test_help_lists_commands():
    result = CliRunner().invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ("serve", "init-db", "migrate", "create-user", "issue-token", "reindex", "info"):
        assert command in result.output


def test_info_shows_search_settings():
    result = CliRunner().invoke(cli, ["info"])

    assert result.exit_code == 0
    assert "Search:" in result.output
    assert "Result Limit:" in result.output


def test_create_user_rejects_bad_email():
    result = CliRunner().invoke(cli, ["create-user", "--username", "john", "--email", "nope"])

    assert result.exit_code == 1
    assert "Invalid email format" in result.output
