"""Unit tests for the command-line interface."""

import io

import git
import pytest
from rich.console import Console
from typer.testing import CliRunner

from gitcentral import __version__, cli
from gitcentral.exceptions import Errors, Recommendations
from gitcentral.replay.messages import Messages

runner = CliRunner()


@pytest.fixture
def cli_console(monkeypatch):
    """Route CLI output into a wide buffered console."""
    buffered = Console(file=io.StringIO(), width=200, color_system=None)
    monkeypatch.setattr(cli, "console", buffered)
    return buffered


def test_checkin_quick(test_repo, cli_console, read_output):
    """Test checking in a real repository with the in-memory connector."""
    result = runner.invoke(cli.app, ["checkin", "--quick", "--repo", str(test_repo)])

    assert result.exit_code == 0
    lines = read_output(cli_console)
    assert lines[0] == Messages.FETCHING_CHANGES
    assert "Starting checkin of" in lines[1]
    assert lines[1].endswith("'Add main.py'")
    assert Messages.NO_MORE in lines
    assert lines[-1] == "✓ Checked in 2 commits (latest changeset C44)"


def test_checkin_safe(test_repo, cli_console, read_output):
    """Test the default rebasing mode."""
    result = runner.invoke(cli.app, ["checkin", "--repo", str(test_repo)])

    assert result.exit_code == 0
    lines = read_output(cli_console)
    assert lines.count(Messages.REBASE_DONE) == 2
    assert lines[-1] == "✓ Checked in 2 commits (latest changeset C44)"


def test_checkin_dirty_repository(test_repo, cli_console, read_output):
    """Test that uncommitted changes abort with a recommendation."""
    (test_repo / "main.py").write_text("uncommitted\n")

    result = runner.invoke(cli.app, ["checkin", "--repo", str(test_repo)])

    assert result.exit_code == 1
    lines = read_output(cli_console)
    assert lines == [f"Error: {Errors.LOCAL_CHANGES}", Recommendations.TRY_STASH]


def test_checkin_without_synced_commit(cli_console, read_output, tmp_path):
    """Test a repository with no commit mirroring the remote."""
    repo = git.Repo.init(tmp_path)
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()
    (tmp_path / "README.md").write_text("# Test\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    result = runner.invoke(cli.app, ["checkin", "--repo", str(tmp_path)])

    assert result.exit_code == 1
    assert "No commit mirroring a remote changeset" in read_output(cli_console)[0]


def test_checkin_unknown_connector(test_repo, cli_console, read_output):
    """Test that a bad connector name is reported."""
    result = runner.invoke(cli.app, ["checkin", "--repo", str(test_repo), "--connector", "svn"])

    assert result.exit_code == 1
    assert read_output(cli_console)[0] == "Error: Unknown connector: svn"


def test_checkin_race_on_first_commit(test_repo, cli_console, read_output, racing_remote, monkeypatch):
    """Test that a changeset created before losing a race is reported."""
    monkeypatch.setattr(
        cli, "create_connector", lambda name, cursor, repository: racing_remote(cursor, repository)
    )

    result = runner.invoke(cli.app, ["checkin", "--quick", "--repo", str(test_repo)])

    assert result.exit_code == 1
    lines = read_output(cli_console)
    assert f"Error: {Errors.CONCURRENT_CHANGESETS}" in lines
    assert lines[-1] == "1 commit checked in before the run stopped."


def test_checkin_single_commit(test_repo, cli_console, read_output):
    """Test the summary line for one commit."""
    repo = git.Repo(test_repo)
    (test_repo / "NOTES.md").write_text("synced\n")
    repo.index.add(["NOTES.md"])
    repo.index.commit("Sync\n\ngitcentral-id: [https://tfs.example.com]$/Project;C50")
    (test_repo / "NOTES.md").write_text("synced\nthen edited\n")
    repo.index.add(["NOTES.md"])
    repo.index.commit("Edit notes")

    result = runner.invoke(cli.app, ["checkin", "--quick", "--repo", str(test_repo)])

    assert result.exit_code == 0
    assert read_output(cli_console)[-1] == "✓ Checked in 1 commit (latest changeset C51)"


@pytest.mark.parametrize("count,expected", [(0, "0 commits"), (1, "1 commit"), (3, "3 commits")])
def test_describe_commits(count, expected):
    """Test the plural form of commit counts."""
    assert cli.describe_commits(count) == expected


def test_checkin_invalid_work_item(test_repo, cli_console):
    """Test that a malformed --work-item is a usage error."""
    result = runner.invoke(cli.app, ["checkin", "--repo", str(test_repo), "-w", "abc"])

    assert result.exit_code == 2


def test_info(test_repo, cli_console, read_output):
    """Test printing the remote mapping."""
    head = git.Repo(test_repo).commit("HEAD~2").hexsha

    result = runner.invoke(cli.app, ["info", "--repo", str(test_repo)])

    assert result.exit_code == 0
    assert read_output(cli_console) == [
        f"gitcentral version {__version__}",
        "remote id 'default' maps to https://tfs.example.com $/Project",
        f"last synchronized changeset C42 at {head[:8]}",
    ]


def test_version(cli_console, read_output):
    """Test the version command."""
    result = runner.invoke(cli.app, ["version"])

    assert result.exit_code == 0
    assert read_output(cli_console) == [f"gitcentral version {__version__}"]


class TestBuildBaseline:
    """Tests for command line checkin options."""

    def test_defaults(self):
        """Test options when no flag is given."""
        config = cli.build_baseline()

        assert config.generate_comment is True
        assert config.allow_merge is True
        assert config.force is False

    def test_work_items_and_force(self):
        """Test combining work items with a forced checkin."""
        config = cli.build_baseline(
            work_items=["1", "2:resolve", "3:associate"],
            force_reason="release night",
        )

        assert config.work_items_to_associate == {"1", "3"}
        assert config.work_items_to_resolve == {"2"}
        assert config.force is True
        assert config.force_reason == "release night"

    def test_blank_force_reason(self):
        """Test that a blank reason does not force."""
        assert cli.build_baseline(force_reason="  ").force is False
