"""
Tests for the error taxonomy.
"""

from shadow_activity.errors import (
    CommitFailed,
    ConfigInvalid,
    DiffUnavailable,
    EmptyHistory,
    GitCommandError,
    HistoryUnavailable,
    NoCommits,
    NoMatchingAuthors,
    ShadowActivityError,
)


class TestGitCommandError:
    def test_message_includes_command_and_stderr(self):
        error = GitCommandError(["show", "abc"], 128, "fatal: bad object abc\n", cwd="/repo")

        assert "git show abc" in str(error)
        assert "/repo" in str(error)
        assert str(error).endswith("fatal: bad object abc")
        assert error.returncode == 128
        assert error.details["args"] == ["show", "abc"]


class TestConfigInvalid:
    def test_fields(self):
        error = ConfigInvalid("bad", fields=["branchName"])
        assert error.fields == ["branchName"]
        assert error.details == {"fields": ["branchName"]}

    def test_fields_default_empty(self):
        assert ConfigInvalid("bad").fields == []


class TestHierarchy:
    def test_fatal_errors_share_base(self):
        for cls in (ConfigInvalid, HistoryUnavailable, DiffUnavailable, CommitFailed):
            assert issubclass(cls, ShadowActivityError)
            assert not issubclass(cls, EmptyHistory)

    def test_empty_history_statuses(self):
        assert NoCommits("x").status == "no_commits"
        assert NoMatchingAuthors("x").status == "no_matching_authors"
        assert isinstance(NoCommits("x"), EmptyHistory)
