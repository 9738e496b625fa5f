"""
Tests for the shadow buffer.

These tests verify:
- Loading from absent, empty and existing artifacts
- Delete-from-end then append ordering
- Clamping of deletions larger than the buffer
- Serialization round trip
"""

from unittest import mock

import pytest

from shadow_activity.errors import HistoryUnavailable
from shadow_activity.mirror.buffer import ShadowBuffer

from tests.conftest import FakeRepository


class TestLoad:
    def test_absent_artifact(self):
        assert len(ShadowBuffer.load(None)) == 0

    def test_empty_artifact(self):
        assert len(ShadowBuffer.load("")) == 0

    def test_lines(self):
        buffer = ShadowBuffer.load("a\nb\nc\n")
        assert buffer.lines == ["a", "b", "c"]

    def test_no_trailing_newline(self):
        assert ShadowBuffer.load("a\nb").lines == ["a", "b"]


class TestRead:
    def test_from_repository(self):
        repo = FakeRepository(files={"activity.log": "h1\nh1\nh2\n"})
        assert len(ShadowBuffer.read(repo, "activity.log")) == 3

    def test_absent_in_repository(self):
        assert len(ShadowBuffer.read(FakeRepository(), "activity.log")) == 0

    def test_undecodable_artifact(self):
        repo = FakeRepository()
        error = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        with mock.patch.object(repo, "read_file", side_effect=error):
            with pytest.raises(HistoryUnavailable, match="activity.log"):
                ShadowBuffer.read(repo, "activity.log")


class TestApply:
    def test_insert_into_empty(self):
        buffer = ShadowBuffer()
        buffer.apply(15, 3, "h1")

        assert len(buffer) == 15
        assert set(buffer.lines) == {"h1"}

    def test_deletes_from_end_then_appends(self):
        buffer = ShadowBuffer(["a", "b", "c", "d"])
        buffer.apply(2, 2, "new")

        assert buffer.lines == ["a", "b", "new", "new"]

    def test_clamped_deletions(self):
        """Buffer of 2, delete 5, insert 4 → 0 then 4, no error."""
        buffer = ShadowBuffer(["x", "y"])
        removed = buffer.apply(4, 5, "h9")

        assert removed == 2
        assert buffer.lines == ["h9"] * 4

    def test_delete_everything(self):
        buffer = ShadowBuffer(["x", "y", "z"])
        removed = buffer.apply(0, 3, "h")

        assert removed == 3
        assert len(buffer) == 0

    def test_zero_deletions_keeps_lines(self):
        buffer = ShadowBuffer(["x"])
        buffer.apply(1, 0, "y")
        assert buffer.lines == ["x", "y"]

    def test_accounting_over_a_sequence(self):
        buffer = ShadowBuffer()
        expected = 0
        for ins, dels in [(10, 0), (3, 5), (0, 20), (7, 1), (2, 2)]:
            buffer.apply(ins, dels, "t")
            expected = max(0, expected - dels) + ins
            assert len(buffer) == expected

    def test_negative_counts_rejected(self):
        with pytest.raises(ValueError):
            ShadowBuffer().apply(-1, 0, "t")
        with pytest.raises(ValueError):
            ShadowBuffer().apply(0, -1, "t")


class TestSerialize:
    def test_empty(self):
        assert ShadowBuffer().serialize() == ""

    def test_trailing_newline(self):
        assert ShadowBuffer(["a", "b"]).serialize() == "a\nb\n"

    def test_round_trip(self):
        buffer = ShadowBuffer()
        buffer.apply(3, 0, "h1")
        buffer.apply(2, 1, "h2")

        reloaded = ShadowBuffer.load(buffer.serialize())
        assert reloaded.lines == buffer.lines

    def test_same_stream_same_bytes(self):
        """Replaying a commit stream gives byte-identical output."""
        stream = [(4, 0, "a"), (1, 2, "b"), (3, 3, "c")]

        first, second = ShadowBuffer(), ShadowBuffer()
        for ins, dels, token in stream:
            first.apply(ins, dels, token)
            second.apply(ins, dels, token)

        assert first.serialize() == second.serialize()
