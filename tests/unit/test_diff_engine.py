"""Unit tests for the positional and aligned diff strategies."""

import pytest

from repodiff.diff_engine import (
    aligned_diff,
    count_changes,
    diff_texts,
    get_strategy,
    positional_diff,
    render_markdown,
    split_lines,
)
from repodiff.models import DiffRecord, DiffTag


def rendered(records):
    return [str(record) for record in records]


class TestPositionalDiff:
    def test_equal_lines_produce_empty_diff(self):
        records = positional_diff(["a", "b", "c"], ["a", "b", "c"])

        assert records == []
        assert count_changes(records) == 0

    def test_lines_equal_after_trimming_produce_empty_diff(self):
        records = positional_diff(["  a", "b\t", "\tc  "], ["a", " b", "c"])

        assert records == []

    def test_single_changed_line(self):
        records = positional_diff(["foo", "bar"], ["foo", "baz"])

        assert rendered(records) == ["-bar", "+baz"]
        assert count_changes(records) == 2

    def test_extra_remote_line_is_added_only(self):
        records = positional_diff(["x"], ["x", "y"])

        assert rendered(records) == ["+y"]
        assert count_changes(records) == 1

    def test_extra_local_line_is_removed_only(self):
        records = positional_diff(["x", "y"], ["x"])

        assert rendered(records) == ["-y"]
        assert count_changes(records) == 1

    def test_insertion_cascades_through_following_lines(self):
        records = positional_diff(["a", "b", "c"], ["new", "a", "b", "c"])

        assert rendered(records) == ["-a", "+new", "-b", "+a", "-c", "+b", "+c"]
        assert count_changes(records) == 7

    def test_empty_line_against_text_emits_one_side(self):
        records = positional_diff(["a", "", "c"], ["a", "b", "c"])

        assert rendered(records) == ["+b"]


class TestDiffTexts:
    def test_split_lines_trims_whole_text_and_each_line(self):
        assert split_lines("\n  foo  \r\nbar\n\n") == ["foo", "bar"]

    def test_split_lines_of_empty_text_is_single_empty_line(self):
        assert split_lines("") == [""]

    def test_diff_texts_uses_local_as_removed_side(self):
        records = diff_texts("foo\nbar\n", "foo\nbaz\n")

        assert records == [
            DiffRecord(DiffTag.REMOVED, "bar"),
            DiffRecord(DiffTag.ADDED, "baz"),
        ]

    def test_trailing_whitespace_differences_are_ignored(self):
        assert diff_texts("a\nb\n\n\n", "a\nb") == []


class TestAlignedDiff:
    def test_insertion_is_reported_once(self):
        records = aligned_diff(["a", "b", "c"], ["new", "a", "b", "c"])

        assert count_changes(records) == 1
        assert DiffRecord(DiffTag.ADDED, "new") in records

    def test_equal_runs_collapse_into_omitted_records(self):
        records = aligned_diff(["a", "b", "c", "d"], ["a", "b", "X", "d"])

        omitted = [r for r in records if r.tag is DiffTag.OMITTED]
        assert [r.text for r in omitted] == ["2 unchanged lines", "1 unchanged lines"]
        assert count_changes(records) == 2

    def test_strategy_lookup(self):
        assert get_strategy("positional") is positional_diff
        assert get_strategy("aligned") is aligned_diff
        with pytest.raises(ValueError, match="Unknown diff algorithm"):
            get_strategy("myers")


class TestRenderMarkdown:
    def test_renders_fenced_diff_block(self):
        records = positional_diff(["foo", "bar"], ["foo", "baz"])

        assert render_markdown(records) == "```diff\n-bar\n+baz\n```\n"

    def test_empty_diff_renders_empty_block(self):
        assert render_markdown([]) == "```diff\n```\n"
