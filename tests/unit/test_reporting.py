"""Tests for console reporting of fetched and compared files."""

from pathlib import Path

from repodiff.models import ComparisonResult, DiffRecord, DiffTag


def differing(path: str = "src/a.txt") -> ComparisonResult:
    return ComparisonResult(
        local_path=Path(path),
        remote_hash="b" * 40,
        local_hash="a" * 40,
        matched=False,
        diff=[DiffRecord(DiffTag.REMOVED, "bar"), DiffRecord(DiffTag.ADDED, "baz")],
        total_diffs=2,
    )


class TestReportSink:
    def test_fetched_line(self, make_reporter, console_output):
        make_reporter().report_fetched("src/a.txt")

        assert console_output.getvalue() == "Fetched file: src/a.txt\n"

    def test_match_prints_nothing(self, make_reporter, console_output):
        result = ComparisonResult(
            local_path=Path("src/a.txt"),
            remote_hash="a" * 40,
            local_hash="a" * 40,
            matched=True,
        )

        make_reporter(verbose=True).report_comparison(result)

        assert console_output.getvalue() == ""

    def test_difference_count_only_when_not_verbose(
        self, make_reporter, console_output
    ):
        make_reporter().report_comparison(differing())

        assert console_output.getvalue() == "2 Differences for: src/a.txt\n"

    def test_verbose_prints_diff_block(self, make_reporter, console_output):
        make_reporter(verbose=True).report_comparison(differing())

        lines = [line.strip() for line in console_output.getvalue().splitlines()]
        assert lines[0] == "2 Differences for: src/a.txt"
        assert "-bar" in lines
        assert "+baz" in lines

    def test_paths_are_not_parsed_as_markup(self, make_reporter, console_output):
        reporter = make_reporter()

        reporter.report_fetched("docs/[bold]notes[/bold].md")
        reporter.report_comparison(differing("src/[red]x[/red].py"))

        assert console_output.getvalue().splitlines() == [
            "Fetched file: docs/[bold]notes[/bold].md",
            "2 Differences for: src/[red]x[/red].py",
        ]
