"""Tests for source checksum verification."""

from __future__ import annotations

from conftest import FakeSymbolReader, RecordingReporter

from pdb_gitlink.core.verify import find_changed_or_missing, report_changed_or_missing


def test_find_changed_or_missing_delegates_to_reader() -> None:
    reader = FakeSymbolReader(["/src/a.c", "/src/b.c"], changed=["/src/b.c"])
    assert find_changed_or_missing(reader) == ["/src/b.c"]
    assert reader.verify_calls == 1


def test_report_warns_once_per_file(reporter: RecordingReporter) -> None:
    reader = FakeSymbolReader(["/src/a.c", "/src/b.c"], changed=["/src/a.c", "/src/b.c"])

    missing = report_changed_or_missing(reader, reporter)

    assert missing == ["/src/a.c", "/src/b.c"]
    assert reporter.of("warning") == [
        'File "/src/a.c" missing or changed since the PDB was compiled.',
        'File "/src/b.c" missing or changed since the PDB was compiled.',
    ]
    assert reporter.of("error") == []


def test_report_is_quiet_when_everything_matches(reporter: RecordingReporter) -> None:
    reader = FakeSymbolReader(["/src/a.c"])
    assert report_changed_or_missing(reader, reporter) == []
    assert reporter.of("warning") == []
