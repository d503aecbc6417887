"""
Unit tests for the log text parser.
"""

import re
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from pullstamps.parser import LogTextParser, build_pull_name, parse_log_text
from pullstamps.utils import EmptyInputError, PullstampsError

CLOCK = re.compile(r"^\d{2}:\d{2}:\d{2}$")

REPORT_TEXT = """
1  (3:24)
48%
P2
7:46 PM

2  (1:05)
91%
P1
8:01 PM
"""


class TestStructuredStrategy:
    """Tests for the default structured strategy."""

    def test_single_pull(self):
        """Test a complete pull block."""
        result = LogTextParser().parse("1  (3:24)\n48%\nP2\n7:46 PM\n")

        assert result.valid is True
        assert len(result.entries) == 1
        assert result.entries[0].name == "Pull 1: P2 - 48% (3:24)"
        assert result.entries[0].pull_time == "19:46:00"

    def test_multiple_pulls(self):
        """Test that fields reset between pulls."""
        result = LogTextParser().parse(REPORT_TEXT)

        assert result.valid is True
        assert [e.name for e in result.entries] == [
            "Pull 1: P2 - 48% (3:24)",
            "Pull 2: P1 - 91% (1:05)",
        ]
        assert [e.pull_time for e in result.entries] == ["19:46:00", "20:01:00"]

    def test_fields_do_not_leak_into_next_pull(self):
        """Test that a pull without phase or health gets neither."""
        text = "1  (3:24)\n48%\nP2\n7:46 PM\n2  (1:05)\n8:01 PM\n"
        result = LogTextParser().parse(text)

        assert result.entries[1].name == "Pull 2 (1:05)"

    def test_fields_after_time_are_ignored(self):
        """Test that only lines before the time contribute."""
        result = LogTextParser().parse("1  (3:24)\n7:46 PM\n48%\nP2\n")

        assert len(result.entries) == 1
        assert result.entries[0].name == "Pull 1 (3:24)"

    def test_intermission(self):
        """Test intermission markers."""
        result = LogTextParser().parse("4  (2:10)\nI1\n9:02 PM")

        assert result.entries[0].name == "Pull 4: I1 (2:10)"

    def test_midnight_and_noon(self):
        """Test 12 AM and 12 PM conversion."""
        result = LogTextParser().parse("1  (2:00)\n12:15 AM\n2  (2:00)\n12:30 PM\n")

        assert [e.pull_time for e in result.entries] == ["00:15:00", "12:30:00"]

    def test_time_without_pull_number(self):
        """Test that times before any pull line are ignored."""
        result = LogTextParser().parse("7:46 PM\n")

        assert result.valid is False
        assert "7:46 PM" in result.error_message

    def test_windows_line_endings(self):
        """Test CRLF input."""
        result = LogTextParser().parse("1  (3:24)\r\n48%\r\nP2\r\n7:46 PM\r\n")

        assert result.entries[0].name == "Pull 1: P2 - 48% (3:24)"

    def test_pull_times_are_zero_padded(self):
        """Test every pull time is HH:MM:SS."""
        result = LogTextParser().parse("1  (0:45)\n9:05 AM\n")

        assert all(CLOCK.match(e.pull_time) for e in result.entries)
        assert result.entries[0].pull_time == "09:05:00"

    def test_ids_are_unique(self):
        """Test ids within one parse are distinct."""
        result = LogTextParser().parse(REPORT_TEXT)
        ids = [e.id for e in result.entries]

        assert len(ids) == len(set(ids))


class TestTimestampsStrategy:
    """Tests for the bare-timestamp strategy."""

    def parse(self, text):
        return LogTextParser(strategy="timestamps").parse(text)

    def test_name_before_time(self):
        """Test that text before the time becomes the name."""
        result = self.parse("Sennarth 19:46:12")

        assert result.entries[0].name == "Sennarth"
        assert result.entries[0].pull_time == "19:46:12"

    def test_name_after_time(self):
        """Test falling back to text after the time."""
        result = self.parse("19:46:12 Sennarth wipe")

        assert result.entries[0].name == "Sennarth"

    def test_noise_is_stripped(self):
        """Test pull counters, parentheticals and status words are removed."""
        result = self.parse("Pull 3 - Sennarth (wipe) 20:01:05")

        assert result.entries[0].name == "Sennarth"

    def test_long_prefix_uses_suffix(self):
        """Test names longer than 50 characters are skipped."""
        result = self.parse("x" * 60 + " 20:01:05 Boss")

        assert result.entries[0].name == "Boss"

    def test_placeholder_names(self):
        """Test generated names for lines with only a time."""
        result = self.parse("20:00:00\nBoss 20:05:00\n20:10:00")

        assert [e.name for e in result.entries] == ["Pull 1", "Boss", "Pull 3"]

    def test_short_cleaned_name_falls_back(self):
        """Test the raw candidate is kept when cleaning leaves too little."""
        result = self.parse("A (wipe) 20:00:00")

        assert result.entries[0].name == "A (wipe)"

    def test_meridiem_suffix(self):
        """Test AM/PM after an HH:MM:SS time."""
        result = self.parse("8:15:00 PM Boss")

        assert result.entries[0].pull_time == "20:15:00"

    def test_out_of_range_time_skipped(self):
        """Test impossible times produce no entries."""
        result = self.parse("25:00:00 Boss")

        assert result.valid is False
        assert "19:46:00" in result.error_message


class TestLogTextParser:
    """Tests for general parser behavior."""

    def test_init(self):
        """Test strategy selection."""
        assert LogTextParser().strategy == "structured"
        assert LogTextParser(strategy="timestamps").strategy == "timestamps"

    def test_unknown_strategy(self):
        """Test unknown strategy names are rejected."""
        with pytest.raises(PullstampsError, match="Unknown parse strategy"):
            LogTextParser(strategy="guess")

    def test_empty_text(self):
        """Test empty input."""
        for text in ["", "   \n  \n"]:
            result = LogTextParser().parse(text)
            assert result.valid is False
            assert result.error_message

    def test_no_match(self):
        """Test text without pulls."""
        result = LogTextParser().parse("nothing to see here")

        assert result.valid is False
        assert result.entries == []
        assert "No valid pull data" in result.error_message

    def test_internal_error_becomes_failure(self):
        """Test that unexpected errors never escape parse()."""
        parser = LogTextParser()

        with patch.object(parser, "_parse_structured", side_effect=RuntimeError("boom")):
            result = parser.parse("1  (3:24)\n7:46 PM")

        assert result.valid is False
        assert result.error_message == "Error parsing logs"

    def test_load_text(self):
        """Test loading pasted text from a file."""
        parser = LogTextParser()

        with tempfile.NamedTemporaryFile(mode="w", encoding="utf-8", delete=False, suffix=".txt") as f:
            f.write(REPORT_TEXT)
            temp_path = f.name

        try:
            assert parser.load_text(temp_path) == REPORT_TEXT
        finally:
            Path(temp_path).unlink()

    def test_load_text_latin1(self):
        """Test encoding fallback."""
        parser = LogTextParser()

        with tempfile.NamedTemporaryFile(mode="wb", delete=False, suffix=".txt") as f:
            f.write("Ragnaros \xe9 19:46:00".encode("latin-1"))
            temp_path = f.name

        try:
            assert "Ragnaros" in parser.load_text(temp_path)
        finally:
            Path(temp_path).unlink()

    def test_load_text_file_not_found(self):
        """Test error when file doesn't exist."""
        with pytest.raises(EmptyInputError, match="not found"):
            LogTextParser().load_text("/nonexistent/pulls.txt")


class TestHelpers:
    """Tests for module-level helpers."""

    def test_build_pull_name(self):
        """Test optional name parts."""
        assert build_pull_name("1", "P2", "48%", "3:24") == "Pull 1: P2 - 48% (3:24)"
        assert build_pull_name("2", health="10%") == "Pull 2 - 10%"
        assert build_pull_name("3") == "Pull 3"

    def test_parse_log_text(self):
        """Test the convenience function."""
        result = parse_log_text("Boss 19:46:00", strategy="timestamps")

        assert result.valid is True
        assert result.entries[0].pull_time == "19:46:00"
