"""
Converter session for pullstamps.

Holds the state of one conversion: the recording start time, the pull
list being edited, and the last generated chapter text. Every action
runs to completion before the next one; nothing is shared between
sessions.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from .formatter import TimestampFormatter
from .models import PullEntry
from .parser import LogTextParser
from .remote import WarcraftLogsClient
from .utils import EmptyInputError, get_logger, normalize_time_input, parse_clock

logger = get_logger(__name__)


class ConverterSession:
    """Pull list plus recording start time, with the edit actions on them."""

    def __init__(self, reference_time: str = ""):
        self.reference_time = reference_time
        self.entries: List[PullEntry] = []
        self.output = ""
        self.report_date: Optional[datetime] = None

    def add_entry(self, name: str, pull_time: str) -> PullEntry:
        """
        Add a pull by hand.

        Args:
            name: Pull title
            pull_time: Time of day ("7:46", "19:46" or "19:46:12")

        Returns:
            The new entry

        Raises:
            EmptyInputError: If name or time is blank
            FormatError: If the time cannot be interpreted
        """
        if not name or not name.strip() or not pull_time or not pull_time.strip():
            raise EmptyInputError("Please enter both a pull name and a pull time.")

        normalized = normalize_time_input(pull_time)
        parse_clock(normalized)

        entry = PullEntry(id=f"manual-{uuid.uuid4().hex[:12]}", name=name.strip(), pull_time=normalized)
        self.entries.append(entry)
        return entry

    def import_text(self, text: str, strategy: str = "structured") -> int:
        """
        Parse pasted log text and append the pulls found.

        Returns:
            Number of pulls imported

        Raises:
            EmptyInputError: If the text is blank
            NoMatchError: If no pulls were found
        """
        result = LogTextParser(strategy=strategy).parse(text)
        imported = result.raise_for_error()

        self.entries.extend(imported)
        logger.info(f"Successfully imported {len(imported)} pulls from logs")
        return len(imported)

    def import_report(self, report_url: str, client: WarcraftLogsClient) -> int:
        """
        Fetch a report and append its boss pulls.

        Returns:
            Number of pulls imported
        """
        result = client.fetch_pulls(report_url)

        self.entries.extend(result["entries"])
        self.report_date = result["report_date"]
        return len(result["entries"])

    def remove_entry(self, entry_id: str) -> bool:
        """
        Remove the pull with the given id.

        Returns:
            True if a pull was removed
        """
        remaining = [entry for entry in self.entries if entry.id != entry_id]
        removed = len(remaining) != len(self.entries)
        self.entries = remaining
        return removed

    def clear(self) -> None:
        """Reset the session to its empty state."""
        self.entries = []
        self.reference_time = ""
        self.output = ""
        self.report_date = None

    def generate(self, output_path: Optional[str] = None) -> str:
        """
        Recompute the chapter text from the current pull list.

        Args:
            output_path: Optional file to also write the text to

        Raises:
            EmptyInputError: If the start time or the pull list is missing
            FormatError: If the start time cannot be interpreted
        """
        if not self.reference_time or not self.entries:
            raise EmptyInputError("Please set a video start time and add at least one pull.")

        formatter = TimestampFormatter(self.reference_time)
        if output_path:
            self.output = formatter.export_to_file(self.entries, output_path)
        else:
            self.output = formatter.export_to_string(self.entries)
        return self.output

    def copy_text(self) -> str:
        """
        Text to place on the clipboard.

        Raises:
            EmptyInputError: If nothing has been generated yet
        """
        if not self.output:
            raise EmptyInputError("Generate timestamps first.")
        return self.output
