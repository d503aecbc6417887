"""
Video timestamp formatter for pullstamps.

Turns pull times of day into offsets from the recording start and
renders them as video chapter lines ("16:00 Pull 1: P2 - 48% (3:24)").
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .models import PullEntry
from .utils import (
    SECONDS_PER_DAY,
    EmptyInputError,
    FormatError,
    clock_to_seconds,
    get_logger,
    normalize_time_input,
)

logger = get_logger(__name__)


def compute_offset(reference_time: str, pull_time: str) -> int:
    """
    Seconds from the reference time to the pull time, both HH:MM:SS.

    Both times are taken as the same calendar day. A negative difference
    means the pull happened after midnight, so a full day is added.

    Raises:
        FormatError: If either time is not valid HH:MM:SS

    Example:
        >>> compute_offset("19:30:00", "19:46:00")
        960
        >>> compute_offset("23:50:00", "00:05:00")
        900
    """
    difference = clock_to_seconds(pull_time) - clock_to_seconds(reference_time)
    if difference < 0:
        difference += SECONDS_PER_DAY
    return difference


def format_for_video(seconds: int) -> str:
    """
    Render an offset as H:MM:SS, or M:SS when under an hour.

    Example:
        >>> format_for_video(960)
        '16:00'
        >>> format_for_video(3725)
        '1:02:05'
    """
    seconds = max(0, int(seconds))
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


class TimestampFormatter:
    """
    Formats a list of pulls as video chapter lines.

    A pull whose time cannot be parsed becomes an "Error <name>" line;
    the remaining pulls are still formatted.
    """

    ERROR_PREFIX = "Error"

    def __init__(self, reference_time: str):
        """
        Initialize the formatter.

        Args:
            reference_time: Recording start as typed by the user
                ("7:30", "19:30" or "19:30:00")

        Raises:
            EmptyInputError: If no reference time is given
            FormatError: If the reference time cannot be interpreted
        """
        if not reference_time or not reference_time.strip():
            raise EmptyInputError("Please set a video start time.")

        self.reference_time = normalize_time_input(reference_time)
        # A malformed reference fails the whole batch
        clock_to_seconds(self.reference_time)

        logger.debug(f"Reference time normalized to {self.reference_time}")

    def format_entry(self, entry: PullEntry) -> Optional[str]:
        """
        Format one pull as "<offset> <name>".

        Returns:
            Chapter line, or None if the pull time is malformed
        """
        try:
            offset = compute_offset(self.reference_time, entry.pull_time)
        except FormatError as e:
            logger.warning(f"Error processing entry {entry.name}: {e}")
            return None

        line = f"{format_for_video(offset)} {entry.name}"
        logger.debug(f"Calculated timestamp for {entry.name}: {line} ({offset} seconds)")
        return line

    def format_entries(self, entries: Sequence[PullEntry]) -> List[str]:
        """
        Format every pull, keeping list order.

        Args:
            entries: Pulls to format

        Returns:
            One line per pull
        """
        lines = []
        for entry in entries:
            line = self.format_entry(entry)
            lines.append(line if line is not None else f"{self.ERROR_PREFIX} {entry.name}")
        return lines

    def export_to_string(self, entries: Sequence[PullEntry]) -> str:
        """
        Export pulls as newline-joined chapter lines.

        Args:
            entries: Pulls to format

        Returns:
            Chapter text without a trailing newline
        """
        logger.info(f"Formatting {len(entries)} pulls against {self.reference_time}")
        return "\n".join(self.format_entries(entries))

    def export_to_file(self, entries: Sequence[PullEntry], output_path: str) -> str:
        """
        Export pulls to a text file.

        Args:
            entries: Pulls to format
            output_path: Path to output file

        Returns:
            The chapter text that was written
        """
        text = self.export_to_string(entries)

        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, "w", encoding="utf-8") as f:
            f.write(text + "\n")

        logger.info(f"Wrote {len(entries)} timestamps to {output_path}")
        return text


def generate_timestamps(
    reference_time: str,
    entries: Sequence[PullEntry],
    output_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Convenience function to format pulls, optionally writing them to a file.

    Args:
        reference_time: Recording start time
        entries: Pulls to format
        output_path: Optional output file path

    Returns:
        Dictionary with the chapter text and statistics

    Raises:
        EmptyInputError: If the reference time or the pull list is empty
        FormatError: If the reference time cannot be interpreted
    """
    if not entries:
        raise EmptyInputError("Please add at least one pull.")

    formatter = TimestampFormatter(reference_time)

    if output_path:
        text = formatter.export_to_file(entries, output_path)
    else:
        text = formatter.export_to_string(entries)

    failed = sum(1 for line in text.split("\n") if line.startswith(f"{formatter.ERROR_PREFIX} "))

    return {
        "text": text,
        "reference_time": formatter.reference_time,
        "total_entries": len(entries),
        "formatted_entries": len(entries) - failed,
        "failed_entries": failed,
        "output_file": str(Path(output_path).resolve()) if output_path else None,
    }
