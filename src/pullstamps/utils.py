"""
Utility functions for pullstamps.

Includes the exception hierarchy, clock-time parsing and normalization,
logging setup, and small validation helpers.
"""

import logging
import os
import re
import sys
from typing import Optional, Tuple

SECONDS_PER_DAY = 86400

_STRICT_CLOCK = re.compile(r"^(\d{2}):(\d{2}):(\d{2})$")
_STRICT_HOUR_MINUTE = re.compile(r"^(\d{2}):(\d{2})$")


# ============================================================================
# Custom Exception Classes
# ============================================================================


class PullstampsError(Exception):
    """Base exception for all pullstamps errors."""

    pass


class FormatError(PullstampsError):
    """Raised when a time string cannot be parsed."""

    pass


class EmptyInputError(PullstampsError):
    """Raised when required input (pasted text, start time, pulls) is missing."""

    pass


class NoMatchError(PullstampsError):
    """Raised when log text contains no recognizable pulls."""

    pass


class InvalidUrlError(PullstampsError):
    """Raised when a report URL does not contain a report id."""

    pass


class RemoteError(PullstampsError):
    """Raised when the combat-log service request fails."""

    pass


class EmptyReportError(PullstampsError):
    """Raised when a fetched report has no fights."""

    pass


# ============================================================================
# Clock Utilities
# ============================================================================


def to_24_hour(hour: int, meridiem: Optional[str]) -> int:
    """
    Convert a 12-hour clock hour to its 24-hour value.

    Args:
        hour: Hour as written (1-12, or already 24-hour)
        meridiem: "AM", "PM" (any case) or None

    Returns:
        Hour in 24-hour form

    Example:
        >>> to_24_hour(7, "PM")
        19
        >>> to_24_hour(12, "AM")
        0
    """
    if not meridiem:
        return hour

    meridiem = meridiem.upper()
    if meridiem == "PM" and hour < 12:
        return hour + 12
    if meridiem == "AM" and hour == 12:
        return 0
    return hour


def format_clock(hours: int, minutes: int, seconds: int = 0) -> str:
    """
    Render a time of day as zero-padded HH:MM:SS.

    Example:
        >>> format_clock(7, 5)
        '07:05:00'
    """
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def parse_clock(value: str) -> Tuple[int, int, int]:
    """
    Strictly parse a zero-padded 24-hour HH:MM:SS string.

    Args:
        value: Time of day string

    Returns:
        Tuple of (hours, minutes, seconds)

    Raises:
        FormatError: If the string is not a valid HH:MM:SS time

    Example:
        >>> parse_clock("19:46:00")
        (19, 46, 0)
    """
    match = _STRICT_CLOCK.match(value or "")
    if not match:
        raise FormatError(f"Invalid time format: '{value}'. Expected HH:MM:SS")

    hours, minutes, seconds = map(int, match.groups())
    if hours > 23 or minutes > 59 or seconds > 59:
        raise FormatError(f"Invalid time values in '{value}'")

    return hours, minutes, seconds


def clock_to_seconds(value: str) -> int:
    """
    Convert an HH:MM:SS string to seconds since midnight.

    Example:
        >>> clock_to_seconds("01:01:01")
        3661
    """
    hours, minutes, seconds = parse_clock(value)
    return hours * 3600 + minutes * 60 + seconds


def normalize_time_input(time_input: str) -> str:
    """
    Canonicalize a user-entered clock string into HH:MM:SS.

    Three-part input is validated and returned unchanged. Two-part input
    is accepted as 24-hour HH:MM when both fields are two digits and in
    range. Anything else is read as evening shorthand: hours below 12 are
    moved to PM, since raids are assumed to start in the evening.

    Args:
        time_input: Clock string such as "7:30", "19:30" or "19:30:00"

    Returns:
        Normalized HH:MM:SS string, or the input unchanged if it could
        not be interpreted (the strict parse downstream reports it)

    Raises:
        FormatError: If three-part input is not a valid HH:MM:SS time

    Example:
        >>> normalize_time_input("19:30")
        '19:30:00'
        >>> normalize_time_input("7:30")
        '19:30:00'
    """
    if not time_input:
        return ""

    time_input = time_input.strip()
    parts = time_input.split(":")

    if len(parts) > 2:
        parse_clock(time_input)
        return time_input

    try:
        match = _STRICT_HOUR_MINUTE.match(time_input)
        if match:
            hours, minutes = map(int, match.groups())
            if hours < 24 and minutes < 60:
                return format_clock(hours, minutes)

        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
        if hours < 12:
            hours += 12

        return format_clock(hours, minutes)
    except ValueError:
        return time_input


def format_fight_duration(seconds: int) -> str:
    """
    Format a fight length as M:SS (minutes are not wrapped into hours).

    Example:
        >>> format_fight_duration(204)
        '3:24'
        >>> format_fight_duration(3725)
        '62:05'
    """
    seconds = int(seconds)
    return f"{seconds // 60}:{seconds % 60:02d}"


# ============================================================================
# Logging Configuration
# ============================================================================


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """
    Set up logging configuration for pullstamps.

    Console output goes to stderr so stdout stays free for timestamps.

    Args:
        verbose: Enable DEBUG level logging if True, otherwise WARNING
        log_file: Optional file path to write logs to

    Returns:
        Configured logger instance
    """
    log_level = logging.DEBUG if verbose else logging.WARNING

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if log_file else log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)  # Always DEBUG for file
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logger = logging.getLogger("pullstamps")
    logger.setLevel(logging.DEBUG)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance under the "pullstamps" namespace
    """
    if name == "pullstamps" or name.startswith("pullstamps."):
        return logging.getLogger(name)
    return logging.getLogger(f"pullstamps.{name}")


# ============================================================================
# Validation Utilities
# ============================================================================


def validate_file_exists(file_path: str) -> bool:
    """
    Check if a file exists.

    Args:
        file_path: Path to file

    Returns:
        True if file exists, False otherwise
    """
    return os.path.isfile(file_path)
