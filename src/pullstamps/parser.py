"""
Log text parsing module for pullstamps.

Extracts boss pulls from text copied out of a combat-log report page.
The parser is a line-oriented heuristic scraper: it never raises, and
always reports its outcome as a ParseResult.
"""

import re
import sys
from typing import Iterator, List, Optional

from .models import NO_TEXT_MESSAGE, ParseResult, PullEntry, entry_ids
from .utils import (
    EmptyInputError,
    PullstampsError,
    format_clock,
    get_logger,
    to_24_hour,
    validate_file_exists,
)

logger = get_logger(__name__)

STRATEGIES = ("structured", "timestamps")

MAX_NAME_LENGTH = 50
MIN_NAME_LENGTH = 2


class LogTextParser:
    """
    Parses pasted raid-log text into pull entries.

    Two strategies are available:

    - "structured" (default): accumulates the pull number, duration,
      phase and boss health seen on earlier lines and emits one entry
      when a "7:46 PM" style time appears.
    - "timestamps": emits one entry for every line holding an
      HH:MM:SS time, naming it from the text around the time.
    """

    # Structured strategy
    PULL_PATTERN = re.compile(r"^(\d+)\s+\((\d+):(\d+)\)")
    MERIDIEM_TIME_PATTERN = re.compile(r"(\d+):(\d+)\s+(AM|PM)", re.IGNORECASE)
    PHASE_PATTERN = re.compile(r"(P\d+|I\d+)")
    HEALTH_PATTERN = re.compile(r"^(\d+)%")

    # Timestamps strategy
    CLOCK_PATTERN = re.compile(r"\b(\d{1,2}):(\d{2}):(\d{2})(?:\s*([AaPp][Mm])\b)?")
    NOISE_PATTERNS = (
        re.compile(r"\bpull\s*#?\s*\d+\b", re.IGNORECASE),
        re.compile(r"\([^)]*\)"),
        re.compile(r"\b(?:wipe|wiped|kill|killed|attempt)\b", re.IGNORECASE),
    )

    ENCODINGS = ("utf-8", "utf-8-sig", "latin-1", "cp1252")

    def __init__(self, strategy: str = "structured"):
        """
        Initialize the parser.

        Args:
            strategy: "structured" or "timestamps"

        Raises:
            PullstampsError: If the strategy name is unknown
        """
        if strategy not in STRATEGIES:
            raise PullstampsError(
                f"Unknown parse strategy: {strategy}. "
                f"Use 'structured' or 'timestamps'."
            )
        self.strategy = strategy

    def load_text(self, text_path: str) -> str:
        """
        Load pasted log text from a file, or from stdin when path is "-".

        Args:
            text_path: Path to text file

        Returns:
            Raw text content

        Raises:
            EmptyInputError: If the file does not exist
            PullstampsError: If the file cannot be decoded
        """
        if text_path == "-":
            return sys.stdin.read()

        if not validate_file_exists(text_path):
            raise EmptyInputError(f"Log text file not found: {text_path}")

        for encoding in self.ENCODINGS:
            try:
                with open(text_path, "r", encoding=encoding) as f:
                    text = f.read()
                logger.debug(f"Loaded log text with {encoding} encoding")
                return text
            except UnicodeDecodeError:
                continue

        raise PullstampsError(
            f"Could not decode log text with any supported encoding: {self.ENCODINGS}"
        )

    def parse(self, text: str) -> ParseResult:
        """
        Parse log text into pull entries.

        Args:
            text: Text copied from the report page

        Returns:
            ParseResult; valid only if at least one pull was found
        """
        if not text or not text.strip():
            return ParseResult.failure(NO_TEXT_MESSAGE)

        try:
            lines = [line.strip() for line in text.splitlines()]
            ids = entry_ids()

            if self.strategy == "structured":
                entries = self._parse_structured(lines, ids)
                hint = "Make sure it includes times in the format '7:46 PM'."
            else:
                entries = self._parse_timestamps(lines, ids)
                hint = "Make sure it includes times in the format '19:46:00'."
        except Exception as e:
            logger.error(f"Error parsing logs: {e}", exc_info=True)
            return ParseResult.failure("Error parsing logs")

        if not entries:
            return ParseResult.failure(f"No valid pull data found in the text. {hint}")

        logger.info(f"Parsed {len(entries)} pulls ({self.strategy})")
        return ParseResult.success(entries)

    def _parse_structured(self, lines: List[str], ids: Iterator[str]) -> List[PullEntry]:
        entries = []
        pull_number = duration = phase = health = ""

        for line in lines:
            if not line:
                continue

            health_match = self.HEALTH_PATTERN.match(line)
            if health_match:
                health = f"{health_match.group(1)}%"

            phase_match = self.PHASE_PATTERN.search(line)
            if phase_match:
                phase = phase_match.group(1)

            pull_match = self.PULL_PATTERN.match(line)
            if pull_match:
                pull_number = pull_match.group(1)
                duration = f"{pull_match.group(2)}:{pull_match.group(3)}"

            time_match = self.MERIDIEM_TIME_PATTERN.search(line)
            if not time_match or not pull_number:
                continue

            hour = to_24_hour(int(time_match.group(1)), time_match.group(3))
            minute = int(time_match.group(2))
            if hour > 23 or minute > 59:
                logger.debug(f"Skipping out-of-range time: {time_match.group(0)}")
                continue

            entries.append(
                PullEntry(
                    id=next(ids),
                    name=build_pull_name(pull_number, phase, health, duration),
                    pull_time=format_clock(hour, minute),
                )
            )
            logger.debug(f"Pull {pull_number} at {entries[-1].pull_time}")

            pull_number = duration = phase = health = ""

        return entries

    def _parse_timestamps(self, lines: List[str], ids: Iterator[str]) -> List[PullEntry]:
        entries = []

        for line in lines:
            if not line:
                continue

            match = self.CLOCK_PATTERN.search(line)
            if not match:
                continue

            hours, minutes, seconds = (int(g) for g in match.group(1, 2, 3))
            hours = to_24_hour(hours, match.group(4))
            if hours > 23 or minutes > 59 or seconds > 59:
                logger.debug(f"Skipping out-of-range time: {match.group(0)}")
                continue

            placeholder = f"Pull {len(entries) + 1}"
            candidate = self._pick_name(line[: match.start()], line[match.end():])
            name = self._clean_name(candidate or placeholder, placeholder)

            entries.append(
                PullEntry(
                    id=next(ids),
                    name=name,
                    pull_time=format_clock(hours, minutes, seconds),
                )
            )

        return entries

    @staticmethod
    def _pick_name(before: str, after: str) -> Optional[str]:
        """Prefer the text before the time, then the text after it."""
        for text in (before.strip(), after.strip()):
            if text and len(text) <= MAX_NAME_LENGTH:
                return text
        return None

    def _clean_name(self, candidate: str, placeholder: str) -> str:
        """Strip pull counters, parentheticals and status words from a name."""
        cleaned = candidate
        for pattern in self.NOISE_PATTERNS:
            cleaned = pattern.sub(" ", cleaned)
        cleaned = re.sub(r"\s+", " ", cleaned).strip(" -:|,.")

        if len(cleaned) < MIN_NAME_LENGTH:
            return candidate or placeholder
        return cleaned


def build_pull_name(
    pull_label: str,
    phase: str = "",
    health: str = "",
    duration: str = "",
) -> str:
    """
    Assemble a pull title: "Pull <n>[: <phase>][ - <health>][ (<duration>)]".

    Example:
        >>> build_pull_name("1", "P2", "48%", "3:24")
        'Pull 1: P2 - 48% (3:24)'
        >>> build_pull_name("4")
        'Pull 4'
    """
    name = f"Pull {pull_label}"
    if phase:
        name += f": {phase}"
    if health:
        name += f" - {health}"
    if duration:
        name += f" ({duration})"
    return name


def parse_log_text(text: str, strategy: str = "structured") -> ParseResult:
    """
    Convenience function for parsing pasted log text.

    Args:
        text: Text copied from the report page
        strategy: "structured" or "timestamps"

    Returns:
        ParseResult
    """
    parser = LogTextParser(strategy=strategy)
    return parser.parse(text)
