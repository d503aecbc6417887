"""Data models for pullstamps."""

import itertools
import uuid
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .utils import EmptyInputError, NoMatchError

NO_TEXT_MESSAGE = "No text provided"


@dataclass
class PullEntry:
    """One boss pull with its wall-clock time of day (HH:MM:SS)."""
    id: str
    name: str
    pull_time: str

    def __repr__(self) -> str:
        return f"PullEntry(id={self.id!r}, name={self.name!r}, pull_time={self.pull_time!r})"


@dataclass
class ParseResult:
    """Outcome of parsing pasted log text: entries on success, a message on failure."""
    valid: bool
    entries: List[PullEntry] = field(default_factory=list)
    error_message: Optional[str] = None

    @classmethod
    def success(cls, entries: List[PullEntry]) -> "ParseResult":
        return cls(valid=True, entries=list(entries))

    @classmethod
    def failure(cls, message: str) -> "ParseResult":
        return cls(valid=False, entries=[], error_message=message)

    def raise_for_error(self) -> List[PullEntry]:
        """
        Return the entries, or raise the matching error for a failed parse.

        Raises:
            EmptyInputError: If no text was given
            NoMatchError: If the text held no recognizable pulls
        """
        if self.valid:
            return self.entries
        if self.error_message == NO_TEXT_MESSAGE:
            raise EmptyInputError(self.error_message)
        raise NoMatchError(self.error_message or "Could not parse the logs")


def entry_ids(prefix: Optional[str] = None) -> Iterator[str]:
    """
    Yield ids that are unique within one parse call.

    A random seed per call is combined with a running counter.
    """
    seed = prefix or uuid.uuid4().hex[:8]
    for counter in itertools.count(1):
        yield f"{seed}-{counter}"
