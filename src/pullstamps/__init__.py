"""
pullstamps: Raid Log Pulls to Video Chapter Timestamps

Converts boss pull times from Warcraftlogs (pasted report text or the
report API) into offsets from a recording's start, formatted as video
description chapter markers.
"""

__version__ = "0.1.0"
__author__ = "pullstamps Contributors"
__license__ = "MIT"

from .cli import main as cli_main
from .formatter import TimestampFormatter, compute_offset, format_for_video, generate_timestamps
from .models import ParseResult, PullEntry
from .parser import LogTextParser, build_pull_name, parse_log_text
from .remote import WarcraftLogsClient, extract_report_id, fetch_pulls, report_to_entries
from .session import ConverterSession
from .utils import (
    EmptyInputError,
    EmptyReportError,
    FormatError,
    InvalidUrlError,
    NoMatchError,
    PullstampsError,
    RemoteError,
    normalize_time_input,
)

__all__ = [
    "__version__",
    "normalize_time_input",
    "PullstampsError",
    "FormatError",
    "EmptyInputError",
    "NoMatchError",
    "InvalidUrlError",
    "RemoteError",
    "EmptyReportError",
    "PullEntry",
    "ParseResult",
    "LogTextParser",
    "parse_log_text",
    "build_pull_name",
    "WarcraftLogsClient",
    "extract_report_id",
    "report_to_entries",
    "fetch_pulls",
    "compute_offset",
    "format_for_video",
    "TimestampFormatter",
    "generate_timestamps",
    "ConverterSession",
    "cli_main",
]
