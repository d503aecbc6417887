"""
Remote report module for pullstamps.

Fetches a report's fight list from the Warcraft Logs v1 API and shapes
each boss fight into a PullEntry named like the pasted-text parser does.
"""

import math
import re
from datetime import datetime, tzinfo
from typing import Any, Dict, List, Optional

import requests

from .models import PullEntry
from .parser import build_pull_name
from .utils import (
    EmptyInputError,
    EmptyReportError,
    InvalidUrlError,
    RemoteError,
    format_clock,
    format_fight_duration,
    get_logger,
)

logger = get_logger(__name__)

API_BASE_URL = "https://www.warcraftlogs.com/v1"
DEFAULT_TIMEOUT = 30.0

REPORT_ID_PATTERN = re.compile(r"reports/([a-zA-Z0-9]+)")


def extract_report_id(report_url: str) -> str:
    """
    Extract the report id from a report URL.

    Args:
        report_url: URL such as https://www.warcraftlogs.com/reports/AbC123#fight=5

    Returns:
        Report id string

    Raises:
        EmptyInputError: If the URL is blank
        InvalidUrlError: If the URL has no "reports/<id>" segment

    Example:
        >>> extract_report_id("https://www.warcraftlogs.com/reports/AbC123")
        'AbC123'
    """
    if not report_url or not report_url.strip():
        raise EmptyInputError("Please enter a Warcraftlogs URL")

    match = REPORT_ID_PATTERN.search(report_url)
    if not match:
        raise InvalidUrlError("Invalid Warcraftlogs URL format")

    return match.group(1)


def report_to_entries(report: Dict[str, Any], tz: Optional[tzinfo] = None) -> List[PullEntry]:
    """
    Convert a fights report into pull entries.

    Trash fights (boss == 0) are dropped; remaining fights are numbered
    from 1 in report order.

    Args:
        report: Decoded JSON report with "start" and "fights"
        tz: Timezone for pull times of day; local time if None

    Returns:
        List of PullEntry objects

    Raises:
        EmptyReportError: If the report has no fights
    """
    fights = report.get("fights") or []
    if not fights:
        raise EmptyReportError("No fights found in the log")

    start = report.get("start", 0)
    boss_fights = [fight for fight in fights if fight.get("boss", 0) != 0]

    entries = []
    for index, fight in enumerate(boss_fights):
        pulled_at = datetime.fromtimestamp((start + fight["startTime"]) / 1000, tz=tz)
        pull_time = format_clock(pulled_at.hour, pulled_at.minute, pulled_at.second)

        duration_seconds = (fight["endTime"] - fight["startTime"]) // 1000
        duration = format_fight_duration(duration_seconds)

        health = ""
        if fight.get("bossPercentage"):
            health = f"{math.floor(100 - fight['bossPercentage'] / 100)}%"

        phase = ""
        phase_number = fight.get("lastPhaseForPercentageDisplay")
        if phase_number:
            prefix = "I" if fight.get("lastPhaseIsIntermission") else "P"
            phase = f"{prefix}{phase_number}"

        entry = PullEntry(
            id=f"api-{fight.get('id')}-{index}",
            name=build_pull_name(str(index + 1), phase, health, duration),
            pull_time=pull_time,
        )
        logger.debug(f"Processed fight {index + 1}: {entry.name} at {entry.pull_time}")
        entries.append(entry)

    if not entries:
        logger.warning(f"Report has {len(fights)} fights but no boss pulls")

    return entries


class WarcraftLogsClient:
    """
    Minimal client for the Warcraft Logs v1 report API.

    Each fetch is a single request with no retries; the caller decides
    whether to try again.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        tz: Optional[tzinfo] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Public v1 API key
            base_url: API root URL
            timeout: Request timeout in seconds
            tz: Timezone for pull times of day; local time if None
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.tz = tz
        self.session = requests.Session()

    def fetch_report(self, report_id: str) -> Dict[str, Any]:
        """
        Fetch the fights report for a report id.

        Args:
            report_id: Report identifier

        Returns:
            Decoded JSON report

        Raises:
            RemoteError: On missing API key, network failure, non-success
                status, undecodable body, or a service error message
        """
        if not self.api_key:
            raise RemoteError("No Warcraftlogs API key configured (set WCL_API_KEY)")

        url = f"{self.base_url}/report/fights/{report_id}"
        logger.info(f"Fetching report {report_id}")

        try:
            response = self.session.get(
                url, params={"api_key": self.api_key}, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise RemoteError(f"Request failed: {e}") from e

        if not response.ok:
            raise RemoteError(f"API request failed with status {response.status_code}")

        try:
            report = response.json()
        except ValueError as e:
            raise RemoteError(f"Invalid JSON in API response: {e}") from e

        if not isinstance(report, dict):
            raise RemoteError("Unexpected API response")

        if report.get("error"):
            raise RemoteError(str(report["error"]))

        return report

    def fetch_pulls(self, report_url: str) -> Dict[str, Any]:
        """
        Fetch a report by URL and convert its boss fights to pull entries.

        Args:
            report_url: Report URL

        Returns:
            Dictionary with entries, report id and report start date
        """
        report_id = extract_report_id(report_url)
        report = self.fetch_report(report_id)
        entries = report_to_entries(report, tz=self.tz)

        report_date = datetime.fromtimestamp(report.get("start", 0) / 1000, tz=self.tz)
        logger.info(
            f"Imported {len(entries)} pulls from report {report_id} "
            f"({report_date:%Y-%m-%d})"
        )

        return {
            "entries": entries,
            "report_id": report_id,
            "report_date": report_date,
            "total_fights": len(report.get("fights") or []),
        }


def fetch_pulls(
    report_url: str,
    api_key: Optional[str],
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    """
    Convenience function for importing pulls from a report URL.

    Args:
        report_url: Report URL
        api_key: Public v1 API key
        timeout: Request timeout in seconds

    Returns:
        Dictionary with entries and report metadata
    """
    client = WarcraftLogsClient(api_key=api_key, timeout=timeout)
    return client.fetch_pulls(report_url)
