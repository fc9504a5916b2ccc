"""
ANR electronic bulletin board scraper.

Fetches the notice search-results table at
https://ebb.anrpl.com/Notices/NoticesSearch.asp?sPipelineCode=ANR, then follows
each row's NoticeView link for the full notice text that the table omits.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from urllib.parse import parse_qs, urljoin, urlparse

import pytz
import requests
from bs4 import BeautifulSoup

from .notices import UNRESOLVED_ID, Pipeline, RawNotice

logger = logging.getLogger(__name__)

ANR_TIMEZONE = pytz.timezone("America/Chicago")
SEARCH_PATH = "/Notices/NoticesSearch.asp?sPipelineCode=ANR"
DETAIL_LINK_MARKER = "NoticeView"

# Search table columns
COLUMNS: Dict[str, int] = {
    "category": 0,
    "posted": 1,
    "notice_id": 4,
    "subject": 5,
}

TIMESTAMP_FORMATS = (
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
)


class ScraperError(Exception):
    """Raised when the notice search page cannot be fetched."""

    pass


@dataclass
class AnrOptions:
    base_url: str = "https://ebb.anrpl.com"
    lookback_days: int = 31
    timeout: float = 15.0


def parse_posted_timestamp(text: str) -> Optional[datetime]:
    """Parse a bulletin board timestamp (US Central time) to an aware datetime."""
    cleaned = re.sub(r"\s+", " ", text or "").strip()
    for fmt in TIMESTAMP_FORMATS:
        try:
            naive = datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
        return ANR_TIMEZONE.localize(naive)
    return None


def parse_notice_id(href: str, fallback: str = "") -> int:
    """Notice id from the link query string, else from the table cell."""
    query = parse_qs(urlparse(href).query)
    for key, values in query.items():
        if key.lower() in ("snoticeid", "noticeid", "id") and values:
            if values[0].isdigit():
                return int(values[0])
    digits = re.sub(r"\D", "", fallback or "")
    return int(digits) if digits else UNRESOLVED_ID


class AnrScraper:
    """Builds RawNotice records from the ANR bulletin board."""

    def __init__(
        self,
        options: Optional[AnrOptions] = None,
        session: Optional[requests.Session] = None,
    ):
        self.options = options or AnrOptions()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "TradeAlerter/1.0"})

    @property
    def search_url(self) -> str:
        return self.options.base_url.rstrip("/") + SEARCH_PATH

    def fetch_notices(self) -> List[RawNotice]:
        """Fetch every notice posted within the lookback window.

        Returns:
            Raw notices in table order

        Raises:
            ScraperError: If the search page cannot be fetched
        """
        try:
            response = self.session.get(self.search_url, timeout=self.options.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to fetch notices from ANR pipeline: {e}")
            raise ScraperError(f"ANR notice search failed: {e}") from e

        cutoff = datetime.now(timezone.utc) - timedelta(
            days=self.options.lookback_days
        )
        notices: List[RawNotice] = []
        for row in self._detail_rows(response.text):
            notice = self._parse_row(row, response.url or self.search_url, cutoff)
            if notice is not None:
                notices.append(notice)

        logger.info(f"Fetched {len(notices)} ANR notices")
        return notices

    def _detail_rows(self, html: str) -> List:
        soup = BeautifulSoup(html, "html.parser")
        rows = []
        for row in soup.find_all("tr"):
            if row.find("a", href=re.compile(DETAIL_LINK_MARKER, re.IGNORECASE)):
                rows.append(row)
        return rows

    def _parse_row(
        self, row, page_url: str, cutoff: datetime
    ) -> Optional[RawNotice]:
        cells = [cell.get_text(" ", strip=True) for cell in row.find_all("td")]
        if len(cells) <= max(COLUMNS.values()):
            logger.warning(f"Skipping notice row with {len(cells)} cells")
            return None

        timestamp = parse_posted_timestamp(cells[COLUMNS["posted"]])
        if timestamp is None:
            logger.warning(
                f"Could not parse posted time {cells[COLUMNS['posted']]!r}"
            )
            return None
        if timestamp < cutoff:
            logger.debug(
                f"Skipping notice {cells[COLUMNS['notice_id']]} posted {timestamp}"
            )
            return None

        anchor = row.find("a", href=re.compile(DETAIL_LINK_MARKER, re.IGNORECASE))
        link = urljoin(page_url, anchor["href"])

        body = self.fetch_notice_text(link)
        if body is None:
            return None

        return RawNotice(
            id=parse_notice_id(link, cells[COLUMNS["notice_id"]]),
            pipeline=Pipeline.ANR,
            subject=cells[COLUMNS["subject"]],
            body=body,
            category=cells[COLUMNS["category"]],
            timestamp=timestamp,
            link=link,
        )

    def fetch_notice_text(self, url: str) -> Optional[str]:
        """Visible text of a notice detail page, or None if it failed to load."""
        try:
            response = self.session.get(url, timeout=self.options.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Failed to fetch notice detail {url}: {e}")
            return None

        soup = BeautifulSoup(response.text, "html.parser")
        for tag in soup(["script", "style"]):
            tag.decompose()

        container = soup.find("pre") or soup.body or soup
        lines = [line.strip() for line in container.get_text("\n").splitlines()]
        return "\n".join(line for line in lines if line)
