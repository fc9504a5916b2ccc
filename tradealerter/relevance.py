"""
Trading-signal relevance rules for parsed notices.

A notice is relevant when any rule fires:
- posted within the last RECENT_DAYS days (relative to evaluation time)
- coarse type is Critical, PlannedOutage or Maintenance
- a positive curtailment volume was extracted
- subject or body mentions a trading keyword
- subject, body or location mentions the Henry Hub region
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence

from .notices import Notice, NoticeType

REGION_MARKERS_VERSION = "2025.1"

RECENT_DAYS = 3

RELEVANT_TYPES: FrozenSet[NoticeType] = frozenset(
    {NoticeType.CRITICAL, NoticeType.PLANNED_OUTAGE, NoticeType.MAINTENANCE}
)

TRADING_KEYWORDS = (
    "force majeure",
    "outage",
    "curtailment",
)

# Henry Hub: https://en.wikipedia.org/wiki/Henry_Hub
HENRY_HUB_MARKERS = (
    "louisiana",
    "zone 1",  # ANR's Louisiana zone in the location reference table
    "acadian",
    "columbia gulf transmission",
    "gulf south",
    "bridgeline",
    "ngpl",
    "sea robin",
    "southern natural",
    "texas gas",
    "transcontinental",
    "trunkline",
    "jefferson island",
    "sabine",
)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class RelevanceClassifier:
    """Pure predicate over a parsed notice.

    Nothing here mutates the notice; each call re-evaluates every rule
    against the notice's current fields and the evaluation time.
    """

    def __init__(
        self,
        keywords: Sequence[str] = TRADING_KEYWORDS,
        region_markers: Sequence[str] = HENRY_HUB_MARKERS,
        recent_days: int = RECENT_DAYS,
    ):
        self.keywords = tuple(k.lower() for k in keywords)
        self.region_markers = tuple(m.lower() for m in region_markers)
        self.recent_window = timedelta(days=recent_days)
        self.rules: Dict[str, Callable[[Notice, datetime], bool]] = {
            "recent": self._is_recent,
            "type": self._has_relevant_type,
            "volume": self._has_curtailment_volume,
            "keyword": self._mentions_keyword,
            "region": self._mentions_region,
        }

    def is_relevant(self, notice: Notice, now: Optional[datetime] = None) -> bool:
        """Check if any relevance rule fires for a notice.

        Args:
            notice: Parsed notice
            now: Evaluation time, defaults to the current UTC time

        Returns:
            True when the notice is a trading signal
        """
        moment = _as_utc(now) if now else datetime.now(timezone.utc)
        return any(rule(notice, moment) for rule in self.rules.values())

    def matched_reasons(
        self, notice: Notice, now: Optional[datetime] = None
    ) -> List[str]:
        """Names of every rule that fires for a notice."""
        moment = _as_utc(now) if now else datetime.now(timezone.utc)
        return [name for name, rule in self.rules.items() if rule(notice, moment)]

    def _is_recent(self, notice: Notice, now: datetime) -> bool:
        return _as_utc(notice.timestamp) > now - self.recent_window

    def _has_relevant_type(self, notice: Notice, now: datetime) -> bool:
        return notice.type in RELEVANT_TYPES

    def _has_curtailment_volume(self, notice: Notice, now: datetime) -> bool:
        return notice.curtailment_volume is not None and notice.curtailment_volume > 0

    def _mentions_keyword(self, notice: Notice, now: datetime) -> bool:
        text = f"{notice.subject} {notice.full_text}".lower()
        return any(keyword in text for keyword in self.keywords)

    def _mentions_region(self, notice: Notice, now: datetime) -> bool:
        text = f"{notice.subject} {notice.full_text}".lower()
        location = (notice.location or "").lower()
        return any(
            marker in text or marker in location for marker in self.region_markers
        )


@lru_cache(maxsize=1)
def default_classifier() -> RelevanceClassifier:
    """Shared classifier with the built-in keyword and region lists."""
    return RelevanceClassifier()
