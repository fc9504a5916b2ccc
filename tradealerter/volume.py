"""
Curtailment volume extraction from free-text pipeline notices.

Volumes are posted in MMcf/d and stored in MMBtu/d. The cascade, first match
wins:

1. "<X> MMcf/d (leaving <Y> MMcf/d)"  -> X, the curtailed amount
2. "capped at / restricted to <X> MMcf/d"  -> X, the allowed flow
3. Any "<X> MMcf/d" not inside a "leaving ..." or "reduced by ..." phrase
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Protocol

logger = logging.getLogger(__name__)

# 1 MMcf of pipeline-quality natural gas ~ 1.038 MMBtu
# https://www.eia.gov/tools/faqs/faq.php?id=45&t=8
MMCF_TO_MMBTU = Decimal("1.038")

CONTEXT_WINDOW = 20

_NUMBER = r"\d+(?:\.\d+)?"
_UNIT = r"\s*MMcf/d"

LEAVING_PATTERN = re.compile(
    rf"({_NUMBER}){_UNIT}\s*\(leaving\s+{_NUMBER}{_UNIT}\)", re.IGNORECASE
)
CAPPED_PATTERN = re.compile(
    rf"(?:capped|restricted)\s+(?:at|to)\s+({_NUMBER}){_UNIT}", re.IGNORECASE
)
GENERAL_PATTERN = re.compile(rf"({_NUMBER}){_UNIT}", re.IGNORECASE)

# Context phrases that disqualify a generic match
REMAINING_CAPACITY = re.compile(rf"leaving\s+{_NUMBER}{_UNIT}", re.IGNORECASE)
REDUCTION_DELTA = re.compile(
    rf"(?:reduced\s+by|reduction\s+of)\s+{_NUMBER}{_UNIT}", re.IGNORECASE
)


def _to_decimal(value: str) -> Optional[Decimal]:
    try:
        return Decimal(value)
    except InvalidOperation:
        return None


def mmcf_to_mmbtu(volume: Decimal) -> Decimal:
    """Convert a MMcf/d flow to MMBtu/d."""
    return volume * MMCF_TO_MMBTU


class VolumeMatcher(Protocol):
    """One stage of the volume cascade; returns MMcf/d."""

    name: str

    def match(self, text: str) -> Optional[Decimal]:
        ...


class PatternVolumeMatcher:
    """Takes group 1 of the first match of a pattern."""

    def __init__(self, name: str, pattern: "re.Pattern[str]"):
        self.name = name
        self.pattern = pattern

    def match(self, text: str) -> Optional[Decimal]:
        found = self.pattern.search(text)
        if not found:
            return None
        return _to_decimal(found.group(1))


class GeneralVolumeMatcher:
    """First "<X> MMcf/d" whose surrounding text is not a remainder or a delta."""

    name = "general"

    def __init__(self, window: int = CONTEXT_WINDOW):
        self.window = window

    def match(self, text: str) -> Optional[Decimal]:
        for found in GENERAL_PATTERN.finditer(text):
            start = max(0, found.start() - self.window)
            context = text[start : found.end() + self.window]

            if REMAINING_CAPACITY.search(context):
                continue
            if REDUCTION_DELTA.search(context):
                continue

            value = _to_decimal(found.group(1))
            if value is not None:
                return value
        return None


def build_matchers() -> List[VolumeMatcher]:
    """Matchers in cascade order."""
    return [
        PatternVolumeMatcher("leaving", LEAVING_PATTERN),
        PatternVolumeMatcher("capped", CAPPED_PATTERN),
        GeneralVolumeMatcher(),
    ]


class VolumeExtractor:
    """Runs the volume cascade over a notice body."""

    def __init__(
        self,
        log: Optional[logging.Logger] = None,
        matchers: Optional[List[VolumeMatcher]] = None,
    ):
        self.log = log or logger
        self.matchers = matchers or build_matchers()

    def extract(self, body: str) -> Optional[Decimal]:
        """Extract the curtailment volume.

        Args:
            body: Full notice text

        Returns:
            Volume in MMBtu/d, or None when no MMcf/d figure was found
        """
        if not body or not body.strip():
            return None

        for matcher in self.matchers:
            volume = matcher.match(body)
            if volume is not None:
                converted = mmcf_to_mmbtu(volume)
                self.log.debug(
                    f"Volume {volume} MMcf/d ({converted} MMBtu/d) "
                    f"matched by {matcher.name}"
                )
                return converted

        self.log.debug("No MMcf/d volume found")
        return None
