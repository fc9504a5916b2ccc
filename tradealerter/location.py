"""
Location extraction from free-text pipeline notices.

Operators write notice bodies by hand, so the location is found with an
ordered cascade of matchers. The first matcher returning a value wins:

1. Event-marker headline ("CAPACITY REDUCTION Southeast Mainline - ...")
2. "NOTICE OF FORCE MAJEURE - ..." headline
3. Gazetteer lookup against the ANR location reference table
4. Structured tokens ("Segment 4", "Zone 1", "Station Bridgman", ...)

Headline candidates go through clean_location(). The first headline that
matches decides the result, so a rejected candidate yields "Unknown".
"""

import logging
import re
from typing import List, Optional, Protocol, Sequence

from .gazetteer import Gazetteer
from .notices import UNKNOWN_LOCATION

logger = logging.getLogger(__name__)

EVENT_MARKERS = (
    "CAPACITY REDUCTION",
    "FORCE MAJEURE",
    "CURTAILMENT",
    "OUTAGE",
    "EMERGENCY",
    "MAINTENANCE",
    "OPERATIONAL ALERT",
    "CONSTRAINT",
)

_PREFIX = r"(?:(?:LIFTED|UPDATED):\s+)?"
_SEPARATOR = r"[\s:\-\u2013\u2014]+"
_STOP = (
    r"(?:\s*\((?:Posted|Updated|Effective|Supersede|Lifted)\b"
    r"|$|\r?\n|\."
    r"|\s+\d{1,2}/\d{1,2}/\d{4})"
)

STRUCTURED_PATTERNS = (
    r"Segment\s+\d+",
    r"Zone\s+\d+",
    r"Point\s+\d+",
    r"Station\s+[A-Za-z0-9\-]+",
    r"Location\s+[A-Za-z0-9\-]+",
)

# Cleanup rules for headline candidates
CONTACT_PATTERN = re.compile(
    r"@\w+\.\w+|email|contact|phone|\d{3}[-.\s]?\d{3}[-.\s]?\d{4}", re.IGNORECASE
)
ADMIN_PATTERN = re.compile(
    r"after.?hours|on.?call|hotline|customer\s+service|commercial\s+services"
    r"|contacts?|marketing|contracts?|security",
    re.IGNORECASE,
)
TRAILING_BOILERPLATE = re.compile(
    r"\s*\b(?:scheduled|begins|ends|effective|posted|please|customers?"
    r"|for\s+\d{1,2}/\d{1,2}/\d{4}).*$",
    re.IGNORECASE,
)
ADMIN_SUFFIX = re.compile(
    r"\s*\b(?:maintenance|pipe|gas|control|noms|scheduling):\s*.*$", re.IGNORECASE
)
DATE_OR_TIME = re.compile(r"^\d{1,2}/\d{1,2}/\d{4}|\d{1,2}:\d{2}$")
TRIM_CHARS = " \t-:,.(\u2013\u2014"
MIN_LOCATION_LENGTH = 3


def clean_location(raw: str) -> Optional[str]:
    """Clean a headline candidate into a location name.

    Args:
        raw: Text captured after an event marker

    Returns:
        The cleaned location, or None when the candidate is contact details,
        administrative boilerplate, too short, or a bare date/time
    """
    if CONTACT_PATTERN.search(raw) or ADMIN_PATTERN.search(raw):
        return None

    candidate = TRAILING_BOILERPLATE.sub("", raw)
    candidate = ADMIN_SUFFIX.sub("", candidate)
    candidate = candidate.strip(TRIM_CHARS)

    if len(candidate) < MIN_LOCATION_LENGTH or DATE_OR_TIME.search(candidate):
        return None

    return candidate


class LocationMatcher(Protocol):
    """One stage of the location cascade."""

    name: str

    def match(self, text: str) -> Optional[str]:
        """Return a location found in text, or None."""
        ...


class HeadlineMatcher:
    """Matches "<lead phrase> <separator> <location>" headlines."""

    def __init__(
        self,
        name: str,
        lead_phrases: Sequence[str],
        log: Optional[logging.Logger] = None,
    ):
        self.name = name
        self.log = log or logger
        self.patterns: List["re.Pattern[str]"] = [
            re.compile(
                _PREFIX + lead + _SEPARATOR + r"(.+?)" + _STOP, re.IGNORECASE
            )
            for lead in lead_phrases
        ]

    def match(self, text: str) -> Optional[str]:
        """Cleaned location from the first matching headline.

        A headline that matches but fails cleanup ends the cascade with
        "Unknown"; None means no headline matched at all.
        """
        for pattern in self.patterns:
            found = pattern.search(text)
            if not found:
                continue

            cleaned = clean_location(found.group(1))
            if cleaned is None:
                self.log.debug(
                    f"Rejected headline candidate {found.group(1)!r} "
                    f"matched by {self.name}"
                )
                return UNKNOWN_LOCATION
            return cleaned
        return None


class GazetteerMatcher:
    """Whole-word search for any known location name."""

    name = "gazetteer"

    def __init__(self, gazetteer: Gazetteer):
        self.gazetteer = gazetteer
        self.patterns = [
            (loc, re.compile(rf"\b{re.escape(loc)}\b", re.IGNORECASE))
            for loc in gazetteer
        ]

    def match(self, text: str) -> Optional[str]:
        for loc, pattern in self.patterns:
            if pattern.search(text):
                return loc
        return None


class StructuredTokenMatcher:
    """Segment / Zone / Point / Station / Location tokens."""

    name = "structured_token"

    def __init__(self, patterns: Sequence[str] = STRUCTURED_PATTERNS):
        self.patterns = [re.compile(p, re.IGNORECASE) for p in patterns]

    def match(self, text: str) -> Optional[str]:
        for pattern in self.patterns:
            found = pattern.search(text)
            if found:
                return found.group(0).strip()
        return None


def build_matchers(
    gazetteer: Gazetteer, log: Optional[logging.Logger] = None
) -> List[LocationMatcher]:
    """Matchers in cascade order."""
    return [
        HeadlineMatcher(
            "event_marker", [re.escape(marker) for marker in EVENT_MARKERS], log
        ),
        HeadlineMatcher(
            "force_majeure_notice", [r"NOTICE\s+OF\s+FORCE\s+MAJEURE"], log
        ),
        GazetteerMatcher(gazetteer),
        StructuredTokenMatcher(),
    ]


class LocationExtractor:
    """Runs the location cascade over a notice body."""

    def __init__(
        self,
        gazetteer: Optional[Gazetteer] = None,
        log: Optional[logging.Logger] = None,
        matchers: Optional[Sequence[LocationMatcher]] = None,
    ):
        self.gazetteer = gazetteer if gazetteer is not None else Gazetteer()
        self.log = log or logger
        self.matchers = list(matchers or build_matchers(self.gazetteer, self.log))

    def extract(self, subject: str, body: str) -> str:
        """Extract the best-guess location.

        Only the body is searched; the subject appears in the no-match
        diagnostic.

        Args:
            subject: Notice subject line
            body: Full notice text

        Returns:
            Location string, "Unknown" when nothing matched
        """
        if not body or not body.strip():
            return UNKNOWN_LOCATION

        for matcher in self.matchers:
            location = matcher.match(body)
            if location:
                self.log.debug(f"Location {location!r} matched by {matcher.name}")
                return location

        self.log.info(f"Failed to parse location from notice: {subject!r}")
        return UNKNOWN_LOCATION
