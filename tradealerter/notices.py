"""
TradeAlerter notice model - raw and parsed pipeline notices.

A RawNotice is what a scraper hands over: subject, body, category string,
posting time and permalink. A Notice carries the same data plus the fields
derived by the parser (coarse type, location, curtailment volume). Relevance
is never stored; it is recomputed from the other fields on every read.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

UNKNOWN_LOCATION = "Unknown"
UNRESOLVED_ID = -1


class Pipeline(Enum):
    """Pipeline operators with a supported bulletin board"""

    ANR = "ANR"


class NoticeType(Enum):
    """Coarse notice type"""

    CRITICAL = "Critical"
    INFORMATIONAL = "Informational"
    MAINTENANCE = "Maintenance"
    PLANNED_OUTAGE = "PlannedOutage"
    WASTE_HEAT = "WasteHeat"


@dataclass
class RawNotice:
    """Notice as supplied by a fetcher, before any text extraction"""

    subject: str
    body: str
    category: str
    timestamp: datetime
    link: str
    id: int = UNRESOLVED_ID
    pipeline: Pipeline = Pipeline.ANR


@dataclass
class Notice:
    """Parsed notice with derived location and curtailment volume"""

    # Core fields
    pipeline: Pipeline
    type: NoticeType
    subject: str
    full_text: str
    timestamp: datetime
    link: str
    id: int = UNRESOLVED_ID

    # Derived fields (set once by the parser)
    location: str = UNKNOWN_LOCATION
    curtailment_volume: Optional[Decimal] = None  # MMBtu/d
    parsed: bool = field(default=False, repr=False)

    @property
    def is_relevant(self) -> bool:
        """Whether this notice is a trading signal, evaluated against the current time."""
        from tradealerter.relevance import default_classifier

        return default_classifier().is_relevant(self)

    def relevance_reasons(self) -> List[str]:
        """Names of the relevance rules that currently fire for this notice."""
        from tradealerter.relevance import default_classifier

        return default_classifier().matched_reasons(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary"""
        return {
            "id": self.id,
            "pipeline": self.pipeline.value,
            "type": self.type.value,
            "subject": self.subject,
            "location": self.location,
            "timestamp": self.timestamp.isoformat(),
            "curtailment_volume": (
                str(self.curtailment_volume)
                if self.curtailment_volume is not None
                else None
            ),
            "link": self.link,
            "is_relevant": self.is_relevant,
        }
