"""Turns raw scraped notices into parsed notices."""

import logging
from typing import Iterable, List, Optional

from .categories import map_category
from .gazetteer import Gazetteer
from .location import LocationExtractor
from .notices import Notice, RawNotice
from .volume import VolumeExtractor

logger = logging.getLogger(__name__)


class NoticeParser:
    """Resolves notice type and runs both extractors once per notice."""

    def __init__(
        self,
        gazetteer: Optional[Gazetteer] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.log = log or logger
        self.location_extractor = LocationExtractor(gazetteer, log=self.log)
        self.volume_extractor = VolumeExtractor(log=self.log)

    def parse(self, raw: RawNotice) -> Notice:
        """Build a fully populated notice from a raw record.

        Args:
            raw: Notice as supplied by the scraper

        Returns:
            Notice with type, location and curtailment volume set
        """
        notice = Notice(
            id=raw.id,
            pipeline=raw.pipeline,
            type=map_category(raw.category, self.log),
            subject=raw.subject or "",
            full_text=raw.body or "",
            timestamp=raw.timestamp,
            link=raw.link,
        )
        return self.populate(notice)

    def populate(self, notice: Notice) -> Notice:
        """Set location and curtailment volume from the notice text.

        Derived fields are written once; a notice that was already parsed is
        returned unchanged.
        """
        if notice.parsed:
            self.log.debug(f"Notice {notice.id} already parsed; skipping")
            return notice

        notice.location = self.location_extractor.extract(
            notice.subject, notice.full_text
        )
        notice.curtailment_volume = self.volume_extractor.extract(notice.full_text)
        notice.parsed = True
        return notice

    def parse_all(self, raws: Iterable[RawNotice]) -> List[Notice]:
        """Parse a batch of raw notices in order."""
        notices = [self.parse(raw) for raw in raws]
        self.log.info(f"Parsed {len(notices)} notices")
        return notices
