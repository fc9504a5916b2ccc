"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from typing import Callable, Optional

import pytest

from tradealerter.gazetteer import Gazetteer
from tradealerter.notices import Notice, NoticeType, Pipeline

SAMPLE_CSV = """ANR Pipeline Company
Location Data Download
Effective Date: 01/01/2025
Location Name,Location ID,Location Type,Zone,State
Bridgman,226,Compressor Station,ML7,MI
Cottage Grove,27,Compressor Station,ML7,WI
Eunice,139,Compressor Station,Zone 1,LA
Sandwich,204,Compressor Station,ML7,IL
"""


@pytest.fixture
def gazetteer_csv(tmp_path: Path) -> Path:
    """Write a small location reference table."""
    path = tmp_path / "anr_locations.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture
def gazetteer(gazetteer_csv: Path) -> Gazetteer:
    """Gazetteer loaded from the sample table."""
    return Gazetteer.from_csv(gazetteer_csv)


@pytest.fixture
def make_notice() -> Callable[..., Notice]:
    """Factory for parsed notices that trip no relevance rule by default."""

    def _make(
        type: NoticeType = NoticeType.INFORMATIONAL,
        subject: str = "Posting of rate schedule",
        full_text: str = "Updated rate sheets are available on the website",
        location: str = "Unknown",
        days_old: float = 10,
        curtailment_volume: Optional[Decimal] = None,
        id: int = 1001,
    ) -> Notice:
        return Notice(
            id=id,
            pipeline=Pipeline.ANR,
            type=type,
            subject=subject,
            full_text=full_text,
            timestamp=datetime.now(timezone.utc) - timedelta(days=days_old),
            link=f"https://ebb.anrpl.com/Notices/NoticeView.asp?sNoticeId={id}",
            location=location,
            curtailment_volume=curtailment_volume,
            parsed=True,
        )

    return _make
