"""ANR bulletin board notice categories and their coarse notice types."""

import logging
from typing import Dict, Optional

from .notices import NoticeType

logger = logging.getLogger(__name__)

CATEGORY_TABLE_VERSION = "2025.1"

# Category strings as posted in the ANR EBB "Notice Type" column
CATEGORY_TYPES: Dict[str, NoticeType] = {
    # Critical
    "Critical period": NoticeType.CRITICAL,
    "Critical": NoticeType.CRITICAL,
    "Force Maj": NoticeType.CRITICAL,
    "Force Majeure": NoticeType.CRITICAL,
    "Constraint": NoticeType.CRITICAL,
    "Curtailment": NoticeType.CRITICAL,
    "OFO": NoticeType.CRITICAL,
    "Emergency": NoticeType.CRITICAL,
    # Planned outages
    "Plnd Outage": NoticeType.PLANNED_OUTAGE,
    "Planned Outage": NoticeType.PLANNED_OUTAGE,
    # Maintenance
    "Maint": NoticeType.MAINTENANCE,
    "Maintenance": NoticeType.MAINTENANCE,
    # Waste heat
    "Waste Heat": NoticeType.WASTE_HEAT,
    # Informational
    "Capacity Avail": NoticeType.INFORMATIONAL,
    "Cap Rel": NoticeType.INFORMATIONAL,
    "Chng Proc": NoticeType.INFORMATIONAL,
    "Gas Quality": NoticeType.INFORMATIONAL,
    "Imbalance": NoticeType.INFORMATIONAL,
    "Informational": NoticeType.INFORMATIONAL,
    "Measurement": NoticeType.INFORMATIONAL,
    "Meeting": NoticeType.INFORMATIONAL,
    "Nominations": NoticeType.INFORMATIONAL,
    "Open Season": NoticeType.INFORMATIONAL,
    "Other": NoticeType.INFORMATIONAL,
    "Pooling": NoticeType.INFORMATIONAL,
    "Rates": NoticeType.INFORMATIONAL,
    "Storage": NoticeType.INFORMATIONAL,
    "Tariff": NoticeType.INFORMATIONAL,
}

_CATEGORY_LOOKUP: Dict[str, NoticeType] = {
    name.casefold(): notice_type for name, notice_type in CATEGORY_TYPES.items()
}


def map_category(
    category: Optional[str], log: Optional[logging.Logger] = None
) -> NoticeType:
    """Resolve an operator category string to a coarse notice type.

    Matching is case-insensitive and exact after trimming whitespace.

    Args:
        category: Category string from the bulletin board
        log: Logger receiving the unmapped-category warning

    Returns:
        The mapped NoticeType, or INFORMATIONAL when the category is unknown
    """
    key = (category or "").strip().casefold()
    notice_type = _CATEGORY_LOOKUP.get(key)
    if notice_type is None:
        (log or logger).warning(
            f"Unmapped notice category {category!r}; "
            f"treating as {NoticeType.INFORMATIONAL.value}"
        )
        return NoticeType.INFORMATIONAL
    return notice_type
