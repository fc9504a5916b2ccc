"""Canonical location names from the ANR location reference table."""

import csv
import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Tuple, Union

logger = logging.getLogger(__name__)

HEADER_MARKER = "location name"
DEFAULT_CSV_PATH = Path("data/anr_locations.csv")


class Gazetteer:
    """Read-only, insertion-ordered set of location names.

    Membership tests are case-insensitive; the first spelling seen for a
    name is the one kept.
    """

    def __init__(self, names: Iterable[str] = ()):
        by_key: Dict[str, str] = {}
        for name in names:
            cleaned = (name or "").strip()
            if cleaned:
                by_key.setdefault(cleaned.casefold(), cleaned)
        self._by_key = by_key
        self._names: Tuple[str, ...] = tuple(by_key.values())

    @classmethod
    def from_csv(cls, path: Union[str, Path]) -> "Gazetteer":
        """Load names from a reference CSV.

        Rows up to and including the header row (the first line containing
        "Location Name") are skipped. The first cell of each following row is
        a name. A missing file yields an empty gazetteer.

        Args:
            path: Path to the reference table

        Returns:
            Gazetteer built from the table
        """
        csv_path = Path(path)
        if not csv_path.is_file():
            logger.warning(f"Location reference table not found: {csv_path}")
            return cls()

        names = []
        in_data = False
        with csv_path.open(newline="", encoding="utf-8-sig") as handle:
            for line in handle:
                if not in_data:
                    if HEADER_MARKER in line.casefold():
                        in_data = True
                    continue

                cells = next(csv.reader([line]), [])
                if cells:
                    names.append(cells[0])

        gazetteer = cls(names)
        logger.debug(f"Loaded {len(gazetteer)} location names from {csv_path}")
        return gazetteer

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name.strip().casefold() in self._by_key

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)


_default: Optional[Gazetteer] = None
_default_lock = threading.Lock()


def default_gazetteer(path: Union[str, Path, None] = None) -> Gazetteer:
    """Process-wide gazetteer, built once on first use.

    Concurrent first callers block until the build finishes; later calls
    return the cached instance without locking. The path only matters for
    the call that performs the build.
    """
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = Gazetteer.from_csv(path or DEFAULT_CSV_PATH)
    return _default
