# src/search/lookup_engine.py

import logging
from typing import List, Optional

from data.models import FloatDataset, Found, LookupResult, NotFound

logger = logging.getLogger(__name__)


def normalize_id(raw_id: Optional[str]) -> str:
    return (raw_id or "").strip()


def find(dataset: Optional[FloatDataset], raw_id: Optional[str]) -> LookupResult:
    """Exact, case-insensitive lookup of a float identifier.

    Scans the dataset in stored order and returns the first match. For a
    float with several records the first one supplies the coordinates. A
    record without usable coordinates counts as not found.
    """
    float_id = normalize_id(raw_id)
    if not float_id or not dataset:
        return NotFound(float_id)

    wanted = float_id.casefold()
    for stored_id, records in dataset.items():
        if stored_id.strip().casefold() != wanted:
            continue

        if not records:
            logger.debug(f"Float {stored_id} has no records")
            return NotFound(float_id)

        record = records[0]
        if record.latitude is None or record.longitude is None:
            logger.warning(f"Float {stored_id} has no coordinates, treating as not found")
            return NotFound(float_id)

        return Found(
            float_id=stored_id,
            latitude=record.latitude,
            longitude=record.longitude,
            record=record,
            records=tuple(records),
        )

    return NotFound(float_id)


def suggest_ids(dataset: Optional[FloatDataset], prefix: Optional[str], limit: int = 10) -> List[str]:
    """Stored ids starting with prefix, for the search box hint"""
    if not dataset:
        return []
    wanted = normalize_id(prefix).casefold()
    matches = [stored_id for stored_id in dataset if stored_id.casefold().startswith(wanted)]
    return matches[:limit]
