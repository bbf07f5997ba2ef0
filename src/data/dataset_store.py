# src/data/dataset_store.py

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse, unquote

import requests

from utils.errors import LoadError
from utils.helpers import ArgoHelpers
from .models import (
    EMPTY_DATASET,
    FlatRecord,
    FloatDataset,
    FloatRecord,
    MeasurementSample,
    Profile,
)

logger = logging.getLogger(__name__)

# Field name variants seen in the published datasets, canonical name first
FIELD_ALIASES = {
    'latitude': ('latitude_degN', 'latitude', 'lat'),
    'longitude': ('longitude_degE', 'longitude', 'lon'),
    'pressure': ('pressure_dbar', 'pressure'),
    'temperature': ('temperature_degC', 'temperature_C', 'temperature'),
    'salinity': ('salinity_psu', 'salinity_PSU', 'salinity'),
    'sample_time': ('sample_time', 'time', 'date'),
    'float_id': ('argo_id', 'float_id'),
}


def _field(data: Dict[str, Any], name: str) -> Any:
    return ArgoHelpers.first_present(data, FIELD_ALIASES[name])


def _normalize_sample(raw: Dict[str, Any]) -> MeasurementSample:
    return MeasurementSample(
        pressure=ArgoHelpers.coerce_float(_field(raw, 'pressure')),
        temperature=ArgoHelpers.coerce_float(_field(raw, 'temperature')),
        salinity=ArgoHelpers.coerce_float(_field(raw, 'salinity')),
    )


def _normalize_record(raw: Dict[str, Any]) -> FloatRecord:
    """Build a Profile when the entry carries measurements, a FlatRecord otherwise"""
    latitude = ArgoHelpers.coerce_float(_field(raw, 'latitude'))
    longitude = ArgoHelpers.coerce_float(_field(raw, 'longitude'))
    sample_time = ArgoHelpers.parse_timestamp(_field(raw, 'sample_time'))

    measurements = raw.get('measurements')
    if isinstance(measurements, dict):
        samples = {}
        for depth_label, values in measurements.items():
            if isinstance(values, dict):
                samples[str(depth_label)] = _normalize_sample(values)
            else:
                logger.debug(f"Skipping malformed measurement at depth {depth_label!r}")
        return Profile(
            latitude=latitude,
            longitude=longitude,
            measurements=MappingProxyType(samples),
            sample_time=sample_time,
        )

    return FlatRecord(
        latitude=latitude,
        longitude=longitude,
        temperature=ArgoHelpers.coerce_float(_field(raw, 'temperature')),
        salinity=ArgoHelpers.coerce_float(_field(raw, 'salinity')),
        pressure=ArgoHelpers.coerce_float(_field(raw, 'pressure')),
        sample_time=sample_time,
    )


def _normalize_records(entries: List[Any], float_id: str) -> Tuple[FloatRecord, ...]:
    records = []
    for entry in entries:
        if isinstance(entry, dict):
            records.append(_normalize_record(entry))
        else:
            logger.warning(f"Skipping malformed record for float {float_id}")
    return tuple(records)


def normalize_dataset(raw: Any) -> FloatDataset:
    """Convert either published JSON shape into the canonical dataset.

    Accepted shapes:
      * ``{float_id: [profile, ...]}`` (or a single profile object per id)
      * ``[{"argo_id": ..., "latitude": ..., ...}, ...]``, grouped by id in
        source order

    Raises LoadError for any other top-level shape.
    """
    grouped: Dict[str, List[Any]] = {}

    if isinstance(raw, dict):
        for float_id, entries in raw.items():
            if isinstance(entries, dict):
                entries = [entries]
            if not isinstance(entries, list):
                logger.warning(f"Skipping float {float_id}: unexpected entry type {type(entries).__name__}")
                continue
            grouped.setdefault(str(float_id), []).extend(entries)
    elif isinstance(raw, list):
        skipped = 0
        for entry in raw:
            float_id = _field(entry, 'float_id') if isinstance(entry, dict) else None
            if float_id is None or str(float_id).strip() == "":
                skipped += 1
                continue
            grouped.setdefault(str(float_id), []).append(entry)
        if skipped:
            logger.warning(f"Skipped {skipped} points without a float identifier")
    else:
        raise LoadError('<json>', f"unsupported top-level JSON type {type(raw).__name__}")

    dataset = {float_id: _normalize_records(entries, float_id) for float_id, entries in grouped.items()}
    return MappingProxyType(dataset)


def _read_source(source: str) -> str:
    """Read the raw JSON text behind a URL, file:// URI or local path"""
    parsed = urlparse(source)

    if parsed.scheme in ('http', 'https'):
        try:
            response = requests.get(source)
        except requests.exceptions.RequestException as e:
            raise LoadError(source, f"request failed: {e}") from e
        if not response.ok:
            raise LoadError(source, f"HTTP {response.status_code}")
        return response.text

    path = Path(unquote(parsed.path)) if parsed.scheme == 'file' else Path(source)
    try:
        return path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise LoadError(source, f"malformed JSON: {e}") from e
    except OSError as e:
        raise LoadError(source, f"cannot read file: {e}") from e


def fetch_dataset(source: str) -> FloatDataset:
    """Fetch and normalize the dataset in a single attempt"""
    text = _read_source(source)
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadError(source, f"malformed JSON: {e}") from e

    try:
        return normalize_dataset(raw)
    except LoadError as e:
        raise LoadError(source, e.cause) from e


class DatasetStore:
    """Holds the float dataset for one page session.

    The dataset is fetched at most once; on failure the store stays empty and
    keeps the LoadError so the page can show an inert view.
    """

    def __init__(self, source: Optional[str] = None):
        self.source = source
        self._dataset: FloatDataset = EMPTY_DATASET
        self._load_error: Optional[LoadError] = None
        self._attempted = False

    def load(self, source: Optional[str] = None) -> bool:
        """Load the dataset once. Returns True on success."""
        if self._attempted:
            return self._load_error is None

        self.source = source or self.source
        if not self.source:
            raise ValueError("No dataset source configured")

        self._attempted = True
        logger.info(f"Loading float dataset from {self.source}")

        try:
            self._dataset = fetch_dataset(self.source)
        except LoadError as e:
            logger.error(str(e))
            self._load_error = e
            self._dataset = EMPTY_DATASET
            return False

        logger.info(f"Loaded {len(self._dataset)} floats")
        return True

    @property
    def dataset(self) -> FloatDataset:
        return self._dataset

    @property
    def is_loaded(self) -> bool:
        return self._attempted

    @property
    def load_error(self) -> Optional[LoadError]:
        return self._load_error

    def float_ids(self) -> List[str]:
        return list(self._dataset.keys())

    def summary(self) -> Dict[str, int]:
        """Counts of floats, records and depth samples in the dataset"""
        records = [record for entries in self._dataset.values() for record in entries]
        return {
            'floats': len(self._dataset),
            'records': len(records),
            'samples': sum(len(record.samples()) for record in records),
        }
