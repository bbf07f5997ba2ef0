# src/search/series_extractor.py

import logging
from typing import Iterable, List, Optional

import pandas as pd

from data.models import ChartSeries, FloatRecord, SeriesPoint

logger = logging.getLogger(__name__)

SERIES_FIELDS = ('temperature', 'salinity')


def _check_field(field: str):
    if field not in SERIES_FIELDS:
        raise ValueError(f"Unknown series field: {field!r} (expected one of {SERIES_FIELDS})")


def extract_series(record: Optional[FloatRecord], field: str) -> ChartSeries:
    """(pressure, value) pairs of a record, ascending by pressure.

    Samples missing the pressure or the requested value are dropped. The
    sort is stable so samples at equal pressure keep their stored order.
    """
    _check_field(field)
    if record is None:
        return ()

    points = []
    for _, sample in record.samples():
        value = getattr(sample, field)
        if sample.pressure is None or value is None:
            continue
        points.append(SeriesPoint(x=sample.pressure, y=value))

    return tuple(sorted(points, key=lambda point: point.x))


def _surface_value(record: FloatRecord, field: str) -> Optional[float]:
    """Field value of the shallowest sample carrying it"""
    samples = [sample for _, sample in record.samples() if getattr(sample, field) is not None]
    if not samples:
        return None
    with_pressure = [sample for sample in samples if sample.pressure is not None]
    if with_pressure:
        return getattr(min(with_pressure, key=lambda sample: sample.pressure), field)
    # flat records usually carry no pressure
    return getattr(samples[0], field)


def extract_time_series(records: Iterable[FloatRecord], field: str) -> ChartSeries:
    """(sample_time, value) pairs across a float's records, ascending by time"""
    _check_field(field)

    points = []
    for record in records:
        if record.sample_time is None:
            continue
        value = _surface_value(record, field)
        if value is None:
            continue
        points.append(SeriesPoint(x=record.sample_time, y=value))

    return tuple(sorted(points, key=lambda point: point.x))


def series_to_frame(series: ChartSeries, x_name: str, y_name: str) -> pd.DataFrame:
    return pd.DataFrame(
        [(point.x, point.y) for point in series],
        columns=[x_name, y_name],
    )


def measurement_table(record: Optional[FloatRecord]) -> pd.DataFrame:
    """Per-depth rows of a record in stored order"""
    rows: List[dict] = []
    if record is not None:
        for depth_label, sample in record.samples():
            rows.append({
                'depth': depth_label,
                'pressure_dbar': sample.pressure,
                'temperature_degC': sample.temperature,
                'salinity_psu': sample.salinity,
            })
    return pd.DataFrame(rows, columns=['depth', 'pressure_dbar', 'temperature_degC', 'salinity_psu'])
