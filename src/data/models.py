# src/data/models.py
"""
Canonical in-memory shapes of the float dataset.

Everything the dataset store hands out is immutable: frozen dataclasses,
tuples and read-only mappings.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union, Any

from pandas import Timestamp


@dataclass(frozen=True)
class MeasurementSample:
    """One depth-wise measurement; any value may be missing"""
    pressure: Optional[float] = None
    temperature: Optional[float] = None
    salinity: Optional[float] = None


@dataclass(frozen=True)
class Profile:
    """A location-stamped set of depth-resolved measurements"""
    latitude: Optional[float]
    longitude: Optional[float]
    measurements: Mapping[str, MeasurementSample] = field(default_factory=lambda: MappingProxyType({}))
    sample_time: Optional[Timestamp] = None

    def samples(self) -> Tuple[Tuple[str, MeasurementSample], ...]:
        return tuple(self.measurements.items())


@dataclass(frozen=True)
class FlatRecord:
    """A single surface point of a float"""
    latitude: Optional[float]
    longitude: Optional[float]
    temperature: Optional[float] = None
    salinity: Optional[float] = None
    pressure: Optional[float] = None
    sample_time: Optional[Timestamp] = None

    def samples(self) -> Tuple[Tuple[str, MeasurementSample], ...]:
        sample = MeasurementSample(
            pressure=self.pressure,
            temperature=self.temperature,
            salinity=self.salinity,
        )
        return (("0", sample),)


FloatRecord = Union[Profile, FlatRecord]

# float id -> records in source order
FloatDataset = Mapping[str, Tuple[FloatRecord, ...]]

EMPTY_DATASET: FloatDataset = MappingProxyType({})


@dataclass(frozen=True)
class SeriesPoint:
    x: Any
    y: float


ChartSeries = Tuple[SeriesPoint, ...]


@dataclass(frozen=True)
class Found:
    """Successful lookup: the first record of the matched float"""
    float_id: str
    latitude: float
    longitude: float
    record: FloatRecord
    records: Tuple[FloatRecord, ...] = ()

    @property
    def coordinates(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class NotFound:
    """Unsuccessful lookup carrying the attempted identifier"""
    float_id: str


LookupResult = Union[Found, NotFound]
