# src/visualization/view_binding.py

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from config import config
from data.models import ChartSeries, FloatDataset, Found, LookupResult, NotFound
from search.lookup_engine import find
from search.series_extractor import extract_series, extract_time_series

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MapFocus:
    center: Tuple[float, float]
    zoom: int


@dataclass(frozen=True)
class ViewState:
    """Everything the charts and the map render from"""
    temperature_series: ChartSeries = ()
    salinity_series: ChartSeries = ()
    temperature_time_series: ChartSeries = ()
    salinity_time_series: ChartSeries = ()
    focus: Optional[MapFocus] = None
    highlighted_id: Optional[str] = None
    message: Optional[str] = None
    result: Optional[LookupResult] = None

    @property
    def has_charts(self) -> bool:
        return bool(self.temperature_series or self.salinity_series
                    or self.temperature_time_series or self.salinity_time_series)


class ViewBinding:
    """Derives chart inputs and map focus from the latest lookup result.

    Each apply() rebuilds the state from scratch, so repeating a result
    gives the same view.
    """

    def __init__(self, focus_zoom: Optional[int] = None):
        self.focus_zoom = int(focus_zoom if focus_zoom is not None else config.get('map.focus_zoom', 6))
        self.state = ViewState()

    def apply(self, result: LookupResult) -> ViewState:
        if isinstance(result, Found):
            records = result.records or (result.record,)
            self.state = ViewState(
                temperature_series=extract_series(result.record, 'temperature'),
                salinity_series=extract_series(result.record, 'salinity'),
                temperature_time_series=extract_time_series(records, 'temperature'),
                salinity_time_series=extract_time_series(records, 'salinity'),
                focus=MapFocus(center=result.coordinates, zoom=self.focus_zoom),
                highlighted_id=result.float_id,
                message=None,
                result=result,
            )
        elif isinstance(result, NotFound):
            if result.float_id:
                message = f"Float '{result.float_id}' not found"
            else:
                message = "Enter a float ID to search"
            self.state = ViewState(message=message, result=result)
        else:
            raise TypeError(f"Unsupported lookup result: {result!r}")

        return self.state

    def search(self, dataset: Optional[FloatDataset], raw_id: Optional[str]) -> ViewState:
        """Run lookup, extraction and binding for one search action"""
        result = find(dataset, raw_id)
        logger.info(f"Search {raw_id!r}: {type(result).__name__}")
        return self.apply(result)

    def reset(self) -> ViewState:
        self.state = ViewState()
        return self.state
