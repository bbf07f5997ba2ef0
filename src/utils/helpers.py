# src/utils/helpers.py
import numpy as np
import pandas as pd
from typing import Any, Dict, Iterable, Optional
import logging
import json
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


class ArgoHelpers:
    """Helper functions for Argo data handling"""

    @staticmethod
    def coerce_float(value: Any) -> Optional[float]:
        """Return value as a finite float, or None when absent or not numeric"""
        if value is None or isinstance(value, (bool, np.bool_)):
            return None
        if isinstance(value, (int, float, np.integer, np.floating)):
            number = float(value)
        elif isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                return None
        else:
            return None

        if not np.isfinite(number):
            return None
        return number

    @staticmethod
    def parse_timestamp(value: Any) -> Optional[pd.Timestamp]:
        """Parse a sample time into a pandas Timestamp.

        Accepts date strings, datetimes and epoch numbers (seconds, or
        milliseconds when the magnitude only makes sense as such). Anything
        else, lists and objects included, counts as absent.
        """
        if isinstance(value, str):
            if not value.strip():
                return None
            kwargs = {}
        elif isinstance(value, datetime):
            kwargs = {}
        else:
            value = ArgoHelpers.coerce_float(value)
            if value is None:
                return None
            # Epoch milliseconds pass 1e11 in 1973, epoch seconds in year 5138
            kwargs = {'unit': 'ms' if abs(value) >= 1e11 else 's'}

        try:
            ts = pd.to_datetime(value, utc=True, **kwargs)
        except (ValueError, TypeError, OverflowError):
            logger.debug(f"Unparsable sample_time: {value!r}")
            return None
        if not isinstance(ts, pd.Timestamp) or pd.isna(ts):
            return None
        return ts

    @staticmethod
    def first_present(data: Dict[str, Any], keys: Iterable[str]) -> Any:
        """Value of the first alias key present in data"""
        for key in keys:
            if key in data and data[key] is not None:
                return data[key]
        return None

    @staticmethod
    def format_coordinate(value: Optional[float], digits: int = 3) -> str:
        if value is None:
            return "N/A"
        return f"{value:.{digits}f}"

    @staticmethod
    def format_value(value: Optional[float], digits: int = 2) -> str:
        if value is None:
            return "-"
        return f"{value:.{digits}f}"


class FileHandler:
    """File handling utilities"""

    @staticmethod
    def safe_json_serialize(data: Any) -> str:
        """Safely serialize data to JSON handling numpy types"""
        def default_serializer(obj):
            if isinstance(obj, np.integer):
                return int(obj)
            elif isinstance(obj, np.floating):
                return float(obj)
            elif isinstance(obj, np.ndarray):
                return obj.tolist()
            elif isinstance(obj, (datetime, pd.Timestamp)):
                return obj.isoformat()
            elif isinstance(obj, Path):
                return str(obj)
            raise TypeError(f"Object of type {type(obj)} is not JSON serializable")

        return json.dumps(data, default=default_serializer, indent=2)
