# tests/test_dataset_store.py

import pytest
import json
from pathlib import Path
import sys

import pandas as pd
import requests

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from data import dataset_store
from data.dataset_store import DatasetStore, fetch_dataset, normalize_dataset
from data.models import FlatRecord, NotFound, Profile
from search.lookup_engine import find
from utils.errors import LoadError
from utils.helpers import ArgoHelpers


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400


PROFILE_DATA = {
    "F1": [
        {
            "latitude": 10,
            "longitude": 20,
            "measurements": {
                "0": {"pressure_dbar": 5, "temperature_degC": 28.1, "salinity_psu": 35.2},
                "1": {"pressure_dbar": 3, "temperature_degC": 29.0},
            },
        }
    ]
}


class TestNormalization:
    """Field aliases and the two published shapes"""

    def test_profile_form(self):
        dataset = normalize_dataset(PROFILE_DATA)

        assert list(dataset.keys()) == ["F1"]
        profile = dataset["F1"][0]
        assert isinstance(profile, Profile)
        assert profile.latitude == 10.0
        assert profile.longitude == 20.0
        assert profile.measurements["0"].temperature == 28.1
        assert profile.measurements["1"].salinity is None

    def test_alias_field_names(self):
        raw = {
            "7900001": [
                {
                    "latitude_degN": -12.5,
                    "longitude_degE": 110.25,
                    "measurements": {"0": {"pressure": 10, "temperature_C": 20.5, "salinity_PSU": 34.9}},
                }
            ]
        }
        profile = normalize_dataset(raw)["7900001"][0]

        assert profile.latitude == -12.5
        assert profile.longitude == 110.25
        sample = profile.measurements["0"]
        assert (sample.pressure, sample.temperature, sample.salinity) == (10.0, 20.5, 34.9)

    def test_flat_form_groups_points_by_id(self):
        raw = [
            {"argo_id": "A1", "latitude": 1.0, "longitude": 2.0, "temperature_C": 25.0,
             "salinity_PSU": 35.0, "sample_time": "2024-01-02T00:00:00"},
            {"argo_id": "B2", "latitude": 3.0, "longitude": 4.0, "temperature": 24.0},
            {"argo_id": "A1", "latitude": 1.5, "longitude": 2.5, "temperature_C": 26.0,
             "sample_time": "2024-01-01T00:00:00"},
        ]
        dataset = normalize_dataset(raw)

        assert list(dataset.keys()) == ["A1", "B2"]
        assert len(dataset["A1"]) == 2
        first = dataset["A1"][0]
        assert isinstance(first, FlatRecord)
        assert first.latitude == 1.0
        assert first.temperature == 25.0
        assert first.salinity == 35.0
        assert first.sample_time is not None
        assert dataset["B2"][0].salinity is None

    def test_flat_points_without_id_are_skipped(self):
        raw = [{"latitude": 1, "longitude": 2}, {"argo_id": " ", "latitude": 1, "longitude": 2}, "junk"]
        assert len(normalize_dataset(raw)) == 0

    def test_non_numeric_values_become_absent(self):
        raw = {"X": [{"latitude": "north", "longitude": 5,
                      "measurements": {"0": {"pressure_dbar": "deep", "temperature_degC": True}}}]}
        profile = normalize_dataset(raw)["X"][0]

        assert profile.latitude is None
        sample = profile.measurements["0"]
        assert sample.pressure is None
        assert sample.temperature is None

    def test_single_profile_object_per_id(self):
        raw = {"S1": {"latitude": 1, "longitude": 1, "measurements": {}}}
        assert len(normalize_dataset(raw)["S1"]) == 1

    def test_unsupported_top_level_shape(self):
        with pytest.raises(LoadError):
            normalize_dataset("not a dataset")

    def test_dataset_is_read_only(self):
        dataset = normalize_dataset(PROFILE_DATA)

        with pytest.raises(TypeError):
            dataset["F2"] = ()
        with pytest.raises(TypeError):
            dataset["F1"][0].measurements["9"] = None

    @pytest.mark.parametrize("sample_time", [[1, 2], ["2024-01-01", "2024-02-01"], {"year": 2024}, True])
    def test_odd_sample_time_becomes_absent(self, sample_time):
        raw = {"F1": [{"latitude": 1, "longitude": 2, "sample_time": sample_time, "measurements": {}}]}
        profile = normalize_dataset(raw)["F1"][0]

        assert profile.sample_time is None
        assert profile.latitude == 1.0

    def test_measurements_list_is_read_as_flat_point(self):
        raw = {"F1": [{"latitude": 1, "longitude": 2, "measurements": [{"pressure_dbar": 5}]}]}
        record = normalize_dataset(raw)["F1"][0]

        assert isinstance(record, FlatRecord)
        assert record.pressure is None

    def test_odd_field_types_are_absent(self):
        raw = {"F1": [{"latitude": [1], "longitude": {"deg": 2},
                       "measurements": {"0": {"pressure_dbar": [5], "temperature_degC": None}, "1": 7}}]}
        profile = normalize_dataset(raw)["F1"][0]

        assert profile.latitude is None
        assert profile.longitude is None
        assert list(profile.measurements) == ["0"]
        assert profile.measurements["0"].pressure is None


class TestTimestampParsing:
    """sample_time values accepted by the ingestion boundary"""

    JAN_1_2024 = pd.Timestamp("2024-01-01T00:00:00", tz="UTC")

    @pytest.mark.parametrize("value", ["2024-01-01T00:00:00", "2024-01-01", 1704067200, 1704067200000, 1704067200.0])
    def test_dates_and_epochs(self, value):
        assert ArgoHelpers.parse_timestamp(value) == self.JAN_1_2024

    def test_datetime_passthrough(self):
        ts = ArgoHelpers.parse_timestamp(pd.Timestamp("2024-01-01"))
        assert ts == self.JAN_1_2024

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", [1, 2], ["2024-01-01"], {"t": 1}, float("nan"), False])
    def test_unusable_values_are_absent(self, value):
        assert ArgoHelpers.parse_timestamp(value) is None


class TestFetchDataset:
    """Single-attempt fetch from files and URLs"""

    def test_local_file(self, tmp_path):
        path = tmp_path / "argo_profiles.json"
        path.write_text(json.dumps(PROFILE_DATA))

        assert "F1" in fetch_dataset(str(path))
        assert "F1" in fetch_dataset(path.as_uri())

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadError) as exc_info:
            fetch_dataset(str(tmp_path / "missing.json"))
        assert "cannot read file" in exc_info.value.cause

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(LoadError) as exc_info:
            fetch_dataset(str(path))
        assert "malformed JSON" in exc_info.value.cause

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin.json"
        path.write_bytes(b'{"F1": [\xff\xfe]}')

        with pytest.raises(LoadError) as exc_info:
            fetch_dataset(str(path))
        assert "malformed JSON" in exc_info.value.cause

    def test_http_success(self, monkeypatch):
        calls = []

        def fake_get(url, *args, **kwargs):
            calls.append(url)
            return FakeResponse(200, json.dumps(PROFILE_DATA))

        monkeypatch.setattr(dataset_store.requests, "get", fake_get)
        dataset = fetch_dataset("http://example.org/data/argo_profiles.json")

        assert calls == ["http://example.org/data/argo_profiles.json"]
        assert "F1" in dataset

    def test_http_error_status(self, monkeypatch):
        monkeypatch.setattr(dataset_store.requests, "get", lambda url, *a, **kw: FakeResponse(500, "oops"))

        with pytest.raises(LoadError) as exc_info:
            fetch_dataset("http://example.org/data/argo_profiles.json")
        assert exc_info.value.cause == "HTTP 500"

    def test_connection_error(self, monkeypatch):
        def fake_get(url, *args, **kwargs):
            raise requests.exceptions.ConnectionError("refused")

        monkeypatch.setattr(dataset_store.requests, "get", fake_get)
        with pytest.raises(LoadError):
            fetch_dataset("https://example.org/argo.json")


class TestDatasetStore:
    """Load-once store with an inert state on failure"""

    def test_load_success(self, tmp_path):
        path = tmp_path / "argo_profiles.json"
        path.write_text(json.dumps(PROFILE_DATA))
        store = DatasetStore(str(path))

        assert store.load() is True
        assert store.is_loaded
        assert store.load_error is None
        assert store.float_ids() == ["F1"]
        assert store.summary() == {"floats": 1, "records": 1, "samples": 2}

    def test_http_500_leaves_empty_searchable_store(self, monkeypatch):
        monkeypatch.setattr(dataset_store.requests, "get", lambda url, *a, **kw: FakeResponse(500))
        store = DatasetStore("http://example.org/data/argo_profiles.json")

        assert store.load() is False
        assert isinstance(store.load_error, LoadError)
        assert len(store.dataset) == 0
        for raw_id in ["F1", "", "  "]:
            assert isinstance(find(store.dataset, raw_id), NotFound)

    def test_loads_only_once(self, monkeypatch):
        calls = []

        def fake_get(url, *args, **kwargs):
            calls.append(url)
            return FakeResponse(200, json.dumps(PROFILE_DATA))

        monkeypatch.setattr(dataset_store.requests, "get", fake_get)
        store = DatasetStore("http://example.org/argo.json")

        assert store.load() is True
        assert store.load() is True
        assert len(calls) == 1

    def test_failed_load_is_not_retried(self, tmp_path):
        store = DatasetStore(str(tmp_path / "missing.json"))

        assert store.load() is False
        (tmp_path / "missing.json").write_text(json.dumps(PROFILE_DATA))
        assert store.load() is False
        assert len(store.dataset) == 0

    def test_undecodable_file_leaves_empty_store(self, tmp_path):
        path = tmp_path / "argo_profiles.json"
        path.write_bytes(b'{"F1": [\xff\xfe]}')
        store = DatasetStore(str(path))

        assert store.load() is False
        assert isinstance(store.load_error, LoadError)
        assert len(store.dataset) == 0

    def test_odd_records_still_load(self, tmp_path):
        path = tmp_path / "argo_profiles.json"
        path.write_text(json.dumps({
            "F1": [{"latitude": 1, "longitude": 2, "sample_time": [1, 2], "measurements": {}}],
            "F2": [{"latitude": 3, "longitude": 4, "measurements": [1, 2]}, "junk"],
        }))
        store = DatasetStore(str(path))

        assert store.load() is True
        assert store.summary()["records"] == 2
        assert find(store.dataset, "f1").coordinates == (1.0, 2.0)

    def test_no_source(self):
        with pytest.raises(ValueError):
            DatasetStore().load()

    def test_bundled_sample_dataset(self):
        sample = Path(__file__).parent.parent / "static" / "data" / "argo_profiles.json"
        store = DatasetStore(str(sample))

        assert store.load() is True
        assert "1902256" in store.float_ids()
        assert len(store.dataset["1902256"]) == 2

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
