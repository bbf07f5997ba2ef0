#!/usr/bin/env python3
# scripts/download_sample_data.py

import json
import logging
from pathlib import Path
import sys
from datetime import datetime, timedelta
from typing import Any, Dict, List

import numpy as np

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from config import config
from utils.helpers import FileHandler

logger = logging.getLogger(__name__)


class ArgoSampleDataBuilder:
    """Builds synthetic float datasets in the published JSON shapes"""

    # Sample float IDs for different regions
    sample_floats = {
        'indian_ocean': ['1902256', '1902257', '2902256'],
        'arabian_sea': ['2902258', '2902259'],
        'bay_of_bengal': ['2902260', '2902261'],
    }

    regions = {
        'indian_ocean': {'lat_range': (-10, 10), 'lon_range': (60, 90)},
        'arabian_sea': {'lat_range': (10, 25), 'lon_range': (55, 75)},
        'bay_of_bengal': {'lat_range': (10, 20), 'lon_range': (80, 95)},
    }

    def __init__(self, seed: int = 42, n_profiles: int = 3, n_levels: int = 20):
        self.rng = np.random.default_rng(seed)
        self.n_profiles = n_profiles
        self.n_levels = n_levels
        self.start_time = datetime(2024, 1, 1)

    def generate_temperature_profile(self, pressure: np.ndarray, surface_temp: float, deep_temp: float) -> np.ndarray:
        """Mixed layer, linear thermocline, then deep water"""
        thermocline_depth = self.rng.uniform(50, 150)
        thermocline_thickness = self.rng.uniform(100, 300)

        frac = np.clip((pressure - thermocline_depth) / thermocline_thickness, 0, 1)
        temperature = surface_temp - frac * (surface_temp - deep_temp)
        return temperature + self.rng.normal(0, 0.05, len(pressure))

    def generate_salinity_profile(self, pressure: np.ndarray) -> np.ndarray:
        surface_sal = self.rng.uniform(34.0, 36.5)
        return surface_sal + 0.4 * np.tanh(pressure / 500) + self.rng.normal(0, 0.01, len(pressure))

    def build_profile(self, lat: float, lon: float, sample_time: datetime) -> Dict[str, Any]:
        pressure = np.linspace(5, 1000, self.n_levels)
        temperature = self.generate_temperature_profile(pressure, self.rng.uniform(26, 30), self.rng.uniform(4, 8))
        salinity = self.generate_salinity_profile(pressure)

        measurements = {}
        for level, (p, t, s) in enumerate(zip(pressure, temperature, salinity)):
            measurements[str(level)] = {
                'pressure_dbar': round(float(p), 1),
                'temperature_degC': round(float(t), 3),
                'salinity_psu': round(float(s), 3),
            }

        return {
            'latitude_degN': round(lat, 4),
            'longitude_degE': round(lon, 4),
            'sample_time': sample_time.isoformat(),
            'measurements': measurements,
        }

    def build_profile_dataset(self) -> Dict[str, List[Dict[str, Any]]]:
        """{float id: [profile, ...]} with profiles 10 days apart"""
        dataset = {}
        for region, float_ids in self.sample_floats.items():
            coords = self.regions[region]
            for float_id in float_ids:
                lat = self.rng.uniform(*coords['lat_range'])
                lon = self.rng.uniform(*coords['lon_range'])
                profiles = []
                for cycle in range(self.n_profiles):
                    # floats drift a little between cycles
                    lat += self.rng.uniform(-0.3, 0.3)
                    lon += self.rng.uniform(-0.3, 0.3)
                    sample_time = self.start_time + timedelta(days=10 * cycle)
                    profiles.append(self.build_profile(float(lat), float(lon), sample_time))
                dataset[float_id] = profiles
        return dataset

    def build_flat_dataset(self) -> List[Dict[str, Any]]:
        """Surface points of the profile dataset as a flat array"""
        points = []
        for float_id, profiles in self.build_profile_dataset().items():
            for profile in profiles:
                surface = profile['measurements']['0']
                points.append({
                    'argo_id': float_id,
                    'latitude': profile['latitude_degN'],
                    'longitude': profile['longitude_degE'],
                    'temperature_C': surface['temperature_degC'],
                    'salinity_PSU': surface['salinity_psu'],
                    'sample_time': profile['sample_time'],
                })
        return points


def write_dataset(data: Any, output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(FileHandler.safe_json_serialize(data), encoding='utf-8')
    logger.info(f"Wrote sample dataset to {output}")
    return output


def main(argv=None):
    """Main function for sample data generation"""
    import argparse

    parser = argparse.ArgumentParser(description='Generate a sample Argo float dataset')
    parser.add_argument('--output', default=config.get_dataset_source(),
                        help='Where to write the JSON dataset')
    parser.add_argument('--flat', action='store_true',
                        help='Write the flat point array instead of per-float profiles')
    parser.add_argument('--profiles', type=int, default=3, help='Profiles per float')
    parser.add_argument('--levels', type=int, default=20, help='Depth levels per profile')
    parser.add_argument('--seed', type=int, default=42)

    args = parser.parse_args(argv)
    config.setup_logging()

    builder = ArgoSampleDataBuilder(seed=args.seed, n_profiles=args.profiles, n_levels=args.levels)
    data = builder.build_flat_dataset() if args.flat else builder.build_profile_dataset()

    try:
        write_dataset(data, Path(args.output))
    except OSError as e:
        logger.error(f"Sample data generation failed: {e}")
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
