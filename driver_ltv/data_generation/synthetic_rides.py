"""
Synthetic ride donation generator
Creates driver histories with exponential tenures, irregular working days
and noisy donation amounts, written in the three-column ride file format
"""

import argparse
import math
import os
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from config.dlv_config import DATA_CONFIG, SYNTHETIC_CONFIG
from driver_ltv.utils.logger import info

SECONDS_PER_DAY = 86400


def _merge_config(override: Optional[Dict]) -> Dict:
    """Merge generator defaults with overrides"""
    config = dict(SYNTHETIC_CONFIG)
    if override:
        unknown = set(override) - set(config)
        if unknown:
            raise KeyError(f"unknown synthetic data settings: {sorted(unknown)}")
        config.update(override)
    return config


def _driver_rides(rng: np.random.Generator, config: Dict, window_start: float) -> List[Dict]:
    """Rides for one driver as (epoch seconds, donation) records"""
    window_days = config['window_days']

    onboard_day = int(rng.integers(0, window_days))
    tenure_days = max(1, math.ceil(rng.exponential(config['mean_tenure_days'])))
    last_day = min(window_days - 1, onboard_day + tenure_days - 1)

    days = np.arange(onboard_day, last_day + 1)
    fraction_worked = rng.uniform(*config['fraction_worked_range'])
    worked = days[rng.random(len(days)) < fraction_worked]
    # The first day is when the driver shows up in the data
    worked = np.union1d(worked, [onboard_day])

    rides_per_day = np.maximum(1, rng.poisson(config['mean_rides_per_day'], size=len(worked)))
    ride_days = np.repeat(worked, rides_per_day)
    offsets = rng.integers(0, SECONDS_PER_DAY, size=len(ride_days))
    timestamps = window_start + ride_days * SECONDS_PER_DAY + offsets

    donations = rng.normal(config['mean_donation'], config['donation_std'], size=len(ride_days))
    donations = np.round(np.maximum(donations, config['min_donation']), 2)

    return [
        {'timestamp': int(ts), 'donation_amount': float(amount)}
        for ts, amount in zip(timestamps, donations)
    ]


def generate_rides(config_override: Optional[Dict] = None,
                   utc_offset_hours: float = None) -> pd.DataFrame:
    """
    Generate synthetic ride records.

    Returns a DataFrame with columns driver_id, donation_amount, timestamp
    ordered by timestamp. The same seed always yields the same rides.
    """
    config = _merge_config(config_override)
    if utc_offset_hours is None:
        utc_offset_hours = DATA_CONFIG['utc_offset_hours']

    rng = np.random.default_rng(config['seed'])

    # Local midnight of the first day, expressed in epoch seconds
    window_start = (
        pd.Timestamp(config['start_date']) - pd.Timestamp('1970-01-01')
    ).total_seconds() - utc_offset_hours * 3600

    records = []
    for i in range(config['n_drivers']):
        driver_id = f"driver_{i:05d}"
        for ride in _driver_rides(rng, config, window_start):
            records.append({'driver_id': driver_id, **ride})

    rides = pd.DataFrame(records, columns=DATA_CONFIG['columns'])
    rides = rides.sort_values('timestamp', kind='mergesort').reset_index(drop=True)

    info(f"Generated {len(rides):,} rides for {config['n_drivers']:,} drivers "
         f"over {config['window_days']} days", "synthetic_rides")
    return rides


def write_rides_csv(rides: pd.DataFrame, path: str) -> str:
    """Write rides without a header, in the column order the loader expects"""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    rides[DATA_CONFIG['columns']].to_csv(path, header=False, index=False)
    info(f"Saved synthetic rides to {path}", "synthetic_rides")
    return path


def main():
    """Generate a synthetic ride file"""
    parser = argparse.ArgumentParser(description="Generate synthetic ride donation records")
    parser.add_argument('--output', type=str, default="data/synthetic/rides.csv")
    parser.add_argument('--n-drivers', type=int, default=None)
    parser.add_argument('--window-days', type=int, default=None)
    parser.add_argument('--mean-tenure-days', type=float, default=None)
    parser.add_argument('--seed', type=int, default=None)
    args = parser.parse_args()

    override = {
        'n_drivers': args.n_drivers,
        'window_days': args.window_days,
        'mean_tenure_days': args.mean_tenure_days,
        'seed': args.seed,
    }
    rides = generate_rides({k: v for k, v in override.items() if v is not None})
    write_rides_csv(rides, args.output)


if __name__ == "__main__":
    main()
