"""
Per-driver activity summaries and population aggregates
Reduces each driver's ride history to a fixed set of tenure and productivity metrics
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from tqdm import tqdm

from config.dlv_config import ANALYSIS_CONFIG
from driver_ltv.utils.errors import EmptyPopulationError
from driver_ltv.utils.logger import info, debug

SEGMENT_METRICS = [
    'num_rides', 'duration_days', 'unique_active_days', 'fraction_worked',
    'rides_per_active_day', 'max_break_days', 'total_donations',
]


@dataclass(frozen=True)
class DriverSummary:
    driver_id: str
    num_rides: int
    first_ride_date: pd.Timestamp
    last_ride_date: pd.Timestamp
    duration_days: int
    still_active: bool
    unique_active_days: int
    fraction_worked: float
    rides_per_active_day: float
    max_break_days: int
    total_donations: float


@dataclass(frozen=True)
class PopulationStats:
    total_drivers: int
    active_drivers: int
    total_rides: int
    mean_donation: float
    dataset_start: pd.Timestamp
    dataset_end: pd.Timestamp

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['dataset_start'] = self.dataset_start.strftime('%Y-%m-%d')
        data['dataset_end'] = self.dataset_end.strftime('%Y-%m-%d')
        return data


def summarize_driver(rides: pd.DataFrame,
                     dataset_end: pd.Timestamp,
                     activity_window_days: int = 7,
                     driver_id: str = None) -> DriverSummary:
    """
    Summarize one driver's rides.

    A driver is still active when the last ride falls within
    activity_window_days of dataset_end (inclusive). max_break_days is the
    largest difference in days between consecutive active dates, 0 for a
    driver who only worked a single day.
    """
    if rides.empty:
        raise ValueError("cannot summarize a driver without rides")
    if driver_id is None:
        driver_id = rides['driver_id'].iloc[0]

    active_dates = pd.DatetimeIndex(rides['ride_date'].drop_duplicates()).sort_values()
    first_ride_date = active_dates[0]
    last_ride_date = active_dates[-1]

    duration_days = (last_ride_date - first_ride_date).days + 1
    unique_active_days = len(active_dates)
    num_rides = len(rides)

    if unique_active_days > 1:
        gaps = np.diff(active_dates.values) / np.timedelta64(1, 'D')
        max_break_days = int(gaps.max())
    else:
        max_break_days = 0

    return DriverSummary(
        driver_id=driver_id,
        num_rides=num_rides,
        first_ride_date=first_ride_date,
        last_ride_date=last_ride_date,
        duration_days=int(duration_days),
        still_active=bool((dataset_end - last_ride_date).days <= activity_window_days),
        unique_active_days=unique_active_days,
        fraction_worked=unique_active_days / duration_days,
        rides_per_active_day=num_rides / unique_active_days,
        max_break_days=max_break_days,
        total_donations=float(rides['donation_amount'].sum()),
    )


def summarize_drivers(rides: pd.DataFrame,
                      activity_window_days: int = None,
                      n_jobs: int = None,
                      show_progress: bool = None) -> pd.DataFrame:
    """
    Build the driver summary table, one row per driver indexed by driver_id.

    Each driver is independent, so with n_jobs != 1 the summaries are computed
    in parallel with joblib; the table is identical to the serial result.
    """
    if activity_window_days is None:
        activity_window_days = ANALYSIS_CONFIG['activity_window_days']
    if n_jobs is None:
        n_jobs = ANALYSIS_CONFIG['n_jobs']
    if show_progress is None:
        show_progress = ANALYSIS_CONFIG['show_progress']

    if rides.empty:
        raise EmptyPopulationError("no drivers found in the ride data")

    dataset_end = rides['ride_date'].max()
    groups = rides.groupby('driver_id', sort=True)
    drivers = tqdm(groups, total=groups.ngroups, desc="Drivers", disable=not show_progress)

    if n_jobs == 1:
        summaries = [
            summarize_driver(group, dataset_end, activity_window_days, driver_id=driver_id)
            for driver_id, group in drivers
        ]
    else:
        debug(f"Summarizing {groups.ngroups} drivers with n_jobs={n_jobs}", "driver_summary")
        summaries = Parallel(n_jobs=n_jobs)(
            delayed(summarize_driver)(group, dataset_end, activity_window_days, driver_id=driver_id)
            for driver_id, group in drivers
        )

    summary = pd.DataFrame([asdict(s) for s in summaries]).set_index('driver_id')

    n_active = int(summary['still_active'].sum())
    info(f"Summarized {len(summary):,} drivers ({n_active:,} still active)", "driver_summary")
    return summary


def population_stats(rides: pd.DataFrame, summary: pd.DataFrame) -> PopulationStats:
    """Aggregates over the whole population used by the lifetime value estimate"""
    if summary.empty or rides.empty:
        raise EmptyPopulationError("no drivers found in the ride data")

    return PopulationStats(
        total_drivers=len(summary),
        active_drivers=int(summary['still_active'].sum()),
        total_rides=int(summary['num_rides'].sum()),
        mean_donation=float(rides['donation_amount'].mean()),
        dataset_start=rides['ride_date'].min(),
        dataset_end=rides['ride_date'].max(),
    )


def segment_statistics(summary: pd.DataFrame) -> pd.DataFrame:
    """Mean activity metrics for still-active versus churned drivers"""
    segment = pd.Series(
        np.where(summary['still_active'], 'active', 'churned'), index=summary.index, name='segment'
    )
    grouped = summary[SEGMENT_METRICS].groupby(segment)

    stats = grouped.mean().reindex(['active', 'churned'])
    drivers = grouped.size().reindex(['active', 'churned']).fillna(0).astype(int)
    stats.insert(0, 'drivers', drivers)
    stats.index.name = 'segment'
    return stats
