"""
Driver lifetime value aggregation
Combines recorded rides with the rides still expected from active drivers
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any

import pandas as pd

from config.dlv_config import ANALYSIS_CONFIG
from driver_ltv.data_processing.driver_summary import PopulationStats
from driver_ltv.models.survival import SurvivalFit
from driver_ltv.utils.errors import EmptyPopulationError
from driver_ltv.utils.logger import info


@dataclass(frozen=True)
class DLVEstimate:
    recorded_rides: int
    projected_future_rides: float
    avg_rides_per_driver: float
    mean_donation: float
    revenue_share: float
    mean_rides_per_active_day: float
    mean_fraction_worked: float
    expected_remaining_tenure_days: float
    active_drivers: int
    total_drivers: int
    dlv: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def projected_future_rides(mean_rides_per_active_day: float,
                           mean_fraction_worked: float,
                           expected_remaining_tenure_days: float,
                           active_drivers: int) -> float:
    """Rides the currently active drivers are expected to give before churning"""
    return (mean_rides_per_active_day * mean_fraction_worked
            * expected_remaining_tenure_days * active_drivers)


def estimate_dlv(summary: pd.DataFrame,
                 stats: PopulationStats,
                 fit: SurvivalFit,
                 revenue_share: float = None) -> DLVEstimate:
    """
    Estimate the lifetime value of one driver to the platform.

    Productivity rates are averaged over still-active drivers only, who keep
    driving for the expected remaining tenure. The total ride count (recorded
    plus projected) is spread over every driver ever seen and priced at the
    mean donation times the platform's revenue share.
    """
    if revenue_share is None:
        revenue_share = ANALYSIS_CONFIG['revenue_share']
    if not 0 < revenue_share <= 1:
        raise ValueError(f"revenue_share must be in (0, 1], got {revenue_share}")
    if stats.total_drivers == 0:
        raise EmptyPopulationError("cannot estimate lifetime value without drivers")

    active = summary[summary['still_active']]
    if active.empty:
        mean_rides_per_active_day = 0.0
        mean_fraction_worked = 0.0
        future_rides = 0.0
    else:
        mean_rides_per_active_day = float(active['rides_per_active_day'].mean())
        mean_fraction_worked = float(active['fraction_worked'].mean())
        future_rides = projected_future_rides(
            mean_rides_per_active_day,
            mean_fraction_worked,
            fit.expected_tenure_days,
            len(active),
        )

    avg_rides_per_driver = (stats.total_rides + future_rides) / stats.total_drivers
    dlv = avg_rides_per_driver * stats.mean_donation * revenue_share

    estimate = DLVEstimate(
        recorded_rides=stats.total_rides,
        projected_future_rides=future_rides,
        avg_rides_per_driver=avg_rides_per_driver,
        mean_donation=stats.mean_donation,
        revenue_share=revenue_share,
        mean_rides_per_active_day=mean_rides_per_active_day,
        mean_fraction_worked=mean_fraction_worked,
        expected_remaining_tenure_days=fit.expected_tenure_days,
        active_drivers=len(active),
        total_drivers=stats.total_drivers,
        dlv=dlv,
    )
    info(f"Driver lifetime value: ${estimate.dlv:,.2f} "
         f"({estimate.avg_rides_per_driver:.1f} rides per driver)", "lifetime_value")
    return estimate
