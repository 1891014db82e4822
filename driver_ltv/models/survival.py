"""
Driver survival estimation

Builds the empirical probability that a driver is still active t days after
their first ride and fits an exponential decay S(t) = exp(-lambda * t) to it.

Still-active drivers are right-censored: their tenure is only known to be at
least their current duration, so they count as surviving at every t. Churned
drivers contribute their observed duration as the failure time.

The decay rate comes from a least squares fit of ln S(t) on t with no
intercept, i.e. S(0) = 1. Under the exponential model the remaining tenure of
an active driver does not depend on the time already served, so the expected
remaining tenure is 1 / lambda.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional, Tuple

import numpy as np
import pandas as pd
from sklearn.linear_model import LinearRegression

from driver_ltv.utils.errors import DegenerateRegressionError, EmptyPopulationError
from driver_ltv.utils.logger import info, warning

MIN_FIT_POINTS = 2


@dataclass(frozen=True)
class SurvivalFit:
    slope: float
    decay_rate: float
    expected_tenure_days: float
    horizon_days: int
    n_points: int
    r_squared: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def survival_curve(summary: pd.DataFrame, max_days: Optional[int] = None) -> pd.DataFrame:
    """
    Empirical survival curve over elapsed days t = 1..T.

    active_fraction(t) = (churned drivers with duration_days > t
                          + all still-active drivers) / total drivers

    T is the longest observed duration, optionally capped by max_days. The
    curve stops before the first t where no driver survives, since its
    logarithm is undefined.
    """
    total = len(summary)
    if total == 0:
        raise EmptyPopulationError("cannot build a survival curve without drivers")

    horizon = int(summary['duration_days'].max())
    if max_days is not None:
        horizon = min(horizon, int(max_days))

    still_active = summary['still_active'].to_numpy(dtype=bool)
    churned_durations = np.sort(summary.loc[~still_active, 'duration_days'].to_numpy())

    t = np.arange(1, horizon + 1)
    churned_surviving = len(churned_durations) - np.searchsorted(churned_durations, t, side='right')
    active_fraction = (churned_surviving + still_active.sum()) / total

    curve = pd.DataFrame({'t': t, 'active_fraction': active_fraction})

    exhausted = curve['active_fraction'] <= 0
    if exhausted.any():
        cutoff = int(exhausted.to_numpy().argmax())
        warning(f"No drivers survive past day {cutoff}; truncating survival curve", "survival")
        curve = curve.iloc[:cutoff].reset_index(drop=True)

    return curve


def fit_exponential_survival(curve: pd.DataFrame) -> SurvivalFit:
    """
    Fit ln(active_fraction) = slope * t through the origin.

    Raises:
        DegenerateRegressionError: fewer than two points strictly between 0
            and 1, or a non-negative slope
    """
    fractions = curve['active_fraction']
    informative = ((fractions > 0) & (fractions < 1)).sum()
    if informative < MIN_FIT_POINTS:
        raise DegenerateRegressionError(
            f"need at least {MIN_FIT_POINTS} survival points between 0 and 1, found {informative}"
        )

    points = curve[fractions > 0]
    X = points[['t']].to_numpy(dtype=float)
    y = np.log(points['active_fraction'].to_numpy(dtype=float))

    model = LinearRegression(fit_intercept=False)
    model.fit(X, y)
    slope = float(model.coef_[0])

    if not slope < 0:
        raise DegenerateRegressionError(f"fitted slope {slope:.6g} is not negative")

    # Uncentered R^2 for a model without intercept
    residuals = y - model.predict(X)
    r_squared = float(1.0 - np.sum(residuals ** 2) / np.sum(y ** 2))

    fit = SurvivalFit(
        slope=slope,
        decay_rate=-slope,
        expected_tenure_days=-1.0 / slope,
        horizon_days=int(points['t'].max()),
        n_points=len(points),
        r_squared=r_squared,
    )
    info(f"Exponential survival fit: lambda={fit.decay_rate:.5f}/day, "
         f"expected tenure={fit.expected_tenure_days:.1f} days, R^2={fit.r_squared:.3f}", "survival")
    return fit


def estimate_survival(summary: pd.DataFrame,
                      max_days: Optional[int] = None) -> Tuple[pd.DataFrame, SurvivalFit]:
    """Build the survival curve and fit the decay rate in one step"""
    curve = survival_curve(summary, max_days=max_days)
    return curve, fit_exponential_survival(curve)
