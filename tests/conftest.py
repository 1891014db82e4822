import io
import os
import sys

import pytest

# Ensure project root is on sys.path so 'config' and 'driver_ltv' are importable
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from driver_ltv.utils.logger import setup_logger

# 2016-03-28 00:00:00 UTC
BASE_EPOCH = 1459123200
SECONDS_PER_DAY = 86400


def epoch_for_day(day: int, hour: int = 12) -> int:
    """Epoch seconds at the given hour (UTC) of day 1, 2, ... of the window"""
    return BASE_EPOCH + (day - 1) * SECONDS_PER_DAY + hour * 3600


def rides_csv(rows) -> io.StringIO:
    """Three-column ride file from (driver_id, donation, day) tuples"""
    lines = [f"{driver},{donation},{epoch_for_day(day)}" for driver, donation, day in rows]
    return io.StringIO("\n".join(lines) + "\n")


@pytest.fixture(autouse=True)
def quiet_logger():
    setup_logger(log_level="WARNING", enable_console=False)
    yield


@pytest.fixture
def three_driver_rows():
    """
    A rides on days 1-3 and stops 8 days before the data ends (churned),
    B rides on day 1 and on the last day 11 (active),
    C rides once on day 5, 6 days before the end (active).
    """
    return [
        ("A", 10.0, 1),
        ("A", 10.0, 2),
        ("A", 10.0, 3),
        ("B", 10.0, 1),
        ("B", 10.0, 11),
        ("C", 10.0, 5),
    ]


@pytest.fixture
def three_driver_rides(three_driver_rows):
    from driver_ltv.data_processing.ride_loader import load_rides
    return load_rides(rides_csv(three_driver_rows), utc_offset_hours=0)


@pytest.fixture
def three_driver_summary(three_driver_rides):
    from driver_ltv.data_processing.driver_summary import summarize_drivers
    return summarize_drivers(three_driver_rides, activity_window_days=7, n_jobs=1)


@pytest.fixture
def synthetic_rides_path(tmp_path):
    from driver_ltv.data_generation.synthetic_rides import generate_rides, write_rides_csv
    rides = generate_rides({'n_drivers': 120, 'window_days': 60, 'mean_tenure_days': 25.0, 'seed': 7})
    return write_rides_csv(rides, str(tmp_path / "rides.csv"))
