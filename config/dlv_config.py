"""
Main configuration file for the driver lifetime value analysis
Combines all configuration parameters and provides easy access
"""

# Input data layout
DATA_CONFIG = {
    # Columns are assigned positionally, the file carries no header contract
    'columns': ['driver_id', 'donation_amount', 'timestamp'],
    'has_header': False,
    # Fixed offset used to turn epoch seconds into platform-local calendar dates
    'utc_offset_hours': -6,  # US Central (standard time)
}

# Analysis parameters
ANALYSIS_CONFIG = {
    # A driver whose last ride is at most this many days before the dataset end is still active
    'activity_window_days': 7,
    # Fraction of each donation kept by the platform
    'revenue_share': 0.20,
    # Cap on the survival horizon T (None means max observed duration)
    'max_survival_days': None,
    # Parallel workers for per-driver summaries (1 means serial)
    'n_jobs': 1,
    'show_progress': False,
}

# Output files written by the pipeline when an output directory is given
OUTPUT_CONFIG = {
    'driver_summary_file': 'driver_summary.csv',
    'survival_curve_file': 'survival_curve.csv',
    'segment_statistics_file': 'segment_statistics.csv',
    'summary_json_file': 'dlv_summary.json',
}

# Synthetic data generation defaults
SYNTHETIC_CONFIG = {
    'n_drivers': 500,
    'window_days': 90,
    'start_date': '2016-03-28',
    'mean_tenure_days': 60.0,
    'mean_rides_per_day': 8.0,
    'mean_donation': 13.5,
    'donation_std': 6.0,
    'min_donation': 1.0,
    'fraction_worked_range': (0.3, 0.9),
    'seed': 42,
}


def get_default_config() -> dict:
    """Flat copy of all analysis defaults"""
    return {
        'utc_offset_hours': DATA_CONFIG['utc_offset_hours'],
        'has_header': DATA_CONFIG['has_header'],
        **ANALYSIS_CONFIG,
    }


__all__ = [
    "DATA_CONFIG",
    "ANALYSIS_CONFIG",
    "OUTPUT_CONFIG",
    "SYNTHETIC_CONFIG",
    "get_default_config",
]
