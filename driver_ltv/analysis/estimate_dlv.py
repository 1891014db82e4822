"""
End-to-end driver lifetime value analysis
Load rides -> summarize drivers -> fit survival -> aggregate value
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from config.dlv_config import OUTPUT_CONFIG, get_default_config
from config.logging_config import get_logging_config, LOGGING_MODES
from driver_ltv.data_processing.driver_summary import (
    PopulationStats,
    population_stats,
    segment_statistics,
    summarize_drivers,
)
from driver_ltv.data_processing.ride_loader import load_rides
from driver_ltv.models.lifetime_value import DLVEstimate, estimate_dlv
from driver_ltv.models.survival import SurvivalFit, estimate_survival
from driver_ltv.services.config_service import merged_runtime_config
from driver_ltv.utils.errors import DLVError
from driver_ltv.utils.logger import setup_logger, info, error, print_summary


@dataclass
class AnalysisResult:
    rides: pd.DataFrame
    summary: pd.DataFrame
    stats: PopulationStats
    survival_curve: pd.DataFrame
    survival_fit: SurvivalFit
    segments: pd.DataFrame
    estimate: DLVEstimate

    @property
    def dlv(self) -> float:
        return self.estimate.dlv


def run_analysis(input_path: Union[str, Path, Any],
                 config: Optional[Dict[str, Any]] = None,
                 output_dir: Optional[str] = None) -> AnalysisResult:
    """
    Run the whole estimate on one ride file.

    Args:
        input_path: ride file path or open text stream
        config: flat settings overriding the defaults in config.dlv_config
        output_dir: when set, result tables and a JSON summary are written here

    Raises:
        KeyError: config names a setting that does not exist
    """
    cfg = get_default_config()
    unknown = set(config or {}) - set(cfg)
    if unknown:
        raise KeyError(f"unknown configuration keys: {sorted(unknown)}")
    cfg.update(config or {})

    rides = load_rides(input_path, utc_offset_hours=cfg['utc_offset_hours'], has_header=cfg['has_header'])
    summary = summarize_drivers(
        rides,
        activity_window_days=cfg['activity_window_days'],
        n_jobs=cfg['n_jobs'],
        show_progress=cfg['show_progress'],
    )
    stats = population_stats(rides, summary)
    curve, fit = estimate_survival(summary, max_days=cfg['max_survival_days'])
    estimate = estimate_dlv(summary, stats, fit, revenue_share=cfg['revenue_share'])

    result = AnalysisResult(
        rides=rides,
        summary=summary,
        stats=stats,
        survival_curve=curve,
        survival_fit=fit,
        segments=segment_statistics(summary),
        estimate=estimate,
    )

    if output_dir:
        save_results(result, output_dir)
    return result


def save_results(result: AnalysisResult, output_dir: str) -> Dict[str, str]:
    """Write the driver table, survival curve, segment table and a JSON summary"""
    os.makedirs(output_dir, exist_ok=True)
    saved_files = {}

    tables = {
        'driver_summary': (result.summary, OUTPUT_CONFIG['driver_summary_file'], True),
        'survival_curve': (result.survival_curve, OUTPUT_CONFIG['survival_curve_file'], False),
        'segment_statistics': (result.segments, OUTPUT_CONFIG['segment_statistics_file'], True),
    }
    for name, (df, filename, keep_index) in tables.items():
        filepath = os.path.join(output_dir, filename)
        df.to_csv(filepath, index=keep_index, date_format='%Y-%m-%d')
        saved_files[name] = filepath

    summary_json_path = os.path.join(output_dir, OUTPUT_CONFIG['summary_json_file'])
    with open(summary_json_path, 'w') as f:
        json.dump({
            'dlv': result.estimate.dlv,
            'population': result.stats.to_dict(),
            'survival_fit': result.survival_fit.to_dict(),
            'estimate': result.estimate.to_dict(),
        }, f, indent=2)
    saved_files['summary_json'] = summary_json_path

    for name, filepath in saved_files.items():
        info(f"Saved {name} to {filepath}", "estimate_dlv")
    return saved_files


def report_summary(result: AnalysisResult):
    """Console summary of the estimate"""
    stats, fit, estimate = result.stats, result.survival_fit, result.estimate
    print_summary("DRIVER LIFETIME VALUE", {
        'period': f"{stats.dataset_start:%Y-%m-%d} to {stats.dataset_end:%Y-%m-%d}",
        'drivers': stats.total_drivers,
        'still_active_drivers': stats.active_drivers,
        'recorded_rides': stats.total_rides,
        'mean_donation_usd': stats.mean_donation,
        'decay_rate_per_day': fit.decay_rate,
        'expected_remaining_tenure_days': fit.expected_tenure_days,
        'survival_fit_r_squared': fit.r_squared,
        'projected_future_rides': estimate.projected_future_rides,
        'avg_rides_per_driver': estimate.avg_rides_per_driver,
        'driver_lifetime_value_usd': estimate.dlv,
    })


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Estimate driver lifetime value from ride donation records")
    parser.add_argument('input', type=str, help='Ride file: driver id, donation amount, epoch seconds')
    parser.add_argument('--output-dir', type=str, default=None, help='Directory for result tables')
    parser.add_argument('--config', type=str, default=None, help='YAML file with configuration overrides')
    parser.add_argument('--utc-offset-hours', type=float, default=None)
    parser.add_argument('--has-header', action='store_const', const=True, default=None,
                        help='Skip the first row of the input file')
    parser.add_argument('--activity-window-days', type=int, default=None,
                        help='Days since last ride for a driver to still count as active')
    parser.add_argument('--revenue-share', type=float, default=None)
    parser.add_argument('--max-survival-days', type=int, default=None,
                        help='Cap on the survival curve horizon')
    parser.add_argument('--n-jobs', type=int, default=None, help='Parallel workers for driver summaries')
    parser.add_argument('--log-mode', type=str, default=None, choices=sorted(LOGGING_MODES),
                        help='Logging mode from config/logging_config.py')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(**get_logging_config(args.log_mode))

    try:
        config = merged_runtime_config(
            args.config,
            utc_offset_hours=args.utc_offset_hours,
            has_header=args.has_header,
            activity_window_days=args.activity_window_days,
            revenue_share=args.revenue_share,
            max_survival_days=args.max_survival_days,
            n_jobs=args.n_jobs,
        )
        result = run_analysis(args.input, config=config, output_dir=args.output_dir)
    except (DLVError, OSError, ValueError) as e:
        error(f"Analysis failed: {e}", "estimate_dlv")
        return 1

    report_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
