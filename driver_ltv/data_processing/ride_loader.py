"""
Load per-ride donation records from a delimited file
Columns are assigned positionally: driver id, donation amount, epoch timestamp
"""

from datetime import timedelta, timezone
from pathlib import Path
from typing import IO, Union

import numpy as np
import pandas as pd

from config.dlv_config import DATA_CONFIG
from driver_ltv.utils.errors import MalformedInputError
from driver_ltv.utils.logger import info, debug

# One day inside the nanosecond range so any UTC offset still converts
MIN_EPOCH_SECONDS = pd.Timestamp.min.value // 10**9 + 86400
MAX_EPOCH_SECONDS = pd.Timestamp.max.value // 10**9 - 86400


def _empty_rides(utc_offset_hours: float) -> pd.DataFrame:
    tz = timezone(timedelta(hours=utc_offset_hours))
    return pd.DataFrame({
        'driver_id': pd.Series(dtype=str),
        'donation_amount': pd.Series(dtype=float),
        'timestamp': pd.Series(dtype=float),
        'occurred_at': pd.Series(dtype=pd.DatetimeTZDtype(tz=tz)),
        'ride_date': pd.Series(dtype='datetime64[ns]'),
    })


def _source_name(source) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    return getattr(source, 'name', type(source).__name__)


def load_rides(source: Union[str, Path, IO[str]],
               utc_offset_hours: float = None,
               has_header: bool = None,
               delimiter: str = ',') -> pd.DataFrame:
    """
    Read ride records and return them sorted by driver and time.

    Args:
        source: path to the ride file or an open text stream
        utc_offset_hours: fixed offset used to derive local calendar dates
        has_header: skip the first row when True
        delimiter: field separator

    Returns:
        DataFrame with columns driver_id, donation_amount, timestamp,
        occurred_at (offset-aware) and ride_date (local midnight)

    Raises:
        MalformedInputError: a row does not have exactly three fields, a field
            is empty, an amount or timestamp is not a finite number, or a
            timestamp falls outside the representable date range
    """
    if utc_offset_hours is None:
        utc_offset_hours = DATA_CONFIG['utc_offset_hours']
    if has_header is None:
        has_header = DATA_CONFIG['has_header']

    n_columns = len(DATA_CONFIG['columns'])
    first_row = 2 if has_header else 1

    try:
        raw = pd.read_csv(
            source,
            sep=delimiter,
            header=None,
            skiprows=1 if has_header else 0,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        info(f"No ride records found in {_source_name(source)}", "ride_loader")
        return _empty_rides(utc_offset_hours)
    except pd.errors.ParserError as e:
        raise MalformedInputError(f"expected exactly {n_columns} fields per row ({e})") from e

    if raw.shape[1] != n_columns:
        raise MalformedInputError(
            f"expected exactly {n_columns} fields per row, found {raw.shape[1]}", row=first_row
        )
    raw.columns = DATA_CONFIG['columns']

    # Short rows come back as NaN, empty fields as ''
    raw = raw.fillna('').apply(lambda col: col.str.strip())
    missing = (raw == '').any(axis=1)
    if missing.any():
        position = int(missing.to_numpy().argmax())
        raise MalformedInputError("missing field", row=position + first_row)

    timestamps = pd.to_numeric(raw['timestamp'], errors='coerce')
    bad_timestamps = timestamps.isna() | ~np.isfinite(timestamps.astype(float))
    if bad_timestamps.any():
        position = int(bad_timestamps.to_numpy().argmax())
        raise MalformedInputError(
            f"invalid timestamp {raw['timestamp'].iloc[position]!r}", row=position + first_row
        )

    # Epoch seconds representable as local nanosecond timestamps
    out_of_range = (timestamps < MIN_EPOCH_SECONDS) | (timestamps > MAX_EPOCH_SECONDS)
    if out_of_range.any():
        position = int(out_of_range.to_numpy().argmax())
        raise MalformedInputError(
            f"timestamp {raw['timestamp'].iloc[position]!r} out of range", row=position + first_row
        )

    amounts = pd.to_numeric(raw['donation_amount'], errors='coerce')
    bad_amounts = amounts.isna() | ~np.isfinite(amounts.astype(float))
    if bad_amounts.any():
        position = int(bad_amounts.to_numpy().argmax())
        raise MalformedInputError(
            f"invalid donation amount {raw['donation_amount'].iloc[position]!r}",
            row=position + first_row,
        )

    tz = timezone(timedelta(hours=utc_offset_hours))
    try:
        occurred_at = pd.to_datetime(timestamps.astype(float), unit='s', utc=True).dt.tz_convert(tz)
    except (OverflowError, pd.errors.OutOfBoundsDatetime) as e:
        raise MalformedInputError(f"timestamp out of range ({e})") from e

    rides = pd.DataFrame({
        'driver_id': raw['driver_id'],
        'donation_amount': amounts.astype(float),
        'timestamp': timestamps.astype(float),
        'occurred_at': occurred_at,
        'ride_date': occurred_at.dt.tz_localize(None).dt.normalize(),
    })
    rides = rides.sort_values(['driver_id', 'timestamp'], kind='mergesort').reset_index(drop=True)

    info(f"Loaded {len(rides):,} rides for {rides['driver_id'].nunique():,} drivers "
         f"from {_source_name(source)}", "ride_loader")
    debug(f"Ride dates span {rides['ride_date'].min().date()} to {rides['ride_date'].max().date()}",
          "ride_loader")
    return rides
