import io

import pandas as pd
import pytest

from conftest import BASE_EPOCH, rides_csv
from driver_ltv.data_processing.ride_loader import MAX_EPOCH_SECONDS, load_rides
from driver_ltv.utils.errors import InputFormatError, MalformedInputError


def test_columns_assigned_positionally():
    rides = load_rides(rides_csv([("d1", 12.5, 1)]), utc_offset_hours=0)

    assert list(rides.columns) == ['driver_id', 'donation_amount', 'timestamp', 'occurred_at', 'ride_date']
    row = rides.iloc[0]
    assert row['driver_id'] == "d1"
    assert row['donation_amount'] == 12.5
    assert row['ride_date'] == pd.Timestamp("2016-03-28")


def test_records_sorted_by_driver_then_time():
    source = io.StringIO(
        f"b,5,{BASE_EPOCH + 300}\n"
        f"a,6,{BASE_EPOCH + 200}\n"
        f"b,7,{BASE_EPOCH + 100}\n"
        f"a,8,{BASE_EPOCH + 50}\n"
    )
    rides = load_rides(source, utc_offset_hours=0)

    assert rides['driver_id'].tolist() == ["a", "a", "b", "b"]
    assert rides['donation_amount'].tolist() == [8.0, 6.0, 7.0, 5.0]


def test_fixed_offset_shifts_calendar_date():
    # 03:00 UTC on 2016-03-28 is still the 27th six hours west of UTC
    source = io.StringIO(f"d1,10,{BASE_EPOCH + 3 * 3600}\n")

    utc = load_rides(source, utc_offset_hours=0)
    source.seek(0)
    central = load_rides(source, utc_offset_hours=-6)

    assert utc['ride_date'].iloc[0] == pd.Timestamp("2016-03-28")
    assert central['ride_date'].iloc[0] == pd.Timestamp("2016-03-27")
    assert central['occurred_at'].iloc[0].hour == 21


def test_header_row_skipped():
    source = io.StringIO(f"driver_id,ride_prime_time,timestamp\nd1,10,{BASE_EPOCH}\n")
    rides = load_rides(source, utc_offset_hours=0, has_header=True)

    assert len(rides) == 1


def test_header_without_flag_is_malformed():
    source = io.StringIO(f"driver_id,donation,timestamp\nd1,10,{BASE_EPOCH}\n")

    with pytest.raises(MalformedInputError, match="row 1: invalid timestamp"):
        load_rides(source, utc_offset_hours=0)


def test_missing_field_reports_row():
    source = io.StringIO(f"d1,10,{BASE_EPOCH}\nd2,,{BASE_EPOCH}\n")

    with pytest.raises(MalformedInputError) as excinfo:
        load_rides(source, utc_offset_hours=0)
    assert excinfo.value.row == 2


def test_short_row_is_malformed():
    source = io.StringIO(f"d1,10,{BASE_EPOCH}\nd2,10\n")

    with pytest.raises(MalformedInputError, match="missing field"):
        load_rides(source, utc_offset_hours=0)


def test_extra_column_is_malformed():
    with pytest.raises(MalformedInputError):
        load_rides(io.StringIO(f"d1,10,{BASE_EPOCH},extra\n"), utc_offset_hours=0)

    with pytest.raises(MalformedInputError):
        load_rides(io.StringIO(f"d1,10,{BASE_EPOCH}\nd2,10,{BASE_EPOCH},extra\n"), utc_offset_hours=0)


def test_non_numeric_timestamp():
    with pytest.raises(MalformedInputError, match="timestamp"):
        load_rides(io.StringIO("d1,10,yesterday\n"), utc_offset_hours=0)


def test_non_numeric_donation():
    with pytest.raises(MalformedInputError, match="donation amount"):
        load_rides(io.StringIO(f"d1,ten,{BASE_EPOCH}\n"), utc_offset_hours=0)


@pytest.mark.parametrize("timestamp", ["inf", "-inf", "nan"])
def test_non_finite_timestamp(timestamp):
    source = io.StringIO(f"d1,10,{BASE_EPOCH}\nd1,10,{timestamp}\n")

    with pytest.raises(MalformedInputError, match="invalid timestamp") as excinfo:
        load_rides(source, utc_offset_hours=0)
    assert excinfo.value.row == 2


@pytest.mark.parametrize("timestamp", ["1e30", "-1e30", "99999999999"])
def test_timestamp_outside_date_range(timestamp):
    with pytest.raises(MalformedInputError, match="out of range") as excinfo:
        load_rides(io.StringIO(f"d1,10,{timestamp}\n"), utc_offset_hours=0)
    assert excinfo.value.row == 1


@pytest.mark.parametrize("utc_offset_hours", [-12, 14])
def test_latest_accepted_timestamp_converts(utc_offset_hours):
    rides = load_rides(io.StringIO(f"d1,10,{MAX_EPOCH_SECONDS}\n"), utc_offset_hours=utc_offset_hours)

    assert rides['ride_date'].iloc[0].year == 2262


def test_non_finite_donation():
    with pytest.raises(MalformedInputError, match="donation amount"):
        load_rides(io.StringIO(f"d1,inf,{BASE_EPOCH}\n"), utc_offset_hours=0)


def test_malformed_input_is_an_input_format_error():
    with pytest.raises(InputFormatError):
        load_rides(io.StringIO("d1,10,\n"), utc_offset_hours=0)


def test_empty_input_loads_no_rides():
    rides = load_rides(io.StringIO(""), utc_offset_hours=0)

    assert rides.empty
    assert 'ride_date' in rides.columns


def test_reads_from_path(tmp_path):
    path = tmp_path / "rides.csv"
    path.write_text(f"d1,9.5,{BASE_EPOCH}\nd1,10.5,{BASE_EPOCH + 60}\n")

    rides = load_rides(str(path), utc_offset_hours=0)

    assert len(rides) == 2
    assert rides['donation_amount'].sum() == 20.0
