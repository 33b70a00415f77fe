"""

"""
from datetime import datetime

import pytest
import pytz

from gnsspacket.gpstime import GPS_EPOCH, WEEK, WEEK_MS, gps_week, itow_diff, itow_to_datetime, week_itow_to_datetime


def fixed_clock(*args):
    return lambda:pytz.utc.localize(datetime(*args))


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (500,100,604799600),
        (100,500,400),
        (0,0,0),
        (WEEK_MS-1,0,1),
    ]
)
def test_itow_diff(start,end,expected):
    assert itow_diff(start,end)==expected


def test_gps_week():
    assert GPS_EPOCH==pytz.utc.localize(datetime(1980,1,6))
    assert gps_week(GPS_EPOCH)==0
    assert gps_week(pytz.utc.localize(datetime(2024,1,7)))==2296
    assert gps_week(pytz.utc.localize(datetime(2024,1,6,23,59,59)))==2295


def test_week_itow_to_datetime():
    assert week_itow_to_datetime(2296,0)==pytz.utc.localize(datetime(2024,1,7))
    assert week_itow_to_datetime(2296,3*86400000+1500)==pytz.utc.localize(datetime(2024,1,10,0,0,1,500000))


def test_itow_to_datetime():
    clock=fixed_clock(2024,1,10,12)
    assert itow_to_datetime(0,clock)==pytz.utc.localize(datetime(2024,1,7))
    assert itow_to_datetime(3*86400000+12*3600000,clock)==clock()


def test_itow_to_datetime_week_boundary():
    # Recorded one second before the week rollover, decoded one second after it.
    # The week comes from the decoding clock, so the result is a week late.
    clock=fixed_clock(2024,1,7,0,0,1)
    recorded=pytz.utc.localize(datetime(2024,1,6,23,59,59))
    assert itow_to_datetime(WEEK_MS-1000,clock)==recorded+WEEK
