"""
GPS time of week handling.

Most UBX navigation messages only carry iTOW, the millisecond time of week of
the navigation epoch. To turn that into an absolute time we need a week
number, and the only one available to a single packet is the week we are in
now, according to the clock of the machine doing the decoding.

Known limitation: the week number comes from the decoding machine's clock,
not from the receiver. A packet decoded near a week boundary (Saturday/Sunday
midnight GPS time), or a recording decoded long after it was made, gets the
wrong week and so a timestamp off by a whole number of weeks. Leap seconds
are also ignored, so the result is GPS time labelled as UTC. Callers that
need authoritative time should use the UTC fields of UBX-NAV-PVT or
UBX-NAV-TIMEUTC, or combine the week field of UBX-NAV-TIMEGPS with
week_itow_to_datetime().
"""
from datetime import datetime, timedelta
from typing import Callable

import pytz

GPS_EPOCH=pytz.utc.localize(datetime(1980,1,6))
WEEK_MS=7*24*60*60*1000
WEEK=timedelta(milliseconds=WEEK_MS)

Clock=Callable[[],datetime]


def utcnow()->datetime:
    """Current wall-clock time as an aware UTC datetime"""
    return datetime.now(pytz.utc)


def gps_week(now:datetime)->int:
    """
    Number of whole weeks between the GPS epoch and the given time.

    :param now: aware datetime
    """
    return (now-GPS_EPOCH)//WEEK


def week_itow_to_datetime(week:int, iTOW:int)->datetime:
    """
    Absolute time of a GPS week and millisecond time of week, ignoring leap seconds
    """
    return GPS_EPOCH+timedelta(milliseconds=week*WEEK_MS+iTOW)


def itow_to_datetime(iTOW:int, clock:Clock=utcnow)->datetime:
    """
    Convert a receiver time of week to an absolute time, taking the week
    number from the supplied clock. See the module docstring for why this
    can be off by one week.

    :param iTOW: time of week in milliseconds
    :param clock: callable returning the current time as an aware datetime
    :return: aware UTC datetime
    """
    return week_itow_to_datetime(gps_week(clock()),iTOW)


def itow_diff(start:int, end:int)->int:
    """
    Milliseconds from start to end, allowing for one rollover of the week.

    Only meaningful when the two values are less than one week apart. Larger
    gaps alias to the remainder modulo one week; bounding the interval is up
    to the caller.
    """
    if end<start:
        return end+WEEK_MS-start
    return end-start
