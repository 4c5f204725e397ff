"""Pick the forecast hour that represents a commute leg.

A shift is two local time-of-day windows (outbound and return). For every
requested date we look for the hourly sample closest to the middle of each
window, allowing half an hour of slack on both ends so hourly grids still hit
windows such as 05:15-05:45.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import List, Optional, Sequence

from skyride.domain import CommuteLeg, CommutePeriod, ShiftWindow, parse_hhmm
from skyride.samples import ForecastDataError, HourlySample
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="slot_logic")

SLOT_TOLERANCE_MINUTES = 30

PERIOD_DAYS = {
    CommutePeriod.TODAY: (0,),
    CommutePeriod.TOMORROW: (1,),
    CommutePeriod.FIVE_DAYS: (0, 1, 2, 3, 4),
}


@dataclass(frozen=True)
class CommuteSlot:
    """A selected sample tagged with the leg and shift it belongs to."""
    leg: CommuteLeg
    shift_name: str
    date: dt.date  # grouping date; the outbound date even for overnight returns
    sample: HourlySample

    @property
    def time_label(self) -> str:
        return f"{self.sample.time:%H:%M}"


def time_to_minutes(value: str) -> int:
    """'HH:MM' -> minutes since midnight."""
    try:
        return parse_hhmm(value)
    except ValueError as exc:
        raise ForecastDataError(str(exc)) from exc


def select_slot(
    hourly: Sequence[HourlySample],
    calendar_date: dt.date,
    window_start: str,
    window_end: str,
) -> Optional[HourlySample]:
    """
    Return the sample on `calendar_date` nearest the window midpoint, or None.

    Candidates are samples whose local minute-of-day lies within
    [start - 30, end + 30]. Equidistant candidates resolve to the earlier one.
    """
    start = time_to_minutes(window_start)
    end = time_to_minutes(window_end)
    target = (start + end) / 2

    best: Optional[HourlySample] = None
    best_diff = float("inf")
    for sample in hourly:
        if sample.time.date() != calendar_date:
            continue
        minutes = sample.minute_of_day
        if not (start - SLOT_TOLERANCE_MINUTES <= minutes <= end + SLOT_TOLERANCE_MINUTES):
            continue
        diff = abs(minutes - target)
        if diff < best_diff:
            best, best_diff = sample, diff
    return best


def return_leg_date(shift: ShiftWindow, calendar_date: dt.date) -> dt.date:
    """Overnight shifts come home the next morning."""
    if shift.is_overnight:
        return calendar_date + dt.timedelta(days=1)
    return calendar_date


def dates_for_period(period: CommutePeriod, reference_date: dt.date) -> List[dt.date]:
    return [reference_date + dt.timedelta(days=offset) for offset in PERIOD_DAYS[CommutePeriod(period)]]


def find_commute_slots(
    start_hourly: Sequence[HourlySample],
    destination_hourly: Sequence[HourlySample],
    shift: ShiftWindow,
    period: CommutePeriod,
    reference_date: dt.date,
) -> List[CommuteSlot]:
    """
    Collect outbound and return slots for every date in `period`.

    Outbound legs read the start location's forecast and return legs read the
    destination's. Dates without a matching sample are skipped.
    """
    slots: List[CommuteSlot] = []
    for date in dates_for_period(period, reference_date):
        outbound = select_slot(start_hourly, date, shift.outbound_start, shift.outbound_end)
        if outbound is not None:
            slots.append(CommuteSlot(CommuteLeg.OUTBOUND, shift.name, date, outbound))
        else:
            logger.debug("No outbound sample", extra={"shift": shift.name, "date": date.isoformat()})

        back = select_slot(
            destination_hourly, return_leg_date(shift, date), shift.return_start, shift.return_end
        )
        if back is not None:
            slots.append(CommuteSlot(CommuteLeg.RETURN, shift.name, date, back))
        else:
            logger.debug("No return sample", extra={"shift": shift.name, "date": date.isoformat()})
    return slots
