"""Schedule Calculator

Pure date arithmetic for recurring templates. No I/O.

Month and year steps use calendar arithmetic that clamps to the last
valid day of the target month (Jan 31 + 1 month -> Feb 28/29,
Feb 29 + 1 year -> Feb 28).
"""

from datetime import date, timedelta
from enum import Enum
from typing import Union
from dateutil.relativedelta import relativedelta


class Frequency(str, Enum):
    """Supported recurrence frequencies"""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


FREQUENCY_STEPS: dict[Frequency, Union[timedelta, relativedelta]] = {
    Frequency.WEEKLY: timedelta(days=7),
    Frequency.MONTHLY: relativedelta(months=1),
    Frequency.QUARTERLY: relativedelta(months=3),
    Frequency.YEARLY: relativedelta(years=1),
}


def parse_frequency(value: Union[Frequency, str]) -> Frequency:
    """
    Normalize a frequency value

    Raises:
        ValueError: If value is not a supported frequency
    """
    if isinstance(value, Frequency):
        return value
    try:
        return Frequency(str(value).lower())
    except ValueError:
        allowed = ", ".join(f.value for f in Frequency)
        raise ValueError(f"Unsupported frequency '{value}'. Must be one of: {allowed}")


def advance(anchor: date, frequency: Union[Frequency, str]) -> date:
    """
    Compute the occurrence following anchor

    Args:
        anchor: Date to advance from
        frequency: Recurrence frequency

    Returns:
        Next occurrence date (always strictly after anchor)
    """
    return anchor + FREQUENCY_STEPS[parse_frequency(frequency)]


def advance_until(anchor: date, frequency: Union[Frequency, str], reference: date) -> date:
    """
    Catch a schedule up to reference in whole-period steps

    Returns anchor unchanged when it is already on or after reference,
    otherwise the first occurrence reachable from anchor that is >= reference.
    """
    frequency = parse_frequency(frequency)
    next_date = anchor
    while next_date < reference:
        next_date = advance(next_date, frequency)
    return next_date
