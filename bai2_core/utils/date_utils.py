"""
Utility functions for parsing and formatting specific BAI2 data types.

This module provides type-hinted functions for handling the date, time and
type code formats used in BAI2 files. Every parse function
raises ``ValueError`` on malformed input; callers attach the field name.
"""

import datetime
from typing import Optional

from bai2_core.constants import TypeCode, TypeCodes, TypeCodeRanges

# Years a two-digit %y value parses into
TWO_DIGIT_YEAR_WINDOW = (1969, 2068)


def parse_date(value: str) -> Optional[datetime.date]:
    """
    Parses a BAI2-specific date string (YYMMDD or YYYYMMDD) into a date object.
    """
    if not value:
        return None

    fmt = {6: "%y%m%d", 8: "%Y%m%d"}.get(len(value))
    if fmt and value.isdigit():
        try:
            return datetime.datetime.strptime(value, fmt).date()
        except ValueError:
            pass

    raise ValueError(f"Invalid date format for value: '{value}'. Expected YYMMDD or YYYYMMDD.")


def write_date(date_obj: datetime.date) -> str:
    """
    Formats a date object into a BAI2-specific date string.

    YYMMDD is written whenever it parses back to the same year; dates outside
    that window are written as YYYYMMDD.

    Args:
        date_obj: The datetime.date object to format.

    Returns:
        The formatted YYMMDD or YYYYMMDD string.
    """
    first_year, last_year = TWO_DIGIT_YEAR_WINDOW
    if first_year <= date_obj.year <= last_year:
        return date_obj.strftime('%y%m%d')
    return f'{date_obj.year:04d}{date_obj.month:02d}{date_obj.day:02d}'


def parse_time(value: str) -> Optional[datetime.time]:
    """
    Parses a BAI2 time string into a time object.

    Handles both military format (HHMM) and clock format (HH:MM:SS), including
    the special BAI2 conventions for end-of-day.

    - Handles '2400' and '9999' as end-of-day (23:59:59.999999).
    - Handles standard military time like '0930' or '1700'.
    - Handles standard clock time like '09:30:00'.

    Args:
        value: The time string to parse.

    Returns:
        A datetime.time object, or None if the input is empty.
    """
    if not value:
        return None

    # Handle special BAI2 end-of-day conventions first.
    if value in ('2400', '9999'):
        return datetime.time.max

    try:
        # Check for clock format (HH:MM:SS)
        if ':' in value:
            return datetime.datetime.strptime(value, '%H:%M:%S').time()

        if not value.isdigit() or len(value) > 4:
            raise ValueError(value)

        # Assume military format (HHMM), ensuring it's 4 digits.
        padded_value = value.zfill(4)
        return datetime.datetime.strptime(padded_value, '%H%M').time()

    except ValueError:
        raise ValueError(f"Invalid time format for value: '{value}'. Expected HHMM or HH:MM:SS.")


def write_time(time_obj: datetime.time) -> str:
    """
    Formats a time object into a BAI2-compliant string.

    Times carrying seconds are always written in clock format so they survive
    a parse/write round trip.

    Args:
        time_obj: The datetime.time object to format.

    Returns:
        The formatted time string.
    """
    if time_obj == datetime.time.max:
        return _write_military_time(time_obj)

    if time_obj.second:
        return _write_clock_time(time_obj)

    return _write_military_time(time_obj)


def _write_clock_time(time_obj: datetime.time) -> str:
    """Formats a time object as HH:MM:SS."""
    return time_obj.strftime('%H:%M:%S')


def _write_military_time(time_obj: datetime.time) -> str:
    """Formats a time object as HHMM, handling the end-of-day convention."""
    if time_obj == datetime.time.max:
        return '2400'
    return time_obj.strftime('%H%M')


def parse_type_code(value: str) -> TypeCode:
    """
    Looks up a type code string and returns the corresponding TypeCode object.

    Codes missing from the constants table are resolved from the BAI range they
    fall into, with no description.

    Args:
        value: The 3-digit type code string.

    Returns:
        The matching TypeCode named tuple.

    Raises:
        ValueError: If the value is not a 3-digit code inside a BAI range.
    """
    type_code = TypeCodes.get(value)
    if type_code:
        return type_code

    if len(value) != 3 or not value.isdigit():
        raise ValueError(f"Type code '{value}' must be exactly 3 digits.")

    number = int(value)
    for first, last, transaction, level in TypeCodeRanges:
        if first <= number <= last:
            return TypeCode(value, transaction, level, None)

    raise ValueError(f"Type code '{value}' is outside every BAI type code range.")


def convert_to_string(value: Optional[any]) -> str:
    """
    Safely converts any value to its string representation.

    Handles `None` by returning an empty string, which is standard for BAI2 fields.

    Args:
        value: The value to convert.

    Returns:
        The string representation of the value, or '' if the value is None.
    """
    return '' if value is None else str(value)
