"""
Field-level helpers: splitting a record body into fields and converting
amounts, counts and funds availability schedules to and from their BAI2 text.
"""
import re
from collections import OrderedDict
from typing import List, Optional, Tuple

from bai2_core.constants import FIELD_DELIMITER, FundsType
from bai2_core.utils.date_utils import parse_date, parse_time, write_date, write_time, convert_to_string

AMOUNT_PATTERN = re.compile(r'^[+-]?\d+$')
COUNT_PATTERN = re.compile(r'^\d+$')


class IncompleteAvailabilityError(ValueError):
    """The availability schedule needs more fields than the record holds."""


def split_fields(body: str) -> List[str]:
    """Split a record body on commas that are not inside a double-quoted substring."""
    fields = []
    current = []
    in_quotes = False
    for char in body:
        if char == '"':
            in_quotes = not in_quotes
        elif char == FIELD_DELIMITER and not in_quotes:
            fields.append(''.join(current))
            current = []
            continue
        current.append(char)
    fields.append(''.join(current))
    return fields


def parse_amount(value: str) -> Optional[int]:
    """
    Parses a BAI2 amount (implied two decimals, optional leading sign).

    Returns None for an empty field.
    """
    if value is None or value == '':
        return None
    value = value.strip()
    if not AMOUNT_PATTERN.match(value):
        raise ValueError(f"Invalid amount '{value}'. Expected digits with an optional leading '+' or '-'.")
    return int(value)


def parse_count(value: str) -> Optional[int]:
    if value is None or value == '':
        return None
    value = value.strip()
    if not COUNT_PATTERN.match(value):
        raise ValueError(f"Invalid number '{value}'. Expected digits only.")
    return int(value)


def parse_availability(funds_type: Optional[FundsType], rest: List[str]) -> Tuple[Optional[OrderedDict], List[str]]:
    """
    Parse funds availability schedule depending on funds_type.
    Supports simple (S), value-dated (V) and distributed (D) availability.

    Returns the schedule and the remaining, unconsumed fields.
    """
    rest = list(rest)
    availability = None

    if funds_type == FundsType.distributed_availability_simple:
        if len(rest) < 3:
            raise IncompleteAvailabilityError("Funds type 'S' requires immediate, one-day and two-or-more-day amounts.")
        availability = OrderedDict()
        for day in ['0', '1', '>1']:
            availability[day] = parse_amount(rest.pop(0))

    elif funds_type == FundsType.value_dated:
        if not rest:
            raise IncompleteAvailabilityError("Funds type 'V' requires a value date.")
        date = rest.pop(0)
        time = rest.pop(0) if rest else None
        availability = OrderedDict()
        availability['date'] = parse_date(date)
        availability['time'] = parse_time(time)

    elif funds_type == FundsType.distributed_availability:
        if not rest:
            raise IncompleteAvailabilityError("Funds type 'D' requires the number of distributions.")
        num_distributions = parse_count(rest.pop(0))
        if num_distributions is None:
            raise ValueError("Funds type 'D' requires the number of distributions.")
        if len(rest) < num_distributions * 2:
            raise IncompleteAvailabilityError(
                f"Funds type 'D' declares {num_distributions} distributions, "
                f"found {len(rest) // 2}."
            )
        availability = OrderedDict()
        for _ in range(num_distributions):
            day = rest.pop(0).strip()
            amount = parse_amount(rest.pop(0))
            if day in availability:
                raise ValueError(f"Duplicate availability day '{day}'.")
            availability[day] = amount

    return availability, rest


def write_availability(funds_type: Optional[FundsType], availability) -> List[str]:
    """Render an availability schedule back into its list of BAI2 fields."""
    if availability is None:
        return []

    if funds_type == FundsType.value_dated:
        date = availability.get('date')
        time = availability.get('time')
        return [
            write_date(date) if date else '',
            write_time(time) if time is not None else '',
        ]

    if funds_type == FundsType.distributed_availability:
        fields = [str(len(availability))]
        for day, amount in availability.items():
            fields += [convert_to_string(day), convert_to_string(amount)]
        return fields

    return [convert_to_string(value) for value in availability.values()]
