"""
Month entries and their totals.

A month holds recurring household line items: apartment (housing) expenses,
other expenses and two income sources. Values arrive from HTML forms, so
they are coerced leniently to numbers.
"""

import math
import re
from dataclasses import asdict, dataclass, fields
from typing import NamedTuple

from .errors import InvalidMonth

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

HOUSING_FIELDS = ("building_fee", "water", "gas", "electricity")
OTHER_FIELDS = ("internet", "credit_card", "car", "garage")
INCOME_FIELDS = ("income_cadastre", "income_admin")


def to_number(value):
    """Coerce a form value to a float; blanks, garbage and non-finite values become 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", "."))
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def validate_month(month):
    """Return `month` if it is a YYYY-MM key, raise InvalidMonth otherwise."""
    if not isinstance(month, str) or not MONTH_PATTERN.match(month):
        raise InvalidMonth(month)
    return month


class MonthTotals(NamedTuple):
    housing: float
    other: float
    income: float
    expenses: float
    balance: float


@dataclass
class MonthEntry:
    # Housing
    building_fee: float = 0.0
    water: float = 0.0
    gas: float = 0.0
    electricity: float = 0.0
    # Other expenses
    internet: float = 0.0
    credit_card: float = 0.0
    car: float = 0.0
    garage: float = 0.0
    # Income
    income_cadastre: float = 0.0
    income_admin: float = 0.0

    @classmethod
    def from_dict(cls, data):
        """Build an entry from raw form/JSON data; unknown keys are dropped."""
        data = data if isinstance(data, dict) else {}
        return cls(**{f.name: to_number(data.get(f.name)) for f in fields(cls)})

    def to_dict(self):
        return asdict(self)

    def totals(self):
        housing = sum(getattr(self, name) for name in HOUSING_FIELDS)
        other = sum(getattr(self, name) for name in OTHER_FIELDS)
        income = sum(getattr(self, name) for name in INCOME_FIELDS)
        expenses = housing + other
        return MonthTotals(housing, other, income, expenses, income - expenses)
