from collections import defaultdict
from functools import lru_cache
from typing import Iterable, NamedTuple

from budget_core.config import ROLLUP_WINDOW
from budget_core.domain import INCOME, Transaction
from budget_core.ranges import parse_date


class MonthTotals(NamedTuple):
    month: str       # "YYYY-MM"
    income: float
    expenses: float


def month_key(t: Transaction) -> str | None:
    day = parse_date(t.occurred_on)
    return day.strftime("%Y-%m") if day else None


def monthly_rollup(trans: Iterable[Transaction], window: int = ROLLUP_WINDOW) -> tuple[MonthTotals, ...]:
    """Income/expense totals per calendar month, oldest first, last ``window`` months.

    Always takes the whole collection, never a date-filtered subset, so the
    trend chart shows history regardless of the active range. Months without
    transactions are not padded in.
    """
    return _cached_rollup(tuple(trans), window)


@lru_cache(maxsize=32)
def _cached_rollup(trans: tuple[Transaction, ...], window: int) -> tuple[MonthTotals, ...]:
    income: dict[str, float] = defaultdict(float)
    expenses: dict[str, float] = defaultdict(float)
    months: set[str] = set()

    for t in trans:
        key = month_key(t)
        if key is None:
            continue
        months.add(key)
        if t.kind == INCOME:
            income[key] += t.amount
        else:
            expenses[key] += t.amount

    ordered = sorted(months)[-window:] if window > 0 else []
    return tuple(MonthTotals(m, income[m], expenses[m]) for m in ordered)
