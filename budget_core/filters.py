from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Iterator, NamedTuple, Optional, Sequence

from budget_core.categories import EXPENSE_CATEGORIES
from budget_core.domain import EXPENSE, INCOME, Transaction
from budget_core.ranges import DateRange, as_instant, parse_date

Predicate = Callable[[Transaction], bool]

ALL = "all"


@dataclass(frozen=True)
class TransactionFilter:
    date_range: DateRange
    category: str = ALL
    kind: str = ALL
    text: str = ""


class Summary(NamedTuple):
    income: float
    expenses: float
    remaining: float


def by_category(category: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return category == ALL or t.category == category

    return _filter


def by_kind(kind: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return kind == ALL or t.kind == kind

    return _filter


def by_date_range(rng: DateRange) -> Predicate:
    # unparseable dates never match
    def _filter(t: Transaction) -> bool:
        day = parse_date(t.occurred_on)
        return day is not None and rng.contains(as_instant(day, rng.end))

    return _filter


def by_text(text: str) -> Predicate:
    needle = text.lower()

    def _filter(t: Transaction) -> bool:
        return needle == "" or needle in t.description.lower() or needle in t.category.lower()

    return _filter


def all_of(*preds: Predicate) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter


def iter_transactions(trans: Iterable[Transaction], pred: Predicate) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def filter_transactions(trans: Iterable[Transaction], flt: TransactionFilter) -> tuple[Transaction, ...]:
    """Transactions matching every predicate in ``flt``, in input order."""
    pred = all_of(
        by_date_range(flt.date_range),
        by_category(flt.category),
        by_kind(flt.kind),
        by_text(flt.text),
    )
    return tuple(iter_transactions(trans, pred))


def _sort_key(t: Transaction) -> date:
    return parse_date(t.occurred_on) or date.min


def sort_by_date_desc(trans: Iterable[Transaction]) -> tuple[Transaction, ...]:
    """Newest first. Equal dates keep their input order, malformed dates go last."""
    return tuple(sorted(trans, key=_sort_key, reverse=True))


def sum_by_kind(trans: Iterable[Transaction], kind: str) -> float:
    return sum((t.amount for t in trans if t.kind == kind), 0.0)


def summarize(trans: Sequence[Transaction]) -> Summary:
    income = sum_by_kind(trans, INCOME)
    expenses = sum_by_kind(trans, EXPENSE)
    return Summary(income=income, expenses=expenses, remaining=income - expenses)


def category_totals(
    trans: Iterable[Transaction],
    kind: str = EXPENSE,
    categories: Optional[Sequence[str]] = None,
    include_zero: bool = True,
) -> dict[str, float]:
    """Per-category sums for ``kind`` in category enumeration order.

    Budget views need every category (``include_zero=True``) so that unspent
    ones still report 0; chart views drop them.
    """
    cats = tuple(categories) if categories is not None else EXPENSE_CATEGORIES
    totals = {c: 0.0 for c in cats}
    for t in trans:
        if t.kind == kind and t.category in totals:
            totals[t.category] += t.amount
    if include_zero:
        return totals
    return {c: v for c, v in totals.items() if v > 0}


def group_by_category(trans: Iterable[Transaction], kind: str = EXPENSE) -> dict[str, float]:
    """Sums keyed by whatever categories appear, in first-seen order."""
    totals: dict[str, float] = {}
    for t in trans:
        if t.kind == kind:
            totals[t.category] = totals.get(t.category, 0.0) + t.amount
    return totals
