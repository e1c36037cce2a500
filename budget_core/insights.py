"""Spending insights comparing the current calendar month with the previous one.

Insights come out in a fixed priority order:

1. month-over-month total change
2. per-category spending spikes
3. categories near their limit
4. categories over their limit
5. the top spending category
6. budget pacing for the month
7. static saving tips

Everything is generated; ``top_insights`` trims for display.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Mapping, Optional, Sequence

from budget_core.budget import is_near_limit, is_over_budget
from budget_core.config import INSIGHT_DISPLAY_LIMIT
from budget_core.domain import EXPENSE, Transaction
from budget_core.filters import group_by_category
from budget_core.ranges import parse_date

logger = logging.getLogger(__name__)

WARNING = "warning"
SUCCESS = "success"
INFO = "info"
TIP = "tip"

TOTAL_INCREASE_PCT = 20
TOTAL_DECREASE_PCT = -10
CATEGORY_SPIKE_PCT = 30
PACING_MARGIN_PCT = 10

# category -> (threshold, title, description)
SPENDING_TIPS = (
    ("Food & Dining", 500, "Tip: Reduce dining expenses", "Consider meal prepping to save on food costs."),
    ("Entertainment", 200, "Tip: Entertainment savings", "Look for free events or subscription alternatives."),
)


@dataclass(frozen=True)
class Insight:
    kind: str                       # warning | success | info | tip
    code: str
    title: str
    description: str
    value: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[float] = None


def previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def _in_month(day: Optional[date], year: int, month: int) -> bool:
    return day is not None and day.year == year and day.month == month


def split_months(trans: Iterable[Transaction], now: datetime) -> tuple[list[Transaction], list[Transaction]]:
    """Expenses of the current and of the previous calendar month."""
    prev_year, prev_month = previous_month(now.year, now.month)
    current, previous = [], []
    for t in trans:
        if t.kind != EXPENSE:
            continue
        day = parse_date(t.occurred_on)
        if _in_month(day, now.year, now.month):
            current.append(t)
        elif _in_month(day, prev_year, prev_month):
            previous.append(t)
    return current, previous


def _money(symbol: str, amount: float) -> str:
    return f"{symbol}{amount:.2f}"


def month_over_month(current_total: float, prev_total: float, symbol: str) -> Optional[Insight]:
    if prev_total <= 0:
        return None
    change = (current_total - prev_total) / prev_total * 100
    delta = current_total - prev_total
    if change > TOTAL_INCREASE_PCT:
        return Insight(
            kind=WARNING,
            code="spending_up",
            title="Spending increased significantly",
            description=f"You've spent {abs(change):.0f}% more this month compared to last month.",
            value=f"+{_money(symbol, delta)}",
            amount=delta,
        )
    if change < TOTAL_DECREASE_PCT:
        return Insight(
            kind=SUCCESS,
            code="spending_down",
            title="Great job saving!",
            description=f"You've spent {abs(change):.0f}% less this month compared to last month.",
            value=f"-{_money(symbol, abs(delta))}",
            amount=delta,
        )
    return None


def category_spikes(current: Mapping[str, float], previous: Mapping[str, float], symbol: str) -> list[Insight]:
    out = []
    for category, spent in current.items():
        prev = previous.get(category, 0.0)
        if prev <= 0:
            continue
        change = (spent - prev) / prev * 100
        if change > CATEGORY_SPIKE_PCT:
            out.append(Insight(
                kind=WARNING,
                code="category_spike",
                title=f"{category} spending up",
                description=f"You've spent {change:.0f}% more on {category} this month.",
                value=f"+{_money(symbol, spent - prev)}",
                category=category,
                amount=spent - prev,
            ))
    return out


def near_limit(current: Mapping[str, float], limits: Mapping[str, float], symbol: str) -> list[Insight]:
    out = []
    for category, spent in current.items():
        limit = limits.get(category, 0.0)
        if is_near_limit(spent, limit):
            out.append(Insight(
                kind=INFO,
                code="near_limit",
                title=f"{category} near budget limit",
                description=f"You've used {spent / limit * 100:.0f}% of your {category} budget.",
                value=f"{_money(symbol, limit - spent)} left",
                category=category,
                amount=limit - spent,
            ))
    return out


def over_limit(current: Mapping[str, float], limits: Mapping[str, float], symbol: str) -> list[Insight]:
    out = []
    for category, spent in current.items():
        limit = limits.get(category, 0.0)
        if is_over_budget(spent, limit):
            out.append(Insight(
                kind=WARNING,
                code="over_limit",
                title=f"{category} over budget!",
                description=f"You've exceeded your {category} budget by {_money(symbol, spent - limit)}.",
                value=f"{_money(symbol, spent)} / {_money(symbol, limit)}",
                category=category,
                amount=spent - limit,
            ))
    return out


def top_category(current: Mapping[str, float], symbol: str) -> Optional[Insight]:
    if not current:
        return None
    # max() keeps the first of equal values
    category, spent = max(current.items(), key=lambda item: item[1])
    return Insight(
        kind=INFO,
        code="top_category",
        title="Top spending category",
        description=f"{category} is your biggest expense this month.",
        value=_money(symbol, spent),
        category=category,
        amount=spent,
    )


def pacing(current_total: float, budget_limit: float, now: datetime) -> Optional[Insight]:
    if budget_limit <= 0:
        return None
    used = current_total / budget_limit * 100
    days_in_month = calendar.monthrange(now.year, now.month)[1]
    expected = now.day / days_in_month * 100
    if used < expected - PACING_MARGIN_PCT:
        return Insight(
            kind=SUCCESS,
            code="on_track",
            title="On track with budget!",
            description="You're spending less than expected for this point in the month.",
            value=f"{used:.0f}% used",
            amount=used,
        )
    return None


def spending_tips(current: Mapping[str, float]) -> list[Insight]:
    return [
        Insight(kind=TIP, code="tip", title=title, description=text, category=category)
        for category, threshold, title, text in SPENDING_TIPS
        if current.get(category, 0.0) > threshold
    ]


def generate_insights(
    trans: Iterable[Transaction],
    budget_limit: float,
    category_budgets: Mapping[str, float],
    now: datetime,
    currency_symbol: str = "$",
) -> tuple[Insight, ...]:
    current, previous = split_months(trans, now)
    current_by_cat = group_by_category(current)
    prev_by_cat = group_by_category(previous)
    current_total = sum(t.amount for t in current)
    prev_total = sum(t.amount for t in previous)

    insights: list[Insight] = []

    mom = month_over_month(current_total, prev_total, currency_symbol)
    if mom:
        insights.append(mom)
    insights.extend(category_spikes(current_by_cat, prev_by_cat, currency_symbol))
    insights.extend(near_limit(current_by_cat, category_budgets, currency_symbol))
    insights.extend(over_limit(current_by_cat, category_budgets, currency_symbol))
    top = top_category(current_by_cat, currency_symbol)
    if top:
        insights.append(top)
    pace = pacing(current_total, budget_limit, now)
    if pace:
        insights.append(pace)
    insights.extend(spending_tips(current_by_cat))

    logger.debug("generated %d insights for %04d-%02d", len(insights), now.year, now.month)
    return tuple(insights)


def top_insights(insights: Sequence[Insight], limit: int = INSIGHT_DISPLAY_LIMIT) -> tuple[Insight, ...]:
    return tuple(insights[: max(0, limit)])
