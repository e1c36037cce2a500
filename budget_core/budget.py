"""Budget evaluation: utilization against the global limit and per-category alerts.

A limit of 0 always means "no budget set", never "no spending allowed", so
categories without a positive limit are never flagged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from budget_core.categories import EXPENSE_CATEGORIES

logger = logging.getLogger(__name__)

ALERT_RATIO = 0.8
NEAR_LIMIT_RATIO = 0.9


@dataclass(frozen=True)
class CategoryStatus:
    category: str
    spent: float
    limit: float
    utilization: float
    alert: bool
    near_limit: bool
    over_budget: bool

    @property
    def remaining(self) -> float:
        return self.limit - self.spent


@dataclass(frozen=True)
class BudgetEvaluation:
    total_expense: float
    limit: float
    utilization: float
    category_alerts: tuple[str, ...]
    categories: tuple[CategoryStatus, ...]


def percentage(value: float, total: float) -> float:
    if total <= 0:
        return 0.0
    return value / total * 100


def global_utilization(total_expense: float, global_limit: float) -> float:
    """Spend as a percent of the global limit; exactly 0 when no limit is set."""
    return percentage(total_expense, global_limit)


def is_alerting(spend: float, limit: float) -> bool:
    return limit > 0 and spend > limit * ALERT_RATIO


def is_over_budget(spend: float, limit: float) -> bool:
    return limit > 0 and spend > limit


def is_near_limit(spend: float, limit: float) -> bool:
    return limit > 0 and limit * NEAR_LIMIT_RATIO < spend <= limit


def category_alerts(
    category_spend: Mapping[str, float],
    category_limits: Mapping[str, float],
    categories: Optional[Sequence[str]] = None,
) -> tuple[str, ...]:
    """Categories past 80% of their limit, in canonical category order."""
    cats = categories if categories is not None else EXPENSE_CATEGORIES
    return tuple(
        c for c in cats
        if is_alerting(category_spend.get(c, 0.0), category_limits.get(c, 0.0))
    )


def category_status(category: str, spent: float, limit: float) -> CategoryStatus:
    return CategoryStatus(
        category=category,
        spent=spent,
        limit=limit,
        utilization=percentage(spent, limit),
        alert=is_alerting(spent, limit),
        near_limit=is_near_limit(spent, limit),
        over_budget=is_over_budget(spent, limit),
    )


def evaluate_budget(
    total_expense: float,
    global_limit: float,
    category_spend: Mapping[str, float],
    category_limits: Mapping[str, float],
    categories: Optional[Sequence[str]] = None,
) -> BudgetEvaluation:
    cats = tuple(categories) if categories is not None else EXPENSE_CATEGORIES
    rows = tuple(
        category_status(c, category_spend.get(c, 0.0), category_limits.get(c, 0.0))
        for c in cats
    )
    alerts = tuple(r.category for r in rows if r.alert)
    if alerts:
        logger.debug("budget alerts for %s", ", ".join(alerts))
    return BudgetEvaluation(
        total_expense=total_expense,
        limit=global_limit,
        utilization=global_utilization(total_expense, global_limit),
        category_alerts=alerts,
        categories=rows,
    )
