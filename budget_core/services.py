import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Sequence

from budget_core.budget import category_status, evaluate_budget
from budget_core.categories import active_categories, category_color, currency_symbol
from budget_core.config import INSIGHT_DISPLAY_LIMIT
from budget_core.domain import EXPENSE, Snapshot
from budget_core.filters import (
    ALL,
    TransactionFilter,
    by_date_range,
    category_totals,
    filter_transactions,
    iter_transactions,
    sort_by_date_desc,
    summarize,
)
from budget_core.functional import pipe
from budget_core.goals import days_remaining, is_complete, progress_percent
from budget_core.insights import generate_insights, split_months, top_insights
from budget_core.ranges import resolve_range
from budget_core.rollup import monthly_rollup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardQuery:
    """What the user is currently looking at."""
    now: datetime
    range_token: str = "month"
    category: str = ALL
    kind: str = ALL
    text: str = ""


# calculator(snapshot, query, acc) -> partial result merged into acc
Calculator = Callable[[Snapshot, DashboardQuery, Dict[str, Any]], Dict[str, Any]]


def range_step(snapshot: Snapshot, query: DashboardQuery, acc: Dict[str, Any]) -> Dict[str, Any]:
    return {"range": resolve_range(query.range_token, query.now)}


def summary_step(snapshot: Snapshot, query: DashboardQuery, acc: Dict[str, Any]) -> Dict[str, Any]:
    in_range = tuple(iter_transactions(snapshot.transactions, by_date_range(acc["range"])))
    return {"in_range": in_range, "summary": summarize(in_range)}


def transactions_step(snapshot: Snapshot, query: DashboardQuery, acc: Dict[str, Any]) -> Dict[str, Any]:
    flt = TransactionFilter(
        date_range=acc["range"],
        category=query.category,
        kind=query.kind,
        text=query.text,
    )
    return {"transactions": pipe(snapshot.transactions, lambda ts: filter_transactions(ts, flt), sort_by_date_desc)}


def categories_step(snapshot: Snapshot, query: DashboardQuery, acc: Dict[str, Any]) -> Dict[str, Any]:
    cats = active_categories(snapshot.settings, EXPENSE)
    spend = category_totals(acc["in_range"], EXPENSE, cats)
    limits = snapshot.budget.limits()
    chart = tuple(
        {
            "name": name,
            "value": value,
            "budget": limits.get(name, 0.0),
            "color": category_color(name, snapshot.settings),
        }
        for name, value in spend.items()
        if value > 0
    )
    return {"category_spend": spend, "category_chart": chart}


def budget_step(snapshot: Snapshot, query: DashboardQuery, acc: Dict[str, Any]) -> Dict[str, Any]:
    evaluation = evaluate_budget(
        total_expense=acc["summary"].expenses,
        global_limit=snapshot.budget.limit,
        category_spend=acc["category_spend"],
        category_limits=snapshot.budget.limits(),
        categories=tuple(acc["category_spend"]),
    )
    return {"budget": evaluation}


def rollup_step(snapshot: Snapshot, query: DashboardQuery, acc: Dict[str, Any]) -> Dict[str, Any]:
    return {"monthly": monthly_rollup(snapshot.transactions)}


def insights_step(snapshot: Snapshot, query: DashboardQuery, acc: Dict[str, Any]) -> Dict[str, Any]:
    insights = generate_insights(
        snapshot.transactions,
        budget_limit=snapshot.budget.limit,
        category_budgets=snapshot.budget.limits(),
        now=query.now,
        currency_symbol=currency_symbol(snapshot.settings.currency),
    )
    return {"insights": insights, "top_insights": top_insights(insights, INSIGHT_DISPLAY_LIMIT)}


def goals_step(snapshot: Snapshot, query: DashboardQuery, acc: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "goals": tuple(
            {
                "goal": g,
                "percent": progress_percent(g),
                "days_remaining": days_remaining(g, query.now),
                "complete": is_complete(g),
            }
            for g in snapshot.goals
        )
    }


DEFAULT_CALCULATORS: tuple[Calculator, ...] = (
    range_step,
    summary_step,
    transactions_step,
    categories_step,
    budget_step,
    rollup_step,
    insights_step,
    goals_step,
)


class DashboardService:
    """Facade that runs the calculators over one snapshot.

    Each calculator takes (snapshot, query, acc) and returns a dict merged
    into acc, so later steps can build on earlier ones. Every intermediate
    output is kept in ``steps``.
    """

    def __init__(self, calculators: Sequence[Calculator] = DEFAULT_CALCULATORS):
        self.calculators = calculators

    def build(self, snapshot: Snapshot, query: DashboardQuery) -> Dict[str, Any]:
        report = {
            "query": query,
            "currency_symbol": currency_symbol(snapshot.settings.currency),
            "steps": [],
            "result": {},
        }

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(snapshot, query, acc)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            acc.update(out)

        logger.debug(
            "dashboard built: %d transactions shown, %d insights",
            len(acc.get("transactions", ())),
            len(acc.get("insights", ())),
        )
        report["result"] = acc
        return report

    def category_report(self, snapshot: Snapshot, category: str, now: datetime) -> Dict[str, Any]:
        """This month vs last month for one expense category, against its limit."""
        current, previous = split_months(snapshot.transactions, now)
        spent = sum(t.amount for t in current if t.category == category)
        prev = sum(t.amount for t in previous if t.category == category)
        return {
            "category": category,
            "current_month": spent,
            "previous_month": prev,
            "change": spent - prev,
            "status": category_status(category, spent, snapshot.budget.limit_for(category)),
        }
