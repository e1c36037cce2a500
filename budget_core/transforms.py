import json
import logging
import math
from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional

from budget_core.categories import default_category_budgets
from budget_core.config import DEFAULT_BUDGET_LIMIT, DEFAULT_CURRENCY
from budget_core.domain import (
    EXPENSE,
    KINDS,
    RECURRING_FREQUENCIES,
    BudgetConfig,
    CustomCategory,
    SavingsGoal,
    Snapshot,
    Transaction,
    UserSettings,
)
from budget_core.functional import parse_amount
from budget_core.goals import apply_delta, clamp

logger = logging.getLogger(__name__)


# --- document-store records <-> domain objects

def _checked_amount(raw: Any, field: str, allow_zero: bool = True) -> float:
    """Stored amount as a finite, non-negative float; ValueError otherwise."""
    result = parse_amount(raw, field=field, allow_zero=allow_zero)
    if result.is_left():
        err = result.get_error()
        raise ValueError(f"{field}: {err['error']} ({raw!r})")
    return result.get_or_else(0.0)


def _limit_or_unset(raw: Any, name: str) -> float:
    result = parse_amount(0 if raw in (None, "") else raw, field=name, allow_zero=True)
    if result.is_left():
        logger.warning("budget limit for %s is unreadable (%r); treating it as unset", name, raw)
    return result.get_or_else(0.0)


def transaction_from_record(record: Mapping[str, Any]) -> Transaction:
    kind = record.get("type", EXPENSE)
    recurring = record.get("recurringFrequency")
    if not record.get("isRecurring", recurring is not None) or recurring not in RECURRING_FREQUENCIES:
        recurring = None
    return Transaction(
        id=str(record["id"]),
        kind=kind if kind in KINDS else EXPENSE,
        amount=_checked_amount(record.get("amount"), "amount"),
        category=str(record.get("category", "Other")),
        description=str(record.get("description", "")),
        occurred_on=str(record.get("date", "")),
        receipt=record.get("receipt") or None,
        recurring=recurring,
    )


def transaction_to_record(t: Transaction) -> dict:
    return {
        "id": t.id,
        "type": t.kind,
        "amount": t.amount,
        "category": t.category,
        "description": t.description,
        "date": t.occurred_on,
        "receipt": t.receipt,
        "isRecurring": t.recurring is not None,
        "recurringFrequency": t.recurring,
    }


def goal_from_record(record: Mapping[str, Any]) -> SavingsGoal:
    target = _checked_amount(record.get("targetAmount"), "targetAmount", allow_zero=False)
    current = float(record.get("currentAmount", 0) or 0)
    if not math.isfinite(current):
        raise ValueError(f"currentAmount: not a finite number ({current!r})")
    return SavingsGoal(
        id=str(record["id"]),
        name=str(record.get("name", "")),
        target_amount=target,
        current_amount=clamp(current, 0, target),
        deadline=str(record.get("deadline", "")),
        color=record.get("color") or "#4ECDC4",
    )


def goal_to_record(g: SavingsGoal) -> dict:
    return {
        "id": g.id,
        "name": g.name,
        "targetAmount": g.target_amount,
        "currentAmount": g.current_amount,
        "deadline": g.deadline,
        "color": g.color,
    }


def budget_from_record(record: Optional[Mapping[str, Any]]) -> BudgetConfig:
    if not record:
        return default_budget_config()
    limits = record.get("categoryBudgets") or {}
    limit = record.get("budgetLimit")
    return BudgetConfig(
        limit=DEFAULT_BUDGET_LIMIT if limit is None else _limit_or_unset(limit, "total"),
        category_limits=tuple((str(k), _limit_or_unset(v, str(k))) for k, v in limits.items()),
    )


def budget_to_record(b: BudgetConfig) -> dict:
    return {"budgetLimit": b.limit, "categoryBudgets": b.limits()}


def settings_from_record(record: Optional[Mapping[str, Any]]) -> UserSettings:
    if not record:
        return UserSettings(currency=DEFAULT_CURRENCY)
    return UserSettings(
        currency=record.get("currency") or DEFAULT_CURRENCY,
        email_reports=bool(record.get("emailReports", False)),
        report_email=record.get("reportEmail") or "",
        custom_expense_categories=tuple(
            CustomCategory(name=c["name"], color=c.get("color", "#85C1E2"), budget=c.get("budget"))
            for c in record.get("customExpenseCategories") or ()
        ),
        custom_income_categories=tuple(
            CustomCategory(name=c["name"], color=c.get("color", "#85C1E2"))
            for c in record.get("customIncomeCategories") or ()
        ),
    )


def settings_to_record(s: UserSettings) -> dict:
    return {
        "currency": s.currency,
        "emailReports": s.email_reports,
        "reportEmail": s.report_email,
        "customExpenseCategories": [
            {"name": c.name, "color": c.color, **({"budget": c.budget} if c.budget is not None else {})}
            for c in s.custom_expense_categories
        ],
        "customIncomeCategories": [{"name": c.name, "color": c.color} for c in s.custom_income_categories],
    }


def _load_all(records: Iterable[Mapping[str, Any]], loader, label: str) -> tuple:
    loaded = []
    for record in records:
        try:
            loaded.append(loader(record))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("skipping malformed %s record %r: %s", label, record.get("id"), e)
    return tuple(loaded)


def snapshot_from_records(
    transactions: Iterable[Mapping[str, Any]] = (),
    goals: Iterable[Mapping[str, Any]] = (),
    budget: Optional[Mapping[str, Any]] = None,
    settings: Optional[Mapping[str, Any]] = None,
) -> Snapshot:
    snap = Snapshot(
        transactions=_load_all(transactions, transaction_from_record, "transaction"),
        goals=_load_all(goals, goal_from_record, "goal"),
        budget=budget_from_record(budget),
        settings=settings_from_record(settings),
    )
    logger.debug("snapshot with %d transactions, %d goals", len(snap.transactions), len(snap.goals))
    return snap


def load_seed(path: str) -> Snapshot:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return snapshot_from_records(
        transactions=data.get("transactions", ()),
        goals=data.get("goals", ()),
        budget=data.get("budgets"),
        settings=data.get("settings"),
    )


def default_budget_config() -> BudgetConfig:
    return BudgetConfig(
        limit=DEFAULT_BUDGET_LIMIT,
        category_limits=tuple(default_category_budgets().items()),
    )


# --- immutable collection updates

def add_transaction(trans: tuple[Transaction, ...], t: Transaction) -> tuple[Transaction, ...]:
    return trans + (t,)


def update_transaction(trans: tuple[Transaction, ...], t: Transaction) -> tuple[Transaction, ...]:
    return tuple(t if old.id == t.id else old for old in trans)


def remove_transaction(
    trans: tuple[Transaction, ...], tx_id: str
) -> tuple[tuple[Transaction, ...], Optional[Transaction]]:
    """Collection without ``tx_id`` plus the removed record, kept for undo."""
    removed = next((t for t in trans if t.id == tx_id), None)
    return tuple(t for t in trans if t.id != tx_id), removed


def restore_transaction(trans: tuple[Transaction, ...], t: Transaction) -> tuple[Transaction, ...]:
    """Undo a removal. Same as adding; a record already present is left alone."""
    if any(old.id == t.id for old in trans):
        return trans
    return add_transaction(trans, t)


def add_goal(goals: tuple[SavingsGoal, ...], g: SavingsGoal) -> tuple[SavingsGoal, ...]:
    return goals + (g,)


def update_goal(goals: tuple[SavingsGoal, ...], g: SavingsGoal) -> tuple[SavingsGoal, ...]:
    return tuple(g if old.id == g.id else old for old in goals)


def remove_goal(goals: tuple[SavingsGoal, ...], goal_id: str) -> tuple[SavingsGoal, ...]:
    return tuple(g for g in goals if g.id != goal_id)


def update_goal_progress(goals: tuple[SavingsGoal, ...], goal_id: str, amount: float) -> tuple[SavingsGoal, ...]:
    return tuple(
        replace(g, current_amount=apply_delta(g, amount)) if g.id == goal_id else g
        for g in goals
    )


def update_budget(
    budget: BudgetConfig,
    limit: Optional[float] = None,
    category_limits: Optional[Mapping[str, float]] = None,
) -> BudgetConfig:
    merged = budget.limits()
    if category_limits is not None:
        merged.update(category_limits)
    return BudgetConfig(
        limit=budget.limit if limit is None else limit,
        category_limits=tuple(merged.items()),
    )


def cleared(snapshot: Snapshot) -> Snapshot:
    """Empty transactions and goals, budgets back to defaults, settings kept."""
    return Snapshot(budget=default_budget_config(), settings=snapshot.settings)
