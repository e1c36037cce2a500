from pathlib import Path

import pytest

from budget_core.config import DEFAULT_BUDGET_LIMIT
from budget_core.domain import EXPENSE, INCOME, BudgetConfig, SavingsGoal, Transaction
from budget_core.transforms import (
    add_transaction,
    budget_from_record,
    cleared,
    goal_from_record,
    load_seed,
    remove_transaction,
    restore_transaction,
    settings_from_record,
    settings_to_record,
    snapshot_from_records,
    transaction_from_record,
    transaction_to_record,
    update_budget,
    update_goal_progress,
    update_transaction,
)

SEED = Path(__file__).resolve().parent.parent / "data" / "seed.json"


def make_tx(id, amount=10.0, day="2025-01-01"):
    return Transaction(id=id, kind=EXPENSE, amount=amount, category="Other", description="x", occurred_on=day)


def test_load_seed():
    snap = load_seed(str(SEED))
    assert len(snap.transactions) == 7
    assert len(snap.goals) == 2
    assert snap.budget.limit == 2500
    assert snap.budget.limit_for("Food & Dining") == 500
    assert snap.settings.currency == "USD"


def test_transaction_from_record():
    t = transaction_from_record({
        "id": 2,
        "type": "expense",
        "amount": "120",
        "category": "Bills & Utilities",
        "description": "Electric bill",
        "date": "2025-01-23",
        "receipt": "https://example.com/r.png",
        "isRecurring": True,
        "recurringFrequency": "monthly",
    })
    assert t.id == "2"
    assert t.amount == 120.0
    assert t.recurring == "monthly"
    assert t.receipt == "https://example.com/r.png"
    assert transaction_to_record(t)["isRecurring"] is True


def test_transaction_record_keeps_malformed_date():
    t = transaction_from_record({"id": "x", "type": "income", "amount": 5, "date": "bogus"})
    assert t.kind == INCOME
    assert t.occurred_on == "bogus"
    assert t.recurring is None


def test_goal_from_record_clamps_current_amount():
    g = goal_from_record({"id": "1", "name": "Trip", "targetAmount": 100, "currentAmount": 150, "deadline": "2025-06-01"})
    assert g.current_amount == 100
    g = goal_from_record({"id": "1", "name": "Trip", "targetAmount": 100, "currentAmount": -5, "deadline": "2025-06-01"})
    assert g.current_amount == 0


def test_missing_records_fall_back_to_defaults():
    budget = budget_from_record(None)
    assert budget.limit == DEFAULT_BUDGET_LIMIT
    assert budget.limit_for("Entertainment") == 200
    assert settings_from_record(None).currency == "USD"


def test_settings_round_trip_keeps_custom_categories():
    record = {
        "currency": "EUR",
        "emailReports": True,
        "reportEmail": "me@example.com",
        "customExpenseCategories": [{"name": "Pets", "color": "#111111", "budget": 80}],
        "customIncomeCategories": [{"name": "Gifts", "color": "#222222"}],
    }
    settings = settings_from_record(record)
    assert settings.custom_expense_categories[0].budget == 80
    assert settings_to_record(settings) == record


def test_snapshot_skips_malformed_records():
    snap = snapshot_from_records(
        transactions=[{"id": "1", "amount": 5, "date": "2025-01-01"}, {"amount": 5}],
        goals=[{"name": "no id"}],
    )
    assert [t.id for t in snap.transactions] == ["1"]
    assert snap.goals == ()


def test_add_and_update_are_immutable():
    trans = (make_tx("t1"),)
    added = add_transaction(trans, make_tx("t2"))
    assert len(trans) == 1
    assert len(added) == 2

    updated = update_transaction(added, make_tx("t1", amount=99))
    assert updated[0].amount == 99
    assert added[0].amount == 10


def test_remove_then_restore():
    trans = (make_tx("t1"), make_tx("t2"))
    remaining, removed = remove_transaction(trans, "t1")
    assert [t.id for t in remaining] == ["t2"]
    assert removed == make_tx("t1")

    restored = restore_transaction(remaining, removed)
    assert {t.id for t in restored} == {"t1", "t2"}
    assert restore_transaction(restored, removed) == restored


def test_remove_unknown_id():
    trans = (make_tx("t1"),)
    remaining, removed = remove_transaction(trans, "nope")
    assert remaining == trans
    assert removed is None


def test_update_goal_progress_clamps():
    goals = (
        SavingsGoal(id="g1", name="A", target_amount=1000, current_amount=950, deadline="2025-06-01"),
        SavingsGoal(id="g2", name="B", target_amount=50, current_amount=10, deadline="2025-06-01"),
    )
    updated = update_goal_progress(goals, "g1", 100)
    assert updated[0].current_amount == 1000
    assert updated[1] == goals[1]
    assert update_goal_progress(updated, "g1", -2000)[0].current_amount == 0


def test_update_budget_merges_limits():
    budget = BudgetConfig(limit=2500, category_limits=(("Food & Dining", 500.0),))
    updated = update_budget(budget, category_limits={"Shopping": 300.0})
    assert updated.limit == 2500
    assert updated.limits() == {"Food & Dining": 500.0, "Shopping": 300.0}
    assert update_budget(budget, limit=0).limit == 0


def test_cleared_resets_data_but_keeps_settings():
    snap = load_seed(str(SEED))
    empty = cleared(snap)
    assert empty.transactions == ()
    assert empty.goals == ()
    assert empty.settings == snap.settings
    assert empty.budget.limit == DEFAULT_BUDGET_LIMIT


def test_snapshot_rejects_negative_and_non_numeric_amounts():
    snap = snapshot_from_records(transactions=[
        {"id": "neg", "amount": -50, "date": "2025-01-01"},
        {"id": "nan", "amount": "nan", "date": "2025-01-01"},
        {"id": "inf", "amount": "inf", "date": "2025-01-01"},
        {"id": "txt", "amount": "lots", "date": "2025-01-01"},
        {"id": "ok", "amount": "12.5", "date": "2025-01-01"},
    ])
    assert [t.id for t in snap.transactions] == ["ok"]
    assert snap.transactions[0].amount == 12.5


def test_transaction_from_record_raises_on_negative_amount():
    with pytest.raises(ValueError):
        transaction_from_record({"id": "1", "amount": -50})


def test_unreadable_category_budget_is_unset():
    budget = budget_from_record({"budgetLimit": 100, "categoryBudgets": {"Food & Dining": "lots", "Shopping": 300}})
    assert budget.limit == 100
    assert budget.limit_for("Food & Dining") == 0
    assert budget.limit_for("Shopping") == 300

    snap = snapshot_from_records(budget={"budgetLimit": "nan", "categoryBudgets": {"Shopping": -5}})
    assert snap.budget.limit == 0
    assert snap.budget.limit_for("Shopping") == 0


def test_goal_with_non_positive_target_is_skipped():
    with pytest.raises(ValueError):
        goal_from_record({"id": "1", "name": "Trip", "targetAmount": 0, "currentAmount": 10, "deadline": "2025-06-01"})
    snap = snapshot_from_records(goals=[
        {"id": "g1", "name": "Trip", "targetAmount": -100, "currentAmount": 10, "deadline": "2025-06-01"},
        {"id": "g2", "name": "Car", "targetAmount": 100, "currentAmount": 10, "deadline": "2025-06-01"},
    ])
    assert [g.id for g in snap.goals] == ["g2"]
    assert all(0 <= g.current_amount <= g.target_amount for g in snap.goals)
