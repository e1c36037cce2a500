import pytest

from budget_core.budget import (
    category_alerts,
    evaluate_budget,
    global_utilization,
    is_near_limit,
    is_over_budget,
)
from budget_core.categories import EXPENSE_CATEGORIES


def test_global_utilization():
    assert global_utilization(1750, 2500) == pytest.approx(70)


def test_zero_limit_means_zero_utilization():
    assert global_utilization(0, 0) == 0
    assert global_utilization(10_000, 0) == 0


def test_food_near_limit_alerts_but_is_not_over():
    spend = {"Food & Dining": 480}
    limits = {"Food & Dining": 500}
    assert category_alerts(spend, limits) == ("Food & Dining",)
    assert is_near_limit(480, 500)
    assert not is_over_budget(480, 500)


def test_alert_threshold_is_eighty_percent():
    assert category_alerts({"Shopping": 239}, {"Shopping": 300}) == ()
    assert category_alerts({"Shopping": 241}, {"Shopping": 300}) == ("Shopping",)


def test_unset_limit_never_alerts():
    spend = {"Entertainment": 1_000_000, "Shopping": 50}
    limits = {"Entertainment": 0}
    assert category_alerts(spend, limits) == ()
    assert not is_over_budget(1_000_000, 0)
    assert not is_near_limit(1_000_000, 0)


def test_alerts_follow_category_order_not_spend():
    spend = {"Other": 1000, "Food & Dining": 450, "Transportation": 290}
    limits = {"Other": 100, "Food & Dining": 500, "Transportation": 300}
    assert category_alerts(spend, limits) == ("Food & Dining", "Transportation", "Other")


def test_over_and_near_limit_are_exclusive():
    assert is_over_budget(501, 500) and not is_near_limit(501, 500)
    assert is_near_limit(500, 500) and not is_over_budget(500, 500)
    assert not is_near_limit(450, 500)


def test_evaluate_budget_keeps_every_category():
    evaluation = evaluate_budget(
        total_expense=1750,
        global_limit=2500,
        category_spend={"Food & Dining": 480, "Shopping": 400},
        category_limits={"Food & Dining": 500, "Shopping": 300},
    )
    assert evaluation.utilization == pytest.approx(70)
    assert evaluation.category_alerts == ("Food & Dining", "Shopping")
    assert [row.category for row in evaluation.categories] == list(EXPENSE_CATEGORIES)

    rows = {row.category: row for row in evaluation.categories}
    assert rows["Food & Dining"].near_limit
    assert rows["Shopping"].over_budget
    assert rows["Shopping"].remaining == -100
    assert rows["Healthcare"].spent == 0
    assert rows["Healthcare"].utilization == 0
    assert not rows["Healthcare"].alert


def test_all_zero_limits_produce_no_alerts():
    evaluation = evaluate_budget(500, 0, {"Food & Dining": 500}, {})
    assert evaluation.utilization == 0
    assert evaluation.category_alerts == ()
