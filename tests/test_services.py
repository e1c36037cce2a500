from dataclasses import replace
from datetime import datetime
from pathlib import Path

import pytest

from budget_core.domain import EXPENSE
from budget_core.services import DashboardQuery, DashboardService, range_step, summary_step
from budget_core.transforms import load_seed

SEED = Path(__file__).resolve().parent.parent / "data" / "seed.json"
NOW = datetime(2025, 1, 31, 12, 0)


def make_report(**query):
    service = DashboardService()
    return service.build(load_seed(str(SEED)), DashboardQuery(now=NOW, **query))


def test_steps_run_in_order():
    report = make_report()
    assert [s["calculator"] for s in report["steps"]] == [
        "range_step",
        "summary_step",
        "transactions_step",
        "categories_step",
        "budget_step",
        "rollup_step",
        "insights_step",
        "goals_step",
    ]
    assert report["currency_symbol"] == "$"


def test_summary_and_budget_for_month():
    result = make_report(range_token="month")["result"]
    assert result["summary"].income == 3500
    assert result["summary"].expenses == pytest.approx(510.5)
    assert result["summary"].remaining == pytest.approx(2989.5)
    assert result["budget"].utilization == pytest.approx(20.42)
    assert result["budget"].category_alerts == ()


def test_transactions_are_filtered_and_sorted():
    result = make_report(kind=EXPENSE, text="o")["result"]
    dates = [t.occurred_on for t in result["transactions"]]
    assert dates == sorted(dates, reverse=True)
    assert all(t.kind == EXPENSE for t in result["transactions"])
    assert result["transactions"][0].id == "1"


def test_chart_rows_skip_unspent_categories():
    chart = make_report()["result"]["category_chart"]
    names = [row["name"] for row in chart]
    assert "Healthcare" not in names
    assert names[0] == "Food & Dining"
    assert chart[0]["budget"] == 500
    assert chart[0]["color"] == "#FF6B6B"


def test_rollup_ignores_date_range():
    today_only = make_report(range_token="today")["result"]
    assert today_only["summary"].expenses == 0
    assert [m.month for m in today_only["monthly"]] == ["2025-01"]
    assert today_only["monthly"][0].income == 3500


def test_insights_and_goals():
    result = make_report()["result"]
    assert [i.code for i in result["insights"]] == ["top_category", "on_track"]
    assert result["insights"][0].category == "Shopping"
    assert len(result["top_insights"]) == 2

    goals = result["goals"]
    assert [g["percent"] for g in goals] == [pytest.approx(42.5), pytest.approx(50)]
    assert not any(g["complete"] for g in goals)
    assert goals[0]["days_remaining"] > 0


def test_custom_calculators():
    service = DashboardService([range_step, summary_step])
    report = service.build(load_seed(str(SEED)), DashboardQuery(now=NOW, range_token="all"))
    assert set(report["result"]) == {"range", "in_range", "summary"}
    assert len(report["result"]["in_range"]) == 7


def test_build_accepts_list_of_transactions():
    seed = load_seed(str(SEED))
    snapshot = replace(seed, transactions=list(seed.transactions))
    report = DashboardService().build(snapshot, DashboardQuery(now=NOW))
    assert report["result"]["monthly"] == make_report()["result"]["monthly"]


def test_category_report():
    report = DashboardService().category_report(load_seed(str(SEED)), "Shopping", NOW)
    assert report["current_month"] == 200
    assert report["previous_month"] == 0
    assert report["status"].limit == 300
    assert not report["status"].over_budget
