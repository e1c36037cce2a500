import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from dataclasses import replace
from datetime import date, datetime
from uuid import uuid4

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from budget_core.categories import (
    CURRENCIES,
    active_categories,
    add_custom_category,
    currency_symbol,
    remove_custom_category,
)
from budget_core.config import EMPTY_INSIGHTS_MESSAGE, configure_logging, get_seed_path
from budget_core.domain import EXPENSE, INCOME, RECURRING_FREQUENCIES, Snapshot
from budget_core.export import export_csv, export_filename, import_csv, transactions_frame
from budget_core.functional import (
    validate_category_budgets,
    validate_email,
    validate_goal_form,
    validate_transaction_form,
)
from budget_core.goals import QUICK_ADD_AMOUNTS, deadline_label
from budget_core.ranges import RANGE_LABELS, RANGE_TOKENS
from budget_core.services import DashboardQuery, DashboardService
from budget_core.transforms import (
    add_goal,
    add_transaction,
    cleared,
    load_seed,
    remove_goal,
    remove_transaction,
    restore_transaction,
    update_budget,
    update_goal_progress,
)

configure_logging()
logger = logging.getLogger("budget_app")

st.set_page_config(page_title="Budget Tracker", layout="wide")

if "snapshot" not in st.session_state:
    st.session_state.snapshot = load_seed(get_seed_path())
if "undo" not in st.session_state:
    st.session_state.undo = None


def snapshot() -> Snapshot:
    return st.session_state.snapshot


def commit(**changes) -> None:
    snap = snapshot()
    st.session_state.snapshot = Snapshot(
        transactions=changes.get("transactions", snap.transactions),
        goals=changes.get("goals", snap.goals),
        budget=changes.get("budget", snap.budget),
        settings=changes.get("settings", snap.settings),
    )


def show_error(result) -> None:
    st.error(result.get_error()["message"])


service = DashboardService()
symbol = currency_symbol(snapshot().settings.currency)

st.sidebar.markdown("### 💰 Budget Tracker")
range_token = st.sidebar.selectbox(
    "Date range",
    RANGE_TOKENS,
    index=RANGE_TOKENS.index("month"),
    format_func=RANGE_LABELS.get,
)
menu = st.sidebar.radio(
    "Menu",
    ["🏠 Home", "🧾 Transactions", "📊 Analytics", "🎯 Goals", "⚙️ Settings"]
)

if menu == "🏠 Home":
    report = service.build(snapshot(), DashboardQuery(now=datetime.now(), range_token=range_token))
    result = report["result"]
    summary = result["summary"]
    budget = result["budget"]

    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Income", f"{symbol}{summary.income:,.2f}")
    with k2:
        st.metric("Expenses", f"{symbol}{summary.expenses:,.2f}")
    with k3:
        st.metric("Remaining", f"{symbol}{summary.remaining:,.2f}")
    with k4:
        st.metric("Budget used", f"{budget.utilization:.0f}%")
    st.progress(min(budget.utilization, 100) / 100)

    for cat in budget.category_alerts:
        st.warning(f"⚠️ {cat} is above 80% of its budget")

    st.subheader("💡 Spending Insights")
    if not result["top_insights"]:
        st.info(EMPTY_INSIGHTS_MESSAGE)
    for insight in result["top_insights"]:
        text = f"**{insight.title}** {insight.value or ''}\n\n{insight.description}"
        if insight.kind == "warning":
            st.warning(text)
        elif insight.kind == "success":
            st.success(text)
        else:
            st.info(text)

    st.subheader("🕒 Recent Transactions")
    recent = transactions_frame(result["transactions"][:5])
    if recent.empty:
        st.info("No transactions to display.")
    else:
        st.table(recent[["date", "type", "category", "description", "amount"]].assign(
            date=lambda x: x["date"].dt.strftime("%Y-%m-%d").fillna("-"),
            amount=lambda x: x["amount"].map(lambda v: f"{symbol}{v:,.2f}"),
        ))

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")
    snap = snapshot()
    all_categories = sorted(set(active_categories(snap.settings, EXPENSE) + active_categories(snap.settings, INCOME)))

    c1, c2, c3 = st.columns(3)
    with c1:
        kind_filter = st.selectbox("Type", ["all", INCOME, EXPENSE])
    with c2:
        category_filter = st.selectbox("Category", ["all"] + all_categories)
    with c3:
        search = st.text_input("Search")

    report = service.build(snap, DashboardQuery(
        now=datetime.now(),
        range_token=range_token,
        category=category_filter,
        kind=kind_filter,
        text=search,
    ))
    shown = report["result"]["transactions"]

    if shown:
        for t in shown:
            cols = st.columns([2, 2, 4, 2, 1])
            cols[0].write(t.occurred_on)
            cols[1].write(t.category)
            cols[2].write(t.description + (f" 🔁 {t.recurring}" if t.recurring else ""))
            sign = "+" if t.kind == INCOME else "-"
            cols[3].write(f"{sign}{symbol}{t.amount:,.2f}")
            if cols[4].button("🗑", key=f"del_{t.id}"):
                remaining, removed = remove_transaction(snap.transactions, t.id)
                commit(transactions=remaining)
                st.session_state.undo = removed
                st.rerun()
    else:
        st.info("No transactions match the selected filters")

    if st.session_state.undo is not None:
        st.caption("Transaction deleted")
        if st.button("↩ Undo"):
            commit(transactions=restore_transaction(snapshot().transactions, st.session_state.undo))
            st.session_state.undo = None
            st.rerun()

    st.download_button(
        "⬇️ Export CSV",
        export_csv(snap.transactions),
        file_name=export_filename(date.today()),
        mime="text/csv",
    )
    uploaded = st.file_uploader("Import CSV", type="csv")
    if uploaded is not None and st.button("Import"):
        imported = import_csv(uploaded.getvalue().decode("utf-8", errors="replace"), id_prefix=uuid4().hex[:8])
        trans = snap.transactions
        for t in imported:
            trans = add_transaction(trans, t)
        commit(transactions=trans)
        st.success(f"Imported {len(imported)} transactions")

    st.header("➕ Add Transaction")
    kind = st.radio("Type", [EXPENSE, INCOME], horizontal=True, key="tx_kind")
    with st.form("tx_form"):
        amount = st.text_input("Amount")
        category = st.selectbox("Category", active_categories(snap.settings, kind))
        description = st.text_input("Description")
        when = st.date_input("Date", value=date.today())
        recurring = st.selectbox("Recurring", ["no"] + list(RECURRING_FREQUENCIES))
        receipt = st.text_input("Receipt URL")
        if st.form_submit_button("Save"):
            result = validate_transaction_form(
                {
                    "type": kind,
                    "amount": amount,
                    "category": category,
                    "description": description,
                    "date": when.isoformat() if when else "",
                    "receipt": receipt,
                    "isRecurring": recurring != "no",
                    "recurringFrequency": None if recurring == "no" else recurring,
                },
                snap.settings,
                tx_id=uuid4().hex,
            )
            if result.is_right():
                commit(transactions=add_transaction(snap.transactions, result.get_or_else(None)))
                st.success("Transaction added!")
            else:
                show_error(result)

elif menu == "📊 Analytics":
    st.title("📊 Analytics")
    report = service.build(snapshot(), DashboardQuery(now=datetime.now(), range_token=range_token))
    result = report["result"]

    chart = pd.DataFrame(result["category_chart"])
    if not chart.empty:
        fig_pie = px.pie(
            chart,
            values="value",
            names="name",
            color="name",
            color_discrete_map={row["name"]: row["color"] for row in result["category_chart"]},
            title="Expenses by Category",
            template="plotly_dark",
        )
        st.plotly_chart(fig_pie, use_container_width=True)

        fig_budget = go.Figure()
        fig_budget.add_trace(go.Bar(x=chart["name"], y=chart["value"], name="Spent"))
        fig_budget.add_trace(go.Bar(x=chart["name"], y=chart["budget"], name="Budget"))
        fig_budget.update_layout(barmode="group", template="plotly_dark", title="Budget vs Actual")
        st.plotly_chart(fig_budget, use_container_width=True)
    else:
        st.info("No expenses in this range.")

    monthly = pd.DataFrame(result["monthly"])
    if not monthly.empty:
        fig_ts = go.Figure()
        fig_ts.add_trace(go.Bar(x=monthly["month"], y=monthly["income"], name="Income"))
        fig_ts.add_trace(go.Bar(x=monthly["month"], y=monthly["expenses"], name="Expenses"))
        fig_ts.update_layout(template="plotly_dark", title="Monthly Trend", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig_ts, use_container_width=True)

    st.subheader("Category budgets")
    for row in result["budget"].categories:
        if row.limit <= 0:
            continue
        st.metric(
            row.category,
            f"{symbol}{row.spent:,.2f} / {symbol}{row.limit:,.2f}",
            f"{symbol}{row.remaining:,.2f} remaining",
        )
        st.progress(min(row.utilization, 100) / 100)

elif menu == "🎯 Goals":
    st.title("🎯 Savings Goals")
    report = service.build(snapshot(), DashboardQuery(now=datetime.now(), range_token=range_token))
    now = report["query"].now

    for row in report["result"]["goals"]:
        goal = row["goal"]
        st.subheader(goal.name + (" ✅" if row["complete"] else ""))
        st.progress(min(row["percent"], 100) / 100)
        st.caption(
            f"{symbol}{goal.current_amount:,.2f} of {symbol}{goal.target_amount:,.2f} "
            f"({row['percent']:.0f}%) · {deadline_label(goal, now)}"
        )
        cols = st.columns(len(QUICK_ADD_AMOUNTS) + 2)
        for col, step in zip(cols, QUICK_ADD_AMOUNTS):
            if col.button(f"+{symbol}{step}", key=f"add_{goal.id}_{step}"):
                commit(goals=update_goal_progress(snapshot().goals, goal.id, step))
                st.rerun()
        if cols[-2].button(f"-{symbol}{QUICK_ADD_AMOUNTS[0]}", key=f"sub_{goal.id}"):
            commit(goals=update_goal_progress(snapshot().goals, goal.id, -QUICK_ADD_AMOUNTS[0]))
            st.rerun()
        if cols[-1].button("🗑", key=f"del_goal_{goal.id}"):
            commit(goals=remove_goal(snapshot().goals, goal.id))
            st.rerun()

    st.header("➕ New Goal")
    with st.form("goal_form"):
        name = st.text_input("Name")
        target = st.text_input("Target amount")
        current = st.text_input("Current amount", value="0")
        deadline = st.date_input("Deadline", value=date.today())
        color = st.color_picker("Color", value="#4ECDC4")
        if st.form_submit_button("Create"):
            result = validate_goal_form(
                {
                    "name": name,
                    "targetAmount": target,
                    "currentAmount": current,
                    "deadline": deadline.isoformat(),
                    "color": color,
                },
                goal_id=uuid4().hex,
            )
            if result.is_right():
                commit(goals=add_goal(snapshot().goals, result.get_or_else(None)))
                st.success("Goal created!")
            else:
                show_error(result)

elif menu == "⚙️ Settings":
    st.title("⚙️ Settings")
    snap = snapshot()

    codes = list(CURRENCIES)
    currency = st.selectbox(
        "Currency",
        codes,
        index=codes.index(snap.settings.currency) if snap.settings.currency in codes else 0,
        format_func=lambda c: f"{c} ({CURRENCIES[c][0]}) {CURRENCIES[c][1]}",
    )
    email_reports = st.checkbox("Email reports", value=snap.settings.email_reports)
    report_email = st.text_input("Report email", value=snap.settings.report_email)
    if st.button("Save preferences"):
        settings = snap.settings
        if email_reports:
            checked = validate_email(report_email)
            if checked.is_left():
                show_error(checked)
                st.stop()
            report_email = checked.get_or_else(report_email)
        commit(settings=replace(
            settings,
            currency=currency,
            email_reports=email_reports,
            report_email=report_email,
        ))
        st.success("Settings saved!")

    st.header("Budgets")
    limit = st.number_input("Monthly budget", min_value=0.0, value=float(snap.budget.limit), step=100.0)
    cats = active_categories(snap.settings, EXPENSE)
    raw = {c: st.text_input(c, value=str(snap.budget.limit_for(c)), key=f"budget_{c}") for c in cats}
    if st.button("Save budgets"):
        parsed = validate_category_budgets(raw, cats)
        if parsed.is_right():
            commit(budget=update_budget(snap.budget, limit=limit, category_limits=parsed.get_or_else({})))
            st.success("Category budgets saved!")
        else:
            show_error(parsed)

    st.header("Custom categories")
    c1, c2, c3 = st.columns(3)
    with c1:
        new_kind = st.radio("Kind", [EXPENSE, INCOME], horizontal=True, key="custom_kind")
    with c2:
        new_name = st.text_input("Name", key="custom_name")
    with c3:
        new_color = st.color_picker("Color", value="#85C1E2", key="custom_color")
    if st.button("Add category"):
        commit(settings=add_custom_category(snapshot().settings, new_kind, new_name, new_color))
        st.rerun()
    for c in snap.settings.custom_expense_categories + snap.settings.custom_income_categories:
        kind = EXPENSE if c in snap.settings.custom_expense_categories else INCOME
        if st.button(f"Remove {c.name} ({kind})", key=f"rm_{kind}_{c.name}"):
            commit(settings=remove_custom_category(snapshot().settings, kind, c.name))
            st.rerun()

    if st.button("🧹 Clear all data"):
        commit(**vars(cleared(snapshot())))
        logger.info("cleared all transactions and goals")
        st.rerun()
