"""Savings goal progress.

``apply_delta`` is the single way ``current_amount`` moves outside a full
goal edit: every contribution or withdrawal is clamped into
``[0, target_amount]``.
"""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime
from typing import Optional

from budget_core.domain import SavingsGoal
from budget_core.ranges import as_instant, parse_date

QUICK_ADD_AMOUNTS = (10, 25, 50, 100)

_SECONDS_PER_DAY = 24 * 60 * 60


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def progress_percent(goal: SavingsGoal) -> float:
    if goal.target_amount <= 0:
        return 0.0
    return goal.current_amount / goal.target_amount * 100


def apply_delta(goal: SavingsGoal, amount: float) -> float:
    """New current amount after adding ``amount`` (negative withdraws)."""
    return clamp(goal.current_amount + amount, 0, goal.target_amount)


def contribute(goal: SavingsGoal, amount: float) -> SavingsGoal:
    return replace(goal, current_amount=apply_delta(goal, amount))


def is_complete(goal: SavingsGoal) -> bool:
    return goal.current_amount >= goal.target_amount


def remaining_amount(goal: SavingsGoal) -> float:
    return max(goal.target_amount - goal.current_amount, 0.0)


def days_remaining(goal: SavingsGoal, now: datetime) -> Optional[int]:
    """Whole days until the deadline, rounded up; negative when overdue."""
    deadline = parse_date(goal.deadline)
    if deadline is None:
        return None
    delta = as_instant(deadline, now) - now
    return math.ceil(delta.total_seconds() / _SECONDS_PER_DAY)


def deadline_label(goal: SavingsGoal, now: datetime) -> str:
    days = days_remaining(goal, now)
    if days is None:
        return "No deadline"
    if days < 0:
        return f"{abs(days)} days overdue"
    return f"{days} days left"
