"""Built-in categories, currencies and the user's custom category lists."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from budget_core.domain import EXPENSE, INCOME, CustomCategory, UserSettings

logger = logging.getLogger(__name__)

EXPENSE_CATEGORIES = (
    "Food & Dining",
    "Transportation",
    "Entertainment",
    "Bills & Utilities",
    "Shopping",
    "Healthcare",
    "Education",
    "Other",
)

INCOME_CATEGORIES = (
    "Salary",
    "Freelance",
    "Investment",
    "Other",
)

# name -> (color, default monthly budget)
CATEGORY_CONFIG: dict[str, tuple[str, float]] = {
    "Food & Dining": ("#FF6B6B", 500),
    "Transportation": ("#4ECDC4", 300),
    "Entertainment": ("#45B7D1", 200),
    "Bills & Utilities": ("#FFA07A", 400),
    "Shopping": ("#98D8C8", 300),
    "Healthcare": ("#F7DC6F", 200),
    "Education": ("#BB8FCE", 150),
    "Other": ("#85C1E2", 100),
    "Salary": ("#4ade80", 0),
    "Freelance": ("#34d399", 0),
    "Investment": ("#22c55e", 0),
}

FALLBACK_COLOR = "#85C1E2"
FALLBACK_CATEGORY_BUDGET = 200.0

CURRENCIES: dict[str, tuple[str, str]] = {
    "USD": ("$", "US Dollar"),
    "EUR": ("€", "Euro"),
    "GBP": ("£", "British Pound"),
    "JPY": ("¥", "Japanese Yen"),
    "CAD": ("C$", "Canadian Dollar"),
    "AUD": ("A$", "Australian Dollar"),
    "CHF": ("Fr", "Swiss Franc"),
    "CNY": ("¥", "Chinese Yuan"),
    "INR": ("₹", "Indian Rupee"),
    "NGN": ("₦", "Nigerian Naira"),
    "ZAR": ("R", "South African Rand"),
    "BRL": ("R$", "Brazilian Real"),
    "MXN": ("$", "Mexican Peso"),
    "KRW": ("₩", "South Korean Won"),
    "SGD": ("S$", "Singapore Dollar"),
    "AED": ("د.إ", "UAE Dirham"),
}

DEFAULT_SYMBOL = "$"


def currency_symbol(code: str) -> str:
    entry = CURRENCIES.get(code)
    return entry[0] if entry else DEFAULT_SYMBOL


def default_categories(kind: str) -> tuple[str, ...]:
    return INCOME_CATEGORIES if kind == INCOME else EXPENSE_CATEGORIES


def _custom(settings: UserSettings, kind: str) -> tuple[CustomCategory, ...]:
    if kind == INCOME:
        return settings.custom_income_categories
    return settings.custom_expense_categories


def active_categories(settings: UserSettings, kind: str) -> tuple[str, ...]:
    """Built-in categories for ``kind`` followed by the user's custom ones."""
    return default_categories(kind) + tuple(c.name for c in _custom(settings, kind))


def category_color(name: str, settings: Optional[UserSettings] = None) -> str:
    if name in CATEGORY_CONFIG:
        return CATEGORY_CONFIG[name][0]
    if settings is not None:
        for c in settings.custom_expense_categories + settings.custom_income_categories:
            if c.name == name:
                return c.color
    return FALLBACK_COLOR


def default_category_budgets(settings: Optional[UserSettings] = None) -> dict[str, float]:
    """Initial per-category limits: configured defaults, 200 where none is configured."""
    budgets = {
        cat: float(CATEGORY_CONFIG.get(cat, (FALLBACK_COLOR, 0))[1]) or FALLBACK_CATEGORY_BUDGET
        for cat in EXPENSE_CATEGORIES
    }
    if settings is not None:
        for c in settings.custom_expense_categories:
            if c.budget is not None:
                budgets[c.name] = float(c.budget)
    return budgets


def add_custom_category(
    settings: UserSettings,
    kind: str,
    name: str,
    color: str = FALLBACK_COLOR,
    budget: Optional[float] = None,
) -> UserSettings:
    """Append a custom category; names already active for ``kind`` are ignored."""
    name = name.strip()
    if not name or name in active_categories(settings, kind):
        logger.debug("custom %s category %r not added", kind, name)
        return settings
    if kind == INCOME:
        entry = CustomCategory(name=name, color=color)
        return replace(settings, custom_income_categories=settings.custom_income_categories + (entry,))
    entry = CustomCategory(name=name, color=color, budget=budget)
    return replace(settings, custom_expense_categories=settings.custom_expense_categories + (entry,))


def remove_custom_category(settings: UserSettings, kind: str, name: str) -> UserSettings:
    """Drop a custom category. Built-in categories can't be removed."""
    if name in default_categories(kind):
        logger.debug("refusing to remove built-in %s category %r", kind, name)
        return settings
    kept = tuple(c for c in _custom(settings, kind) if c.name != name)
    if kind == INCOME:
        return replace(settings, custom_income_categories=kept)
    return replace(settings, custom_expense_categories=kept)


def is_known_category(settings: UserSettings, kind: str, name: str) -> bool:
    return kind in (INCOME, EXPENSE) and name in active_categories(settings, kind)
