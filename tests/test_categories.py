from budget_core.categories import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    active_categories,
    add_custom_category,
    category_color,
    currency_symbol,
    default_category_budgets,
    is_known_category,
    remove_custom_category,
)
from budget_core.domain import EXPENSE, INCOME, UserSettings


def test_currency_symbol_falls_back_to_dollar():
    assert currency_symbol("EUR") == "€"
    assert currency_symbol("INR") == "₹"
    assert currency_symbol("XYZ") == "$"
    assert currency_symbol("") == "$"


def test_custom_categories_are_appended():
    settings = add_custom_category(UserSettings(), EXPENSE, "Pets", "#123456", budget=80)
    settings = add_custom_category(settings, INCOME, "Gifts", "#654321")

    assert active_categories(settings, EXPENSE) == EXPENSE_CATEGORIES + ("Pets",)
    assert active_categories(settings, INCOME) == INCOME_CATEGORIES + ("Gifts",)
    assert settings.custom_income_categories[0].budget is None
    assert is_known_category(settings, EXPENSE, "Pets")
    assert not is_known_category(settings, INCOME, "Pets")


def test_duplicate_or_blank_names_are_ignored():
    settings = UserSettings()
    assert add_custom_category(settings, EXPENSE, "Shopping") == settings
    assert add_custom_category(settings, EXPENSE, "   ") == settings

    once = add_custom_category(settings, EXPENSE, "Pets")
    assert add_custom_category(once, EXPENSE, "Pets") == once


def test_builtin_categories_cannot_be_removed():
    settings = add_custom_category(UserSettings(), EXPENSE, "Pets")
    assert remove_custom_category(settings, EXPENSE, "Shopping") == settings
    assert remove_custom_category(settings, EXPENSE, "Pets").custom_expense_categories == ()


def test_category_colors():
    settings = add_custom_category(UserSettings(), EXPENSE, "Pets", "#123456")
    assert category_color("Food & Dining") == "#FF6B6B"
    assert category_color("Pets", settings) == "#123456"
    assert category_color("Unknown") == "#85C1E2"


def test_default_category_budgets():
    budgets = default_category_budgets()
    assert list(budgets) == list(EXPENSE_CATEGORIES)
    assert budgets["Food & Dining"] == 500
    assert budgets["Education"] == 150

    settings = add_custom_category(UserSettings(), EXPENSE, "Pets", budget=80)
    assert default_category_budgets(settings)["Pets"] == 80
