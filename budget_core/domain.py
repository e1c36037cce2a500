from dataclasses import dataclass, field
from typing import Optional

INCOME = "income"
EXPENSE = "expense"
KINDS = (INCOME, EXPENSE)

RECURRING_FREQUENCIES = ("weekly", "monthly", "yearly")


@dataclass(frozen=True)
class Transaction:
    id: str
    kind: str             # "income" or "expense"
    amount: float         # always >= 0, polarity lives in kind
    category: str
    description: str
    occurred_on: str      # ISO date, e.g. "2025-01-25"
    receipt: Optional[str] = None     # receipt image URL
    recurring: Optional[str] = None   # "weekly" | "monthly" | "yearly"


@dataclass(frozen=True)
class SavingsGoal:
    id: str
    name: str
    target_amount: float
    current_amount: float
    deadline: str         # ISO date
    color: str = "#4ECDC4"


# Global monthly limit plus per-category limits; 0 or missing means "unset"
@dataclass(frozen=True)
class BudgetConfig:
    limit: float = 0.0
    category_limits: tuple[tuple[str, float], ...] = ()

    def limit_for(self, category: str) -> float:
        return dict(self.category_limits).get(category, 0.0)

    def limits(self) -> dict[str, float]:
        return dict(self.category_limits)


@dataclass(frozen=True)
class CustomCategory:
    name: str
    color: str
    budget: Optional[float] = None   # only meaningful for expense categories


@dataclass(frozen=True)
class UserSettings:
    currency: str = "USD"
    email_reports: bool = False
    report_email: str = ""
    custom_expense_categories: tuple[CustomCategory, ...] = ()
    custom_income_categories: tuple[CustomCategory, ...] = ()


@dataclass(frozen=True)
class Snapshot:
    transactions: tuple[Transaction, ...] = ()
    goals: tuple[SavingsGoal, ...] = ()
    budget: BudgetConfig = field(default_factory=BudgetConfig)
    settings: UserSettings = field(default_factory=UserSettings)
