import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Mapping, Sequence, TypeVar

from budget_core.categories import active_categories
from budget_core.domain import EXPENSE, KINDS, RECURRING_FREQUENCIES, SavingsGoal, Transaction, UserSettings
from budget_core.goals import clamp
from budget_core.ranges import parse_date

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def _error(code: str, message: str, **extra: Any) -> Left:
    return Left({"error": code, "message": message, **extra})


def find_category(settings: UserSettings, kind: str, name: str) -> Maybe[str]:
    if name in active_categories(settings, kind):
        return Some(name)
    return Nothing()


def parse_amount(raw: Any, field: str = "amount", allow_zero: bool = False) -> Either[dict, float]:
    """Parse a user-entered amount; rejects blanks, non-numbers and negatives."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return _error("amount_missing", "Please enter a valid amount", field=field)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return _error("amount_invalid", "Please enter a valid amount", field=field, value=raw)
    if value != value or value in (float("inf"), float("-inf")):
        return _error("amount_invalid", "Please enter a valid amount", field=field, value=raw)
    if value < 0 or (value == 0 and not allow_zero):
        return _error("amount_not_positive", "Please enter a valid amount", field=field, value=value)
    return Right(value)


def validate_email(email: str) -> Either[dict, str]:
    email = (email or "").strip()
    if EMAIL_RE.match(email):
        return Right(email)
    return _error("email_invalid", "Please enter a valid email address", value=email)


def validate_transaction_form(
    form: Mapping[str, Any],
    settings: UserSettings,
    tx_id: str,
) -> Either[dict, Transaction]:
    """Turn a raw form mapping into a Transaction, or the first problem found.

    Expected keys: ``type``, ``amount``, ``category``, ``description``,
    ``date``, optionally ``receipt`` and ``recurringFrequency``.
    """
    kind = form.get("type", EXPENSE)
    if kind not in KINDS:
        return _error("kind_invalid", f"Unknown transaction type {kind!r}", value=kind)

    amount = parse_amount(form.get("amount"))
    if amount.is_left():
        return amount

    description = str(form.get("description") or "").strip()
    if not description:
        return _error("description_missing", "Please enter a description", field="description")

    raw_date = form.get("date")
    if not raw_date:
        return _error("date_missing", "Please select a date", field="date")
    day = parse_date(raw_date)
    if day is None:
        return _error("date_invalid", "Please select a date", field="date", value=raw_date)

    category = form.get("category", "")
    if not find_category(settings, kind, category).is_some():
        return _error(
            "category_not_found",
            f"Category {category!r} is not available for {kind}",
            category=category,
            kind=kind,
        )

    recurring = form.get("recurringFrequency") if form.get("isRecurring") else None
    if recurring is not None and recurring not in RECURRING_FREQUENCIES:
        return _error("recurring_invalid", f"Unknown frequency {recurring!r}", value=recurring)

    return Right(Transaction(
        id=tx_id,
        kind=kind,
        amount=amount.get_or_else(0.0),
        category=category,
        description=description,
        occurred_on=day.isoformat(),
        receipt=form.get("receipt") or None,
        recurring=recurring,
    ))


def validate_goal_form(form: Mapping[str, Any], goal_id: str) -> Either[dict, SavingsGoal]:
    name = str(form.get("name") or "").strip()
    if not name or not form.get("targetAmount"):
        return _error("goal_incomplete", "Please fill in goal name and target amount")

    target = parse_amount(form.get("targetAmount"), field="targetAmount")
    if target.is_left():
        return target
    target_value = target.get_or_else(0.0)

    raw_current = form.get("currentAmount")
    current = parse_amount(raw_current or "0", field="currentAmount", allow_zero=True)
    if current.is_left():
        return current

    deadline = parse_date(form.get("deadline"))
    if deadline is None:
        return _error("deadline_invalid", "Please select a deadline", field="deadline")

    return Right(SavingsGoal(
        id=goal_id,
        name=name,
        target_amount=target_value,
        current_amount=clamp(current.get_or_else(0.0), 0, target_value),
        deadline=deadline.isoformat(),
        color=form.get("color") or "#4ECDC4",
    ))


def validate_category_budgets(raw: Mapping[str, Any], categories: Sequence[str]) -> Either[dict, dict]:
    """Parse per-category limit inputs; blank means 0 (unset)."""
    parsed = {}
    for cat in categories:
        result = parse_amount(raw.get(cat) or "0", field=cat, allow_zero=True)
        if result.is_left():
            return _error(
                "category_budget_invalid",
                "Please enter valid amounts for all categories",
                category=cat,
            )
        parsed[cat] = result.get_or_else(0.0)
    return Right(parsed)


def pipe(x, *funcs):
    """Pipe a value through a series of functions.

    pipe(x, f, g, h) == h(g(f(x)))
    """
    res = x
    for f in funcs:
        res = f(res)
    return res
