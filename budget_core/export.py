"""CSV export/import and DataFrame views of transactions."""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Iterable

import pandas as pd

from budget_core.domain import EXPENSE, KINDS, Transaction

logger = logging.getLogger(__name__)

CSV_HEADERS = ("Date", "Type", "Category", "Description", "Amount")


def format_amount(amount: float) -> str:
    """3000.0 -> "3000", 45.5 -> "45.5"."""
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def export_csv(trans: Iterable[Transaction]) -> str:
    """CSV text for download.

    Descriptions are wrapped in double quotes as-is; embedded quotes or
    commas are not escaped.
    """
    lines = [",".join(CSV_HEADERS)]
    for t in trans:
        lines.append(",".join([t.occurred_on, t.kind, t.category, f'"{t.description}"', format_amount(t.amount)]))
    return "\n".join(lines)


def export_filename(today: date) -> str:
    return f"budget-export-{today.isoformat()}.csv"


def split_row(line: str) -> list[str] | None:
    """Split one exported data line into its five columns.

    The description may hold unescaped quotes and commas, so only the three
    leading columns and the trailing amount are split on commas.
    """
    head = line.split(",", 3)
    if len(head) < 4:
        return None
    rest = head[3].rsplit(",", 1)
    if len(rest) < 2:
        return None
    description = rest[0].strip()
    if len(description) >= 2 and description[0] == description[-1] == '"':
        description = description[1:-1]
    return [head[0].strip(), head[1].strip(), head[2].strip(), description, rest[1].strip()]


def import_csv(text: str, id_prefix: str = "import") -> tuple[Transaction, ...]:
    """Read a file produced by ``export_csv`` back into transactions.

    Rows with an unknown type or an unreadable amount are skipped.
    """
    lines = [line for line in text.lstrip("\ufeff").splitlines() if line.strip()]
    if not lines:
        return ()
    header = tuple(h.strip() for h in lines[0].split(","))
    if header != CSV_HEADERS:
        logger.warning("csv import expects columns %s, got %s", ",".join(CSV_HEADERS), ",".join(header))
        return ()

    rows = []
    for lineno, line in enumerate(lines[1:], start=2):
        fields = split_row(line)
        if fields is None:
            logger.warning("skipping csv line %d: expected %d columns", lineno, len(CSV_HEADERS))
            continue
        rows.append(fields)

    df = pd.DataFrame(rows, columns=list(CSV_HEADERS))
    df["Amount"] = pd.to_numeric(df["Amount"], errors="coerce")
    out = []
    for pos, row in enumerate(df.itertuples(index=False)):
        kind = row.Type.lower()
        amount = row.Amount
        if kind not in KINDS or pd.isna(amount) or not math.isfinite(amount) or amount < 0:
            logger.warning("skipping csv row %d: type %r, amount %r", pos, row.Type, amount)
            continue
        out.append(Transaction(
            id=f"{id_prefix}-{pos}",
            kind=kind,
            amount=float(amount),
            category=row.Category,
            description=row.Description,
            occurred_on=row.Date,
        ))
    return tuple(out)


def transactions_frame(trans: Iterable[Transaction]) -> pd.DataFrame:
    """Transactions as a DataFrame with a parsed ``date`` column.

    Malformed dates become NaT rather than raising.
    """
    rows = [
        {
            "id": t.id,
            "date": t.occurred_on,
            "type": t.kind,
            "category": t.category,
            "description": t.description,
            "amount": t.amount,
            "signed_amount": -t.amount if t.kind == EXPENSE else t.amount,
            "recurring": t.recurring or "",
            "receipt": t.receipt or "",
        }
        for t in trans
    ]
    df = pd.DataFrame(rows, columns=[
        "id", "date", "type", "category", "description", "amount", "signed_amount", "recurring", "receipt",
    ])
    df["date"] = pd.to_datetime(df["date"], errors="coerce", format="%Y-%m-%d")
    return df
