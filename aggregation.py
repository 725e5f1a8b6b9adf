"""Pure aggregation over an in-memory list of transactions.

Nothing here reads a clock or global state: callers pass ``today`` and the
active `Filters`, so every figure on the dashboard is reproducible from the
list alone. Functions accept anything with ``type``, ``amount``,
``category``, ``date`` and ``note`` attributes (client records or ORM rows).
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from fsm import BudgetFSM
from utils import days_in_month, format_currency, last_n_days, month_add

LINE_WINDOW_DAYS = 30


def _iso(value) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value or '')[:10]


@dataclass(frozen=True)
class Filters:
    type: str = 'all'
    category: str = 'all'
    start: Optional[str] = None
    end: Optional[str] = None
    search: str = ''

    def matches(self, tx) -> bool:
        day = _iso(tx.date)
        if self.type != 'all' and tx.type != self.type:
            return False
        if self.category != 'all' and tx.category != self.category:
            return False
        if self.start and day < self.start:
            return False
        if self.end and day > self.end:
            return False
        term = self.search.strip().lower()
        if term and term not in f"{tx.category} {tx.note or ''}".lower():
            return False
        return True


@dataclass(frozen=True)
class Totals:
    income: float
    expense: float

    @property
    def balance(self) -> float:
        return self.income - self.expense


@dataclass(frozen=True)
class BudgetStatus:
    label: str
    message: str
    amount: float
    progress: float

    @property
    def is_over(self) -> bool:
        return self.label == 'Over'


def filter_transactions(transactions, filters: Optional[Filters] = None) -> list:
    if filters is None:
        return list(transactions)
    return [t for t in transactions if filters.matches(t)]


def expenses(transactions) -> list:
    return [t for t in transactions if t.type == 'expense']


def compute_totals(transactions) -> Totals:
    income = sum(t.amount for t in transactions if t.type == 'income')
    expense = sum(t.amount for t in transactions if t.type == 'expense')
    return Totals(income=float(income), expense=float(expense))


def category_rollup(transactions) -> dict[str, float]:
    """Expense total per category, in order of each category's first appearance."""
    totals: dict[str, float] = {}
    for t in expenses(transactions):
        totals[t.category] = totals.get(t.category, 0.0) + float(t.amount)
    return totals


def top_categories(rollup: dict[str, float]) -> list[tuple[str, float]]:
    return sorted(rollup.items(), key=lambda item: item[1], reverse=True)


def categories(transactions) -> list[str]:
    return sorted({t.category for t in transactions})


def daily_expense(transactions, days) -> list[float]:
    by_day: dict[str, float] = {}
    for t in expenses(transactions):
        key = _iso(t.date)
        by_day[key] = by_day.get(key, 0.0) + float(t.amount)
    return [by_day.get(_iso(d), 0.0) for d in days]


def trailing_series(transactions, today: date, days: int = LINE_WINDOW_DAYS) -> list[tuple[date, float]]:
    window = last_n_days(today, days)
    return list(zip(window, daily_expense(transactions, window)))


def month_series(transactions, today: date) -> list[tuple[date, float]]:
    month = days_in_month(today)
    return list(zip(month, daily_expense(transactions, month)))


def month_expense_total(transactions, today: date, offset: int = 0) -> float:
    year, month = month_add(today.year, today.month, -offset)
    prefix = f"{year:04d}-{month:02d}-"
    return float(sum(t.amount for t in expenses(transactions) if _iso(t.date).startswith(prefix)))


def month_over_month(transactions, today: date) -> Optional[float]:
    """Percent change of this month's spend vs last month's; None without a baseline."""
    previous = month_expense_total(transactions, today, 1)
    if previous <= 0:
        return None
    current = month_expense_total(transactions, today, 0)
    return (current - previous) / previous * 100


def average_daily_spend(transactions) -> float:
    spent = expenses(transactions)
    active_days = len({_iso(t.date) for t in spent})
    return float(sum(t.amount for t in spent)) / max(1, active_days)


def largest_expense(transactions):
    spent = expenses(transactions)
    if not spent:
        return None
    return max(spent, key=lambda t: t.amount)


def insights(transactions, today: date, symbol: str = '$') -> list[str]:
    if not transactions:
        return ["Add some transactions to see insights."]
    lines = []
    ranked = top_categories(category_rollup(transactions))
    if ranked:
        name, value = ranked[0]
        lines.append(f"Top spending: {name} ({format_currency(value, symbol)}).")
    lines.append(f"Avg spend per day: {format_currency(average_daily_spend(transactions), symbol)}.")
    change = month_over_month(transactions, today)
    if change is not None:
        arrow = "↑" if change >= 0 else "↓"
        lines.append(f"You spent {arrow}{abs(change):.1f}% vs last month.")
    biggest = largest_expense(transactions)
    if biggest is not None:
        lines.append(f"Largest transaction: {format_currency(biggest.amount, symbol)} on {biggest.category}.")
    return lines


def budget_status(budget_total: float, spent: float, symbol: str = '$') -> BudgetStatus:
    fsm = BudgetFSM(budget_total, spent)
    return BudgetStatus(
        label=fsm.get_state(),
        message=fsm.get_message(symbol),
        amount=fsm.difference(),
        progress=fsm.progress(),
    )


def category_summary(transactions, category: str = 'all') -> tuple[float, int]:
    """Total amount and count for one category ('all' for every transaction)."""
    picked = [t for t in transactions if category == 'all' or t.category == category]
    return float(sum(t.amount for t in picked)), len(picked)


def monthly_flow(transactions, today: date, months: int = 7) -> list[dict]:
    """Income and expense per calendar month for the last `months` months, oldest first."""
    flow = []
    buckets = {}
    for i in range(months - 1, -1, -1):
        year, month = month_add(today.year, today.month, -i)
        row = {
            'month': date(year, month, 1).strftime('%b'),
            'year': year,
            'income': 0.0,
            'expense': 0.0,
        }
        buckets[f"{year:04d}-{month:02d}"] = row
        flow.append(row)
    for t in transactions:
        row = buckets.get(_iso(t.date)[:7])
        if row is not None and t.type in ('income', 'expense'):
            row[t.type] += float(t.amount)
    return flow
