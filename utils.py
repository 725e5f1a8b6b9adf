import calendar
from datetime import date, timedelta

COLORS = [
    "#4f8bff",
    "#2dd4bf",
    "#f59e0b",
    "#c084fc",
    "#fb7185",
    "#34d399",
    "#a78bfa",
    "#22c55e",
    "#38bdf8",
]


def format_currency(amount: float, symbol: str = "$") -> str:
    """Format a float as currency string, e.g. '$1,234.56'."""
    return f"{symbol}{amount:,.2f}"


def format_signed(amount: float, symbol: str = "$") -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{symbol}{abs(amount):,.2f}"


def month_add(year: int, month: int, delta_months: int) -> tuple[int, int]:
    """Add delta months to a (year, month) pair."""
    idx = year * 12 + (month - 1) + delta_months
    return idx // 12, (idx % 12) + 1


def days_in_month(today: date, offset: int = 0) -> list[date]:
    """Every calendar day of the month `offset` months before `today`'s."""
    year, month = month_add(today.year, today.month, -offset)
    last = calendar.monthrange(year, month)[1]
    return [date(year, month, day) for day in range(1, last + 1)]


def last_n_days(today: date, n: int) -> list[date]:
    """The trailing window of `n` days, oldest first, ending on `today`."""
    return [today - timedelta(days=i) for i in range(n - 1, -1, -1)]
