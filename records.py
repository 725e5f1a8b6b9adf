"""Typed client-side transaction records.

Payloads coming from the API or the local cache are plain dicts whose fields
may be missing, renamed or mistyped. `normalize_record` is the single place
they become a `TransactionRecord`:

* ``id``        -> ``str(id)``, or a fresh UUID4 when missing
* ``type``      -> ``"income"`` only when exactly that, otherwise ``"expense"``
* ``amount``    -> ``float(amount)``, or ``0.0`` when it does not parse or is negative
* ``category``  -> ``category`` or ``note`` or ``"Uncategorized"``
* ``date``      -> first 10 characters (``YYYY-MM-DD``), or today
* ``note``      -> ``""`` when missing
* ``method``    -> trimmed ``method``, or ``"Cash"``
* ``created_at``-> passed through (``None`` for offline records)
"""
import math
import uuid
from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional

from validation import DEFAULT_METHOD

DEFAULT_CATEGORY = 'Uncategorized'


@dataclass(frozen=True)
class TransactionRecord:
    id: str
    type: str       # "income" | "expense"
    amount: float   # always >= 0; sign comes from type
    category: str
    date: str       # "YYYY-MM-DD"
    note: str = ""
    method: str = DEFAULT_METHOD
    created_at: Optional[str] = None

    @property
    def is_expense(self) -> bool:
        return self.type == 'expense'

    @property
    def is_income(self) -> bool:
        return self.type == 'income'

    def to_dict(self) -> dict:
        return asdict(self)


def _to_amount(value) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def normalize_record(raw: dict, today: Optional[date] = None) -> TransactionRecord:
    today = today or date.today()
    raw_date = str(raw.get('date') or '')[:10]
    note = str(raw.get('note') or '')
    category = str(raw.get('category') or '').strip() or note.strip() or DEFAULT_CATEGORY
    created_at = raw.get('created_at')
    return TransactionRecord(
        id=str(raw.get('id') or uuid.uuid4()),
        type='income' if raw.get('type') == 'income' else 'expense',
        amount=_to_amount(raw.get('amount')),
        category=category,
        date=raw_date or today.isoformat(),
        note=note,
        method=str(raw.get('method') or '').strip() or DEFAULT_METHOD,
        created_at=str(created_at) if created_at else None,
    )


def new_local_record(type, amount, category, date, note="", method=DEFAULT_METHOD) -> TransactionRecord:
    """A record created while the server is unreachable."""
    return TransactionRecord(
        id=str(uuid.uuid4()),
        type=type,
        amount=float(amount),
        category=category,
        date=date,
        note=note or "",
        method=method or DEFAULT_METHOD,
    )
