"""Field checks shared by the API and the client.

The client runs the same checks before any local mutation so a bad form
is rejected up front, whether or not the server is reachable.
"""
import math
from datetime import date, datetime

from errors import ValidationError

TRANSACTION_TYPES = ('income', 'expense')
DEFAULT_METHOD = 'Cash'


def parse_amount(value) -> float:
    if isinstance(value, bool) or value is None:
        raise ValidationError("amount must be a positive number")
    try:
        amount = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise ValidationError("amount must be a positive number")
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("amount must be a positive number")
    return amount


def parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or '').strip()
    if not text:
        raise ValidationError("category and date are required")
    try:
        # "2024-01-05T10:00:00Z" keeps its calendar date.
        return date.fromisoformat(text[:10])
    except ValueError:
        raise ValidationError(f"date must be an ISO date (YYYY-MM-DD), got {text!r}")


def parse_timestamp(value):
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        raise ValidationError(f"created_at must be an ISO timestamp, got {value!r}")


def validate_payload(payload) -> dict:
    """Check a create request body and return the cleaned values."""
    if not isinstance(payload, dict):
        raise ValidationError("request body must be a JSON object")
    tx_type = str(payload.get('type') or '').strip()
    if tx_type not in TRANSACTION_TYPES:
        raise ValidationError("type must be income or expense")
    amount = parse_amount(payload.get('amount'))
    category = str(payload.get('category') or '').strip()
    if not category:
        raise ValidationError("category and date are required")
    tx_date = parse_date(payload.get('date'))
    note = str(payload.get('note') or '').strip()
    method = str(payload.get('method') or '').strip() or DEFAULT_METHOD
    return {
        'type': tx_type,
        'amount': amount,
        'category': category,
        'method': method,
        'date': tx_date,
        'note': note,
    }
