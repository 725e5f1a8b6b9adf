import math
from dataclasses import asdict, dataclass, field

from errors import ValidationError
from local_store import BUDGET_ITEMS_KEY, BUDGET_KEY


@dataclass
class BudgetItem:
    name: str
    amount: float
    paid: bool = False


@dataclass
class Budget:
    total: float = 0.0
    items: list[BudgetItem] = field(default_factory=list)

    @property
    def is_set(self) -> bool:
        return self.total > 0

    def items_total(self) -> float:
        return sum(i.amount for i in self.items)

    def paid_total(self) -> float:
        return sum(i.amount for i in self.items if i.paid)

    def unpaid_total(self) -> float:
        return sum(i.amount for i in self.items if not i.paid)


def _number(value, what: str) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    if isinstance(value, bool):
        raise ValidationError(f"{what} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{what} must be a number")
    if not math.isfinite(number) or number < 0:
        raise ValidationError(f"{what} must be zero or more")
    return number


def _load_total(raw) -> float:
    try:
        return _number(raw, "budget")
    except ValidationError:
        return 0.0


def _load_items(raw) -> list[BudgetItem]:
    items = []
    for entry in raw if isinstance(raw, list) else []:
        if not isinstance(entry, dict) or not entry.get('name'):
            continue
        try:
            amount = _number(entry.get('amount'), "item amount")
        except ValidationError:
            amount = 0.0
        items.append(BudgetItem(str(entry['name']), amount, bool(entry.get('paid'))))
    return items


class BudgetManager:
    """Monthly budget plus an optional checklist of recurring line items.

    Items are informational only: they never change or validate `total`.
    Every edit is written straight back to the local store.
    """

    def __init__(self, store):
        self._store = store
        self.budget = Budget(
            total=_load_total(store.get(BUDGET_KEY, 0)),
            items=_load_items(store.get(BUDGET_ITEMS_KEY, [])),
        )

    def set_total(self, value) -> float:
        self.budget.total = _number(value, "budget")
        self._store.set(BUDGET_KEY, self.budget.total)
        return self.budget.total

    def add_item(self, name: str, amount, paid: bool = False) -> BudgetItem:
        name = (name or '').strip()
        if not name:
            raise ValidationError("item name is required")
        item = BudgetItem(name, _number(amount, "item amount"), paid)
        self.budget.items.append(item)
        self._save_items()
        return item

    def toggle_item(self, index: int) -> BudgetItem:
        item = self._item(index)
        item.paid = not item.paid
        self._save_items()
        return item

    def remove_item(self, index: int) -> BudgetItem:
        item = self._item(index)
        del self.budget.items[index]
        self._save_items()
        return item

    def _item(self, index: int) -> BudgetItem:
        if not 0 <= index < len(self.budget.items):
            raise ValidationError(f"no budget item #{index + 1}")
        return self.budget.items[index]

    def _save_items(self) -> None:
        self._store.set(BUDGET_ITEMS_KEY, [asdict(i) for i in self.budget.items])
