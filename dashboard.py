"""Client controller: owns the application state and every user action.

`Dashboard` mirrors the browser client. It renders from the local cache
first, refreshes from the API when it can, and applies every add/delete
locally even when the server round-trip fails, persisting the cache after
each mutation.
"""
import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

import aggregation
from aggregation import BudgetStatus, Filters, Totals
from budget import Budget, BudgetManager
from charts import BarChart, DonutChart, LineChart
from errors import NotFoundError, StorageError, TrackerError, ValidationError
from local_store import THEME_KEY, TRANSACTIONS_KEY
from records import DEFAULT_CATEGORY, TransactionRecord, new_local_record, normalize_record
from validation import validate_payload

logger = logging.getLogger(__name__)

THEMES = ('light', 'dark')


@dataclass
class AppState:
    transactions: list[TransactionRecord] = field(default_factory=list)
    filters: Filters = field(default_factory=Filters)
    theme: str = 'light'


@dataclass(frozen=True)
class MutationResult:
    record: Optional[TransactionRecord]
    remote: bool
    warning: Optional[str] = None


@dataclass
class DashboardView:
    transactions: list[TransactionRecord]
    totals: Totals
    rollup: dict[str, float]
    insights: list[str]
    budget: Budget
    budget_status: BudgetStatus
    categories: list[str]
    donut: DonutChart
    line: LineChart
    bar: BarChart

    @property
    def top_category(self) -> Optional[tuple[str, float]]:
        ranked = aggregation.top_categories(self.rollup)
        return ranked[0] if ranked else None


class Dashboard:
    def __init__(self, api, store, symbol: str = '$', today=date.today):
        self.api = api
        self.store = store
        self.symbol = symbol
        self._today = today
        self.budget = BudgetManager(store)
        self.state = AppState(
            transactions=self._load_cache(),
            theme=store.get(THEME_KEY, 'light'),
        )

    # ---- cache ----

    def _load_cache(self) -> list[TransactionRecord]:
        raw = self.store.get(TRANSACTIONS_KEY, [])
        if not isinstance(raw, list):
            return []
        today = self._today()
        return [normalize_record(r, today) for r in raw if isinstance(r, dict)]

    def _save(self) -> None:
        self.store.set(TRANSACTIONS_KEY, [t.to_dict() for t in self.state.transactions])

    def refresh(self) -> Optional[str]:
        """Replace the list with the server's; returns a warning when it stays cached."""
        try:
            data = self.api.list_transactions()
            if not isinstance(data, list):
                raise StorageError("transaction list is not a JSON array")
        except TrackerError as exc:
            logger.warning("Using cached data; server unavailable: %s", exc.message)
            return "Server unavailable, showing cached transactions."
        today = self._today()
        self.state.transactions = [normalize_record(r, today) for r in data if isinstance(r, dict)]
        self._save()
        return None

    # ---- mutations ----

    def add_transaction(self, type, amount, category='', date=None, note='', method='') -> MutationResult:
        payload = {
            'type': type,
            'amount': amount,
            'category': (category or '').strip() or DEFAULT_CATEGORY,
            'date': date or self._today().isoformat(),
            'note': (note or '').strip(),
            'method': method,
        }
        values = validate_payload(payload)
        payload['amount'] = values['amount']
        payload['date'] = values['date'].isoformat()
        payload['method'] = values['method']

        try:
            record = normalize_record(self.api.create_transaction(payload), self._today())
            remote = True
        except StorageError as exc:
            logger.warning("Falling back to local add: %s", exc.message)
            record = new_local_record(payload['type'], payload['amount'], payload['category'],
                                      payload['date'], payload['note'], payload['method'])
            remote = False
        self.state.transactions.insert(0, record)
        self._save()
        return MutationResult(record, remote)

    def delete_transaction(self, tx_id: str) -> MutationResult:
        warning = None
        remote = False
        try:
            self.api.delete_transaction(tx_id)
            remote = True
        except NotFoundError:
            warning = f"Transaction {tx_id} was not found on the server."
        except StorageError as exc:
            logger.warning("Server delete failed, removing locally: %s", exc.message)

        removed = next((t for t in self.state.transactions if t.id == tx_id), None)
        self.state.transactions = [t for t in self.state.transactions if t.id != tx_id]
        self._save()
        return MutationResult(removed, remote, warning)

    def push_local(self) -> dict:
        """Upload the cached list; records the server already has are skipped."""
        result = self.api.import_transactions([t.to_dict() for t in self.state.transactions])
        self.refresh()
        return result

    def set_filters(self, **changes) -> Filters:
        self.state.filters = replace(self.state.filters, **changes)
        return self.state.filters

    def set_theme(self, theme: str) -> str:
        if theme not in THEMES:
            raise ValidationError(f"theme must be one of {', '.join(THEMES)}")
        self.state.theme = theme
        self.store.set(THEME_KEY, theme)
        return theme

    # ---- derived view ----

    def view(self, width: int = 480, height: int = 300) -> DashboardView:
        today = self._today()
        filtered = aggregation.filter_transactions(self.state.transactions, self.state.filters)
        totals = aggregation.compute_totals(filtered)
        rollup = aggregation.category_rollup(filtered)
        return DashboardView(
            transactions=filtered,
            totals=totals,
            rollup=rollup,
            insights=aggregation.insights(filtered, today, self.symbol),
            budget=self.budget.budget,
            budget_status=aggregation.budget_status(self.budget.budget.total, totals.expense, self.symbol),
            categories=aggregation.categories(self.state.transactions),
            donut=DonutChart(width, height, rollup, self.symbol),
            line=LineChart(width, height, aggregation.trailing_series(filtered, today), self.symbol),
            bar=BarChart(width, height, aggregation.month_series(filtered, today), self.symbol),
        )

    def category_summary(self, category: str = 'all') -> tuple[float, int]:
        return aggregation.category_summary(self.state.transactions, category)
