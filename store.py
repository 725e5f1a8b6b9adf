"""Server-side transaction store on top of Flask-SQLAlchemy.

Every write validates its payload first and raises `ValidationError` before
touching the session. SQLAlchemy failures are rolled back and surface as
`StorageError`, so routes only deal with the error taxonomy in `errors.py`.
"""
from __future__ import annotations

import logging

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError

from errors import NotFoundError, StorageError, ValidationError
from models import Transaction, db
from validation import parse_timestamp, validate_payload

logger = logging.getLogger(__name__)


class TransactionStore:
    """CRUD over the `transactions` table. Must run inside an app context."""

    def list(self) -> list[Transaction]:
        try:
            return (
                Transaction.query
                .order_by(Transaction.date.desc(), Transaction.created_at.desc())
                .all()
            )
        except SQLAlchemyError as exc:
            raise self._storage_error("Failed to fetch transactions", exc)

    def get(self, tx_id: str) -> Transaction:
        try:
            tx = db.session.get(Transaction, tx_id)
        except SQLAlchemyError as exc:
            raise self._storage_error("Failed to fetch transaction", exc)
        if tx is None:
            raise NotFoundError("transaction not found")
        return tx

    def create(self, type, amount, category, date, note=None, method=None) -> Transaction:
        values = validate_payload({
            'type': type, 'amount': amount, 'category': category, 'date': date,
            'note': note, 'method': method,
        })
        tx = Transaction(**values)
        try:
            db.session.add(tx)
            db.session.commit()
        except SQLAlchemyError as exc:
            raise self._storage_error("Failed to create transaction", exc)
        logger.info("created %s %s %.2f on %s", tx.type, tx.id, tx.amount, tx.date)
        return tx

    def delete(self, tx_id: str) -> None:
        tx = self.get(tx_id)
        try:
            db.session.delete(tx)
            db.session.commit()
        except SQLAlchemyError as exc:
            raise self._storage_error("Failed to delete transaction", exc)
        logger.info("deleted transaction %s", tx_id)

    def import_many(self, records) -> dict:
        """Insert records keeping their ids; ids already stored are skipped.

        The batch is validated up front and committed at once, so one bad
        record rejects the whole import.
        """
        if not records:
            raise ValidationError("no transactions provided")
        rows = []
        for raw in records:
            values = validate_payload(raw)
            if raw.get('id'):
                values['id'] = str(raw['id'])
            created_at = parse_timestamp(raw.get('created_at'))
            if created_at is not None:
                values['created_at'] = created_at
            rows.append(values)

        try:
            wanted = [r['id'] for r in rows if 'id' in r]
            existing = set()
            if wanted:
                existing = {
                    tx_id for (tx_id,) in
                    db.session.query(Transaction.id).filter(Transaction.id.in_(wanted))
                }
            inserted = 0
            for values in rows:
                tx_id = values.get('id')
                if tx_id is not None and tx_id in existing:
                    continue
                tx = Transaction(**values)
                db.session.add(tx)
                if tx_id is not None:
                    existing.add(tx_id)
                inserted += 1
            db.session.commit()
        except SQLAlchemyError as exc:
            raise self._storage_error("import failed", exc)

        logger.info("imported %d of %d transactions", inserted, len(rows))
        return {'inserted': inserted, 'skipped': len(rows) - inserted, 'total': len(rows)}

    def stats(self) -> dict:
        income = func.coalesce(func.sum(case((Transaction.type == 'income', Transaction.amount), else_=0.0)), 0.0)
        expense = func.coalesce(func.sum(case((Transaction.type == 'expense', Transaction.amount), else_=0.0)), 0.0)
        try:
            total_income, total_expense, count = db.session.query(
                income, expense, func.count(Transaction.id)
            ).one()
        except SQLAlchemyError as exc:
            raise self._storage_error("failed to fetch stats", exc)
        return {
            'total_income': float(total_income),
            'total_expense': float(total_expense),
            'balance': float(total_income) - float(total_expense),
            'count': int(count),
        }

    def category_breakdown(self) -> list[dict]:
        total = func.sum(Transaction.amount)
        try:
            rows = (
                db.session.query(Transaction.category, total)
                .filter(Transaction.type == 'expense')
                .group_by(Transaction.category)
                .order_by(total.desc())
                .all()
            )
        except SQLAlchemyError as exc:
            raise self._storage_error("failed to fetch category breakdown", exc)
        return [{'category': category, 'total': float(value)} for category, value in rows]

    @staticmethod
    def _storage_error(message: str, exc: Exception) -> StorageError:
        db.session.rollback()
        logger.error("%s: %s", message, exc)
        return StorageError(message)
