import uuid
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Transaction(db.Model):
    __tablename__ = 'transactions'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    type = db.Column(db.String(10), nullable=False, index=True)  # 'expense' or 'income'
    amount = db.Column(db.Float, nullable=False)
    category = db.Column(db.String(80), nullable=False, default='Uncategorized')
    method = db.Column(db.String(40), nullable=False, default='Cash')
    note = db.Column(db.Text, nullable=False, default='')
    date = db.Column(db.Date, nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'type': self.type,
            'amount': float(self.amount),
            'category': self.category,
            'method': self.method or 'Cash',
            'note': self.note or '',
            'date': self.date.isoformat(),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
