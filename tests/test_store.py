from datetime import date

import pytest

from errors import NotFoundError, ValidationError
from store import TransactionStore


@pytest.fixture
def store(app):
    with app.app_context():
        yield TransactionStore()


def test_create_assigns_id_and_timestamp(store):
    tx = store.create('income', '8500', 'Salary', '2024-01-05')
    assert tx.id
    assert tx.created_at is not None
    assert tx.amount == 8500.0
    assert tx.date == date(2024, 1, 5)
    assert tx.note == ''


def test_rejected_create_stores_nothing(store):
    with pytest.raises(ValidationError):
        store.create('expense', 0, 'Food', '2024-01-05')
    with pytest.raises(ValidationError):
        store.create('refund', 10, 'Food', '2024-01-05')
    assert store.list() == []


def test_delete_and_not_found(store):
    a = store.create('expense', 5, 'Bus', '2024-01-05')
    b = store.create('expense', 7, 'Bus', '2024-01-06')
    store.delete(a.id)
    assert [t.id for t in store.list()] == [b.id]
    with pytest.raises(NotFoundError):
        store.delete(a.id)
    assert [t.id for t in store.list()] == [b.id]


def test_import_dedupes_within_batch(store):
    record = {'id': 'same', 'type': 'expense', 'amount': 3, 'category': 'Tea', 'date': '2024-01-01'}
    result = store.import_many([record, dict(record)])
    assert result == {'inserted': 1, 'skipped': 1, 'total': 2}


def test_import_rejects_bad_timestamp(store):
    with pytest.raises(ValidationError):
        store.import_many([{'type': 'expense', 'amount': 3, 'category': 'Tea',
                            'date': '2024-01-01', 'created_at': 'yesterday'}])
    assert store.list() == []


def test_stats_on_empty_table(store):
    assert store.stats() == {'total_income': 0.0, 'total_expense': 0.0, 'balance': 0.0, 'count': 0}
    assert store.category_breakdown() == []


def test_method_kept_on_create_and_import(store):
    tx = store.create('expense', 9, 'Fuel', '2024-01-05', method=' Card ')
    assert tx.method == 'Card'
    store.import_many([
        {'id': 'm1', 'type': 'expense', 'amount': 3, 'category': 'Tea', 'date': '2024-01-06', 'method': 'Transfer'},
        {'id': 'm2', 'type': 'expense', 'amount': 4, 'category': 'Tea', 'date': '2024-01-07'},
    ])
    assert store.get('m1').to_dict()['method'] == 'Transfer'
    assert store.get('m2').to_dict()['method'] == 'Cash'


def test_category_breakdown_returns_plain_rows(store):
    store.create('expense', 5, 'Bus', '2024-01-05')
    store.create('expense', 7, 'Food', '2024-01-06')
    store.create('expense', 1, 'Bus', '2024-01-07')
    assert [row['category'] for row in store.category_breakdown()] == ['Food', 'Bus']
