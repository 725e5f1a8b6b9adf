from datetime import date

from records import normalize_record

TODAY = date(2024, 2, 15)


def test_server_payload():
    rec = normalize_record({
        'id': 42, 'type': 'income', 'amount': '8500.00', 'category': 'Salary',
        'date': '2024-01-05T00:00:00.000Z', 'note': None, 'created_at': '2024-01-05T08:00:00',
    }, TODAY)
    assert rec.id == '42'
    assert rec.is_income
    assert rec.amount == 8500.0
    assert rec.date == '2024-01-05'
    assert rec.note == ''
    assert rec.created_at == '2024-01-05T08:00:00'


def test_defaults():
    rec = normalize_record({'amount': 'abc'}, TODAY)
    assert rec.id
    assert rec.type == 'expense'
    assert rec.amount == 0.0
    assert rec.category == 'Uncategorized'
    assert rec.date == '2024-02-15'
    assert rec.created_at is None


def test_category_falls_back_to_note():
    assert normalize_record({'note': 'Groceries'}, TODAY).category == 'Groceries'
    assert normalize_record({'category': 'Food', 'note': 'x'}, TODAY).category == 'Food'


def test_round_trips_through_dict():
    rec = normalize_record({'id': 'a', 'type': 'expense', 'amount': 3, 'category': 'Tea',
                            'date': '2024-02-01', 'note': 'green'}, TODAY)
    assert normalize_record(rec.to_dict(), TODAY) == rec


def test_negative_amount_becomes_zero():
    assert normalize_record({'amount': -50, 'category': 'Food'}, TODAY).amount == 0.0
    assert normalize_record({'amount': '-3.5'}, TODAY).amount == 0.0


def test_method_trimmed_or_cash():
    assert normalize_record({'method': ' Card '}, TODAY).method == 'Card'
    assert normalize_record({'method': '   '}, TODAY).method == 'Cash'
    assert normalize_record({}, TODAY).method == 'Cash'
