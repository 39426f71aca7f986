import json
from datetime import date

import pytest

from finance_tracker import analytics, config
from finance_tracker.store import FinanceStore, JsonFileStore, MemoryStore


def test_add_transaction_inserts_newest_first_and_persists():
    backend = MemoryStore()
    store = FinanceStore(backend)
    first = store.add_transaction('expense', 25, 'food', 'Lunch', '2024-01-05')
    second = store.add_transaction('income', 1000, 'salary', 'Pay', '2024-01-06')

    assert [t['id'] for t in store.transactions] == [second['id'], first['id']]
    assert backend.get(config.TRANSACTIONS_KEY) == store.transactions
    assert first['id'] != second['id']
    assert first['timestamp']
    assert first['category'] == 'food'


def test_add_transaction_rejects_invalid_input():
    store = FinanceStore(MemoryStore())
    with pytest.raises(ValueError, match='Unknown category'):
        store.add_transaction('expense', 10, 'crypto', '', '2024-01-05')
    with pytest.raises(ValueError, match='Amount must be positive'):
        store.add_transaction('expense', -5, 'food', '', '2024-01-05')
    assert store.transactions == []


def test_add_transaction_defaults_date_to_today():
    store = FinanceStore(MemoryStore())
    record = store.add_transaction('expense', 3, 'transport')
    assert len(record['date']) == 10


def test_delete_transaction_by_id():
    backend = MemoryStore()
    store = FinanceStore(backend)
    keep = store.add_transaction('expense', 5, 'food', '', '2024-01-01')
    drop = store.add_transaction('expense', 6, 'food', '', '2024-01-02')

    assert store.delete_transaction(drop['id'])
    assert [t['id'] for t in store.transactions] == [keep['id']]
    assert backend.get(config.TRANSACTIONS_KEY) == [keep]
    assert not store.delete_transaction('missing')


def test_delete_matches_legacy_numeric_ids():
    store = FinanceStore.open(MemoryStore({
        config.TRANSACTIONS_KEY: [{'id': 1700000000000, 'type': 'expense', 'amount': 5, 'category': 'food', 'date': '2024-01-01'}],
    }))
    assert store.get_transaction('1700000000000') is not None
    assert store.delete_transaction('1700000000000')
    assert store.transactions == []


def test_set_budget_overwrites_previous_value():
    backend = MemoryStore()
    store = FinanceStore(backend)
    store.set_budget('food', 200)
    store.set_budget('FOOD', 300)
    assert store.budgets == {'food': 300.0}
    assert backend.get(config.BUDGETS_KEY) == {'food': 300.0}


def test_set_budget_rejects_non_positive_amount():
    store = FinanceStore(MemoryStore())
    with pytest.raises(ValueError, match='Budget must be positive'):
        store.set_budget('bills', 0)
    assert store.budgets == {}


def test_json_file_store_roundtrip(tmp_path):
    path = tmp_path / 'store.json'
    store = FinanceStore(JsonFileStore(path))
    record = store.add_transaction('expense', 42.5, 'shopping', 'Shoes', '2024-03-03')
    store.set_budget('shopping', 150)

    reopened = FinanceStore.open(JsonFileStore(path))
    assert reopened.transactions == [record]
    assert reopened.budgets == {'shopping': 150.0}

    on_disk = json.loads(path.read_text(encoding='utf-8'))
    assert set(on_disk) == {config.TRANSACTIONS_KEY, config.BUDGETS_KEY}


def test_corrupt_or_malformed_store_loads_empty(tmp_path):
    path = tmp_path / 'store.json'
    path.write_text('{not json', encoding='utf-8')
    store = FinanceStore.open(JsonFileStore(path))
    assert store.transactions == []
    assert store.budgets == {}

    path.write_text(json.dumps({'transactions': {'oops': 1}, 'budgets': ['x']}), encoding='utf-8')
    store.load()
    assert store.transactions == []
    assert store.budgets == {}


def test_missing_store_file_loads_empty(tmp_path):
    store = FinanceStore.open(JsonFileStore(tmp_path / 'nothing.json'))
    assert store.transactions == []


def test_json_file_store_defaults_to_configured_path(monkeypatch, tmp_path):
    target = tmp_path / 'configured.json'
    monkeypatch.setattr(config, 'STORE_PATH', target)
    backend = JsonFileStore()
    backend.set('budgets', {'food': 1.0})
    assert target.exists()


def test_store_analytics_uses_current_snapshot():
    store = FinanceStore(MemoryStore())
    store.add_transaction('expense', 10, 'food', '', '2024-01-01')
    store.add_transaction('income', 100, 'salary', '', '2024-01-02')
    summary = store.analytics().summary()
    assert summary['income'] == 100
    assert summary['expenses'] == 10


def test_add_transaction_stores_iso_dates():
    store = FinanceStore(MemoryStore())
    written = store.add_transaction('expense', 4, 'food', '', 'Jan 5 2024')
    timestamped = store.add_transaction('expense', 4, 'food', '', '2024-01-05T23:30:00')
    assert written['date'] == '2024-01-05'
    assert timestamped['date'] == '2024-01-05'


def test_add_transaction_requires_a_type():
    store = FinanceStore(MemoryStore())
    for missing in (None, '', '  '):
        with pytest.raises(ValueError, match='Invalid transaction type'):
            store.add_transaction(missing, 10, 'food', '', '2024-01-05')
    assert store.transactions == []


def test_far_future_dates_are_rejected_and_skipped():
    store = FinanceStore(MemoryStore())
    with pytest.raises(ValueError, match='Invalid date'):
        store.add_transaction('expense', 5, 'food', '', '2300-01-01')
    assert store.transactions == []

    # records saved before the date check still load and aggregate
    store = FinanceStore.open(MemoryStore({config.TRANSACTIONS_KEY: [
        {'id': 'old', 'type': 'expense', 'amount': 5, 'category': 'food', 'date': '2300-01-01'},
        {'id': 'ok', 'type': 'expense', 'amount': 7, 'category': 'food', 'date': '2024-01-05'},
    ]}))
    assert list(analytics.group_expenses_by_month(store.transactions)) == ['2024-01']
    assert [t['id'] for t in analytics.filter_expenses_by_date_range(store.transactions, '2024-01-01', None)] == ['ok']
    assert [t['id'] for t in analytics.sort_expenses(store.transactions)] == ['ok', 'old']
    breakdown = store.analytics().monthly_breakdown(months=1, today=date(2024, 1, 31))
    assert breakdown['Expenses'].tolist() == [7.0]
