import types

from finance_tracker import app
from finance_tracker.store import FinanceStore, MemoryStore


def sample_records():
    return [
        {'id': '1', 'type': 'expense', 'amount': 10, 'category': 'food', 'description': 'Pizza night'},
        {'id': '2', 'type': 'income', 'amount': 500, 'category': 'freelance', 'description': 'Logo work'},
        {'id': '3', 'type': 'expense', 'amount': 30, 'category': 'transport', 'description': 'Taxi'},
    ]


def test_filter_by_type_and_category():
    records = sample_records()
    assert [r['id'] for r in app.filter_transactions(records, type_filter='expense')] == ['1', '3']
    assert [r['id'] for r in app.filter_transactions(records, category_filter='freelance')] == ['2']
    assert app.filter_transactions(records, type_filter='income', category_filter='food') == []


def test_filter_search_matches_description_or_category():
    records = sample_records()
    assert [r['id'] for r in app.filter_transactions(records, search='PIZZA')] == ['1']
    assert [r['id'] for r in app.filter_transactions(records, search='trans')] == ['3']
    assert app.filter_transactions(records) == records


def test_delete_requires_confirmation(monkeypatch):
    monkeypatch.setattr(app, 'st', types.SimpleNamespace(session_state={}))
    store = FinanceStore(MemoryStore())
    record = store.add_transaction('expense', 8, 'food', 'Snack', '2024-01-01')

    assert not app.confirm_delete(store)
    assert len(store.transactions) == 1

    app.request_delete(record['id'])
    assert app.st.session_state['pending_delete'] == record['id']
    assert app.confirm_delete(store)
    assert store.transactions == []
    assert app.st.session_state['pending_delete'] is None


def test_get_store_is_cached_in_session(monkeypatch, tmp_path):
    monkeypatch.setattr(app, 'st', types.SimpleNamespace(session_state={}))
    monkeypatch.setattr(app.config, 'DATA_DIR', tmp_path)
    monkeypatch.setattr(app.config, 'EXPORT_DIR', tmp_path / 'exports')
    monkeypatch.setattr(app.config, 'STORE_PATH', tmp_path / 'store.json')

    first = app.get_store()
    assert app.get_store() is first
    assert first.backend.path == tmp_path / 'store.json'


def test_search_does_not_match_amounts():
    assert app.filter_transactions(sample_records(), search='500') == []
    assert [r['id'] for r in app.filter_transactions(sample_records(), type_filter='income', search='logo')] == ['2']


def _confirmation_st(pending, confirm):
    reruns = []
    buttons = {'confirm_delete': confirm, 'cancel_delete': not confirm}
    column = types.SimpleNamespace(button=lambda label, key=None: buttons[key])
    fake = types.SimpleNamespace(
        session_state={'pending_delete': pending},
        warning=lambda message: None,
        info=lambda message: None,
        columns=lambda count: (column, column),
        rerun=lambda: reruns.append(True),
    )
    return fake, reruns


def test_delete_confirmation_deletes_and_reruns(monkeypatch):
    store = FinanceStore(MemoryStore())
    record = store.add_transaction('expense', 8, 'food', 'Snack', '2024-01-01')
    fake, reruns = _confirmation_st(record['id'], confirm=True)
    monkeypatch.setattr(app, 'st', fake)

    app.render_delete_confirmation(store)

    assert store.transactions == []
    assert reruns == [True]


def test_delete_confirmation_cancel_keeps_record(monkeypatch):
    store = FinanceStore(MemoryStore())
    record = store.add_transaction('expense', 8, 'food', 'Snack', '2024-01-01')
    fake, reruns = _confirmation_st(record['id'], confirm=False)
    monkeypatch.setattr(app, 'st', fake)

    app.render_delete_confirmation(store)

    assert len(store.transactions) == 1
    assert fake.session_state['pending_delete'] is None
    assert reruns == [True]
