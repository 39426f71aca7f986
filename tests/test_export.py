import json
from datetime import date

from finance_tracker import config
from finance_tracker.export import (
    default_export_filename,
    download_csv,
    download_json,
    export_to_csv,
    export_to_json,
    export_transactions_csv,
)


def sample_records():
    return [
        {'id': 'a1', 'type': 'expense', 'amount': 50.0, 'category': 'food', 'description': 'Groceries',
         'date': '2024-01-05', 'timestamp': '2024-01-05T09:00:00', 'payment_method': 'card'},
        {'id': 'b2', 'type': 'income', 'amount': 2000, 'category': 'salary', 'description': 'Pay',
         'date': '2024-01-10', 'timestamp': '2024-01-10T09:00:00'},
    ]


def test_csv_header_and_rows():
    csv_text = export_to_csv(sample_records())
    assert csv_text.split('\n') == [
        'Date,Category,Amount,Description,Payment Method',
        'Jan 5, 2024,food,50,Groceries,card',
        'Jan 10, 2024,salary,2000,Pay,',
    ]


def test_csv_does_not_escape_commas_by_default():
    record = dict(sample_records()[0], description='Dinner, drinks')
    row = export_to_csv([record]).split('\n')[1]
    assert row == 'Jan 5, 2024,food,50,Dinner, drinks,card'


def test_csv_escape_option_quotes_fields():
    record = dict(sample_records()[0], description='Dinner, drinks')
    lines = export_to_csv([record], escape=True).split('\n')
    assert lines[0] == 'Date,Category,Amount,Description,Payment Method'
    assert lines[1] == '"Jan 5, 2024",food,50,"Dinner, drinks",card'


def test_transactions_csv_uses_labels_and_iso_dates():
    lines = export_transactions_csv(sample_records()).split('\n')
    assert lines[0] == 'Date,Type,Category,Description,Amount'
    assert lines[1] == '2024-01-05,expense,🍔 Food & Dining,Groceries,50'


def test_json_roundtrip_reproduces_records():
    records = sample_records()
    text = export_to_json(records)
    assert json.loads(text) == records
    assert text.startswith('[\n  {')


def test_download_helpers_write_files(tmp_path):
    csv_path = download_csv(sample_records(), tmp_path / 'out' / 'report.csv')
    assert csv_path.read_text(encoding='utf-8') == export_to_csv(sample_records())
    json_path = download_json(sample_records(), tmp_path / 'out' / 'report.json')
    assert json.loads(json_path.read_text(encoding='utf-8')) == sample_records()


def test_download_defaults_to_export_dir(monkeypatch, tmp_path):
    monkeypatch.setattr(config, 'EXPORT_DIR', tmp_path)
    path = download_csv(sample_records())
    assert path == tmp_path / 'expenses.csv'
    assert path.exists()


def test_default_export_filename():
    assert default_export_filename('csv', date(2024, 3, 9)) == 'finance-tracker-2024-03-09.csv'
