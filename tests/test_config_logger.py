import logging

from finance_tracker import config
from finance_tracker.logger import LOG_FORMAT, setup_logger


def test_ensure_data_directories_creates_paths(monkeypatch, tmp_path):
    monkeypatch.setattr(config, 'DATA_DIR', tmp_path / 'data')
    monkeypatch.setattr(config, 'EXPORT_DIR', tmp_path / 'data' / 'exports')
    monkeypatch.setattr(config, 'STORE_PATH', tmp_path / 'state' / 'store.json')

    config.ensure_data_directories()

    assert (tmp_path / 'data' / 'exports').is_dir()
    assert (tmp_path / 'state').is_dir()
    assert config.get_store_path() == str(tmp_path / 'state' / 'store.json')


def test_setup_logger_levels():
    logger = setup_logger('finance_tracker.test', 'debug')
    assert logger.name == 'finance_tracker.test'
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert root.handlers[0].formatter._fmt == LOG_FORMAT

    setup_logger('finance_tracker.test', 'nonsense')
    assert logging.getLogger().level == logging.INFO
