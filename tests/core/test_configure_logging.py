# tests/core/test_configure_logging.py
import logging

import pytest

from mailcheck.core.utils.configure_logging import LogWithTqdm, configure_logger


@pytest.fixture
def restore_logging():
    """Zet de root logger en de aangepaste loggers na de test terug."""
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
    for name in ("mail_auditor", "aiohttp"):
        logging.getLogger(name).setLevel(logging.NOTSET)


def test_configure_logger_levels(restore_logging):
    """Test of algemene, module- en stille niveaus uit de instellingen worden toegepast."""
    configure_logger("warning", module_specific_levels={"mail_auditor": "DEBUG"}, silenced_loggers={"aiohttp": None})

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], LogWithTqdm)
    assert logging.getLogger("mail_auditor").level == logging.DEBUG
    assert logging.getLogger("aiohttp").level == logging.CRITICAL


def test_unknown_level_falls_back_to_info(restore_logging):
    configure_logger("LOUD")
    assert logging.getLogger().level == logging.INFO


def test_handler_writes_through_tqdm(restore_logging, capsys):
    configure_logger("INFO")
    logging.getLogger("mail_auditor.test").info("probe finished")

    assert "probe finished" in capsys.readouterr().err
