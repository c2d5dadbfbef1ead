import logging

from hriq_calendar.logging import get_logger, setup_logger


def test_setup_logger_does_not_duplicate_handlers(tmp_path):
    log_file = tmp_path / "logs" / "scraper.log"
    logger = setup_logger("hriq_test_idempotent", log_file=log_file)
    setup_logger("hriq_test_idempotent", log_file=log_file, level="DEBUG")

    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG
    assert all(h.level == logging.DEBUG for h in logger.handlers)

    logger.info("Mois sélectionné : 1/2026")
    for handler in logger.handlers:
        handler.flush()
    assert "Mois sélectionné : 1/2026" in log_file.read_text(encoding="utf-8")

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_noisy_libraries_are_quieted():
    setup_logger("hriq_test_quiet", quiet=("hriq_test_noisy",))
    assert logging.getLogger("hriq_test_noisy").level == logging.WARNING


def test_get_logger_returns_shared_logger():
    assert get_logger() is logging.getLogger("hriq_calendar")
