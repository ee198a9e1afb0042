import logging

from urlshort.core.logging_config import configure_logging


def test_configure_logging_is_idempotent():
    configure_logging("DEBUG")
    configure_logging("DEBUG")

    root = logging.getLogger()
    installed = [h for h in root.handlers if getattr(h, "_urlshort", False)]
    assert len(installed) == 1
    assert root.level == logging.DEBUG


def test_configure_logging_quiets_third_party_loggers():
    logger = configure_logging("INFO")

    assert logger.name == "urlshort"
    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    assert logging.getLogger("redis").level == logging.WARNING
    assert logging.getLogger("uvicorn.access").disabled
