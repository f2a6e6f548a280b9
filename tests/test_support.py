import logging
from decimal import Decimal

from brokers.log import configure_logging
from brokers.units import from_tokens, tokens

def test_tokens():
    assert tokens(5) == 5 * 10**18
    assert tokens("0.001") == 10**15
    assert tokens(Decimal("2.5")) == 25 * 10**17
    assert from_tokens(tokens(5)) == Decimal("5")

def test_configure_logging(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    logger = logging.getLogger("brokers")
    try:
        configure_logging()
        configure_logging()
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

        configure_logging("warning")
        assert logger.level == logging.WARNING
    finally:
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
