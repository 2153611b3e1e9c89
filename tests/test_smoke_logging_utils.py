import logging

import pytest


def test_import_logging_utils():
    import core.utils.logging_utils as logging_utils
    assert hasattr(logging_utils, "log_performance")
    assert hasattr(logging_utils, "StructuredLogger")


def test_structured_logger_formats_context(caplog):
    from core.utils.logging_utils import StructuredLogger
    caplog.set_level(logging.INFO, logger="smoke")
    logger = StructuredLogger("smoke")
    logger.info("Rendered chart", chart_type="Bar", points=3)
    assert "Rendered chart | chart_type=Bar | points=3" in caplog.text


def test_structured_logger_without_context():
    from core.utils.logging_utils import StructuredLogger
    assert StructuredLogger("smoke")._format_message("plain") == "plain"


def test_log_performance_warns_when_slow(caplog):
    from core.utils.logging_utils import log_performance
    caplog.set_level(logging.WARNING, logger="core.performance")

    @log_performance(threshold_ms=-1)
    def work():
        return 42

    assert work() == 42
    assert "Slow operation" in caplog.text
    assert "work" in caplog.text


def test_log_performance_reraises():
    from core.utils.logging_utils import log_performance

    @log_performance()
    def boom():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        boom()
