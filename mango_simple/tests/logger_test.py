import logging

from mango_simple.utils.logger import setup_logger


def test_setup_logger_writes_file(tmp_path):
    log_path = tmp_path / "logs" / "client.log"
    logger = setup_logger("mango_simple.test_file", log_path, level=logging.DEBUG)

    logger.info("order placed")
    for handler in logger.handlers:
        handler.flush()

    assert log_path.exists()
    assert "INFO mango_simple.test_file: order placed" in log_path.read_text(encoding="utf-8")


def test_setup_logger_does_not_stack_handlers():
    first = setup_logger("mango_simple.test_console")
    second = setup_logger("mango_simple.test_console")
    assert first is second
    assert len(second.handlers) == 1


def test_setup_logger_adds_file_after_console_only_call(tmp_path):
    log_path = tmp_path / "late.log"
    setup_logger("mango_simple.test_late_file")
    logger = setup_logger("mango_simple.test_late_file", log_path)

    logger.info("cancel sent")
    for handler in logger.handlers:
        handler.flush()

    assert len(logger.handlers) == 2
    assert "cancel sent" in log_path.read_text(encoding="utf-8")


def test_setup_logger_same_path_twice_keeps_one_file_handler(tmp_path):
    log_path = tmp_path / "client.log"
    setup_logger("mango_simple.test_same_file", log_path)
    logger = setup_logger("mango_simple.test_same_file", log_path)

    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    assert len(logger.handlers) == 2
