import logging

from phosphor_terminal.utils.logger import console_handler, get_logger


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_logger_has_single_console_handler():
    logger = get_logger("phosphor_terminal.tests.single")
    get_logger("phosphor_terminal.tests.single")
    assert logger.handlers.count(console_handler) == 1
    assert not logger.propagate


def test_records_do_not_reach_root_handlers():
    """A host configuring the root logger must not see every record twice."""
    root_handler = ListHandler()
    logging.getLogger().addHandler(root_handler)
    try:
        get_logger("phosphor_terminal.tests.root").warning("shown once")
    finally:
        logging.getLogger().removeHandler(root_handler)
    assert root_handler.records == []
