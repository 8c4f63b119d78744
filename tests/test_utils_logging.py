from loguru import logger

from jsonwire.utils import logging_utils


def test_configure_logging_keeps_single_sink():
    logging_utils.configure_logging(True, "debug")
    first = logging_utils._SINK_IDS["stderr"]
    logging_utils.configure_logging(True, "INFO")
    second = logging_utils._SINK_IDS["stderr"]
    assert first != second
    logger.remove(logging_utils._SINK_IDS.pop("stderr"))


def test_configure_logging_disabled_adds_no_sink():
    logging_utils._SINK_IDS.clear()
    logging_utils.configure_logging(False)
    assert "stderr" not in logging_utils._SINK_IDS
    logger.enable("jsonwire")
