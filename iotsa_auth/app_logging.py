"""Logging setup for the service."""

import logging

from pythonjsonlogger import jsonlogger

HANDLER_NAME = 'iotsa_auth'


def setup_logger(level: str = 'INFO', json: bool = True) -> None:
    """
    Attach a handler to the root logger, emitting JSON if ``json``.

    Calling this again replaces the handler installed by an earlier call,
    so each record is written once.
    """
    logHandler = logging.StreamHandler()
    logHandler.set_name(HANDLER_NAME)
    if json:
        formatter: logging.Formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(levelname)s %(name)s %(message)s',
            rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s %(levelname)s %(name)s %(message)s'
        )
    logHandler.setFormatter(formatter)
    logger = logging.getLogger()
    for handler in list(logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            logger.removeHandler(handler)
    logger.addHandler(logHandler)
    logger.setLevel(level)
