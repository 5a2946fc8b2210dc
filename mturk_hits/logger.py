"""
Handles color logging.
"""

import logging
import logging.handlers
from colorlog import ColoredFormatter

from mturk_hits import conf

_NAMESPACE = 'mturk_hits'


def config_root_logger(logfile=None):
    """
    Sets up the root logger. Call this in the main() of whatever is using the
    client.

    :param logfile: The filename to log to. Defaults to conf.LOG_LOCATION
                    (MTURK_LOG_FILE); if neither is set, only the
                    per-module console handlers are used.
    :return: The file handler that was added, or None.
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)
    if logfile is None:
        logfile = conf.LOG_LOCATION
    if logfile is None:
        return None
    formatter = logging.Formatter(
        "%(levelname)-8s %(asctime)s - %(name)s - %(funcName)s: %(message)s",
        datefmt='%m/%d/%Y %I:%M:%S %p')
    # Add a rotating file handler, only for our own records
    handler = logging.handlers.RotatingFileHandler(
        logfile,
        maxBytes=104857600,  # 100 MB
        backupCount=6)
    handler.addFilter(logging.Filter(name=_NAMESPACE))
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return handler


def setup_logger(log_name):
    """
    Return a logger configured for a particular module.

    :param log_name: The name of the logger to use, usually __name__.
    """
    formatter = ColoredFormatter(
        "%(log_color)s%(levelname)-8s %(asctime)s - %(name)s - "
        "%(funcName)s: %(message)s",
        datefmt='%m/%d/%Y %I:%M:%S %p',
        reset=True,
        log_colors={
            'DEBUG':    'cyan',
            'INFO':     'green',
            'WARNING':  'yellow',
            'ERROR':    'red',
            'CRITICAL': 'red',
        }
    )
    # the prefix is added so that the root file handler can filter out
    # things that aren't ours
    if not log_name.startswith(_NAMESPACE):
        log_name = _NAMESPACE + '.' + log_name
    logger = logging.getLogger(log_name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return logger
