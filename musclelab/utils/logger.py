import sys
import logging

# --------------------------------------------------------
# Unified logger for all MuscleLab modules
# --------------------------------------------------------
LOGGER_NAME = "musclelab"
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.DEBUG)

# Single stdout handler (avoid duplicate logs on re-import)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.INFO)

    formatter = logging.Formatter(
        '[%(asctime)s] [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.propagate = False  # uvicorn installs its own root handlers


def log(msg):
    """
    Plain info-level message.
    Stages use log('[INFO] Stage: ...') for progress lines.
    """
    logger.info(msg)


def debug(msg):
    logger.debug(msg)
