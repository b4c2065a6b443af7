import logging

import colorlog

from config.settings import settings

# -------------------------
# Centralized Logging
# -------------------------
logger = logging.getLogger("taskloom")
logger.setLevel(settings.LOG_LEVEL)

handler = logging.StreamHandler()
handler.setFormatter(colorlog.ColoredFormatter(
    "%(log_color)s[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
    reset=True,
    log_colors={
        'DEBUG':    'cyan',
        'INFO':     'green',
        'WARNING':  'yellow',
        'ERROR':    'red',
        'CRITICAL': 'red,bg_white',
    },
    style='%'
))

# Prevent duplicate handlers if re-imported
if not logger.handlers:
    logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Returns a child logger for one engine component."""
    return logger.getChild(name)


def set_log_level(level: str) -> None:
    logger.setLevel(level.upper())


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    return f"{seconds:.2f} s"
