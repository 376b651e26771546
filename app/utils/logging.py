"""애플리케이션 로깅 설정.

Application logging configuration.
Request/response logs go to Axiom through the middleware; everything else
(theme loading, fetchers, scheduler) uses stdlib loggers configured here.
"""

import logging
import sys

from app.config import settings

_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | None = None) -> logging.Logger:
    """루트 'app' 로거에 stdout 핸들러를 한 번만 설정합니다.

    Configure the "app" logger with a single stdout handler.
    Safe to call more than once; later calls only adjust the level.

    Args:
        level: 로그 레벨 이름 (Level name, defaults to settings.LOG_LEVEL)

    Returns:
        logging.Logger: 설정된 'app' 로거 (Configured "app" logger)
    """
    logger: logging.Logger = logging.getLogger("app")
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
