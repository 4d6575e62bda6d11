import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from schedule_bsuir.config import get_settings
from schedule_bsuir.logs.db_logger import DBLogHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_initialized = False


def _add_db_handler(logger: logging.Logger):
    # предупреждения резолвера (битые даты, пропущенные занятия) видны через /api/logs/sql
    if not get_settings().DB_LOGGING:
        return
    if any(isinstance(h, DBLogHandler) for h in logger.handlers):
        return
    db_handler = DBLogHandler()
    db_handler.setLevel(logging.WARNING)
    db_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(db_handler)


def setup_logging(with_db: bool = True):
    global _initialized
    logger = logging.getLogger()
    if _initialized:
        # CLI настраивает логи без базы, а потом может поднять API в том же процессе
        if with_db:
            _add_db_handler(logger)
        return

    settings = get_settings()
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = TimedRotatingFileHandler(
        filename=log_dir / "schedule.log",
        when="midnight",
        interval=1,
        backupCount=7,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    if not any(isinstance(h, TimedRotatingFileHandler) for h in logger.handlers):
        logger.addHandler(file_handler)

    if with_db:
        _add_db_handler(logger)

    _initialized = True
