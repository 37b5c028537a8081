"""
Operational event log.

Every component reports notable events through ``record_event``: the entry is
persisted as a ``LogEntry`` row (read back by the admin log endpoint) and
mirrored to the process logger.
"""
import logging

from imagia.models.log_entry import LogEntry

logger = logging.getLogger("uvicorn.error")

_PY_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}


async def record_event(level: str, category: str, message: str) -> LogEntry | None:
    """
    Persist one log entry and mirror it to the logger.

    Returns the stored row, or None when the database write failed; a failing
    log write must not turn a handled request into a 500.
    """
    logger.log(_PY_LEVELS.get(level, logging.INFO), "[%s] %s", category, message)
    try:
        return await LogEntry.create(level=level, category=category, message=message)
    except Exception:
        logger.exception("[events] could not persist log entry (%s/%s)", level, category)
        return None


async def debug(category: str, message: str):
    return await record_event("DEBUG", category, message)


async def info(category: str, message: str):
    return await record_event("INFO", category, message)


async def warn(category: str, message: str):
    return await record_event("WARN", category, message)


async def error(category: str, message: str):
    return await record_event("ERROR", category, message)
