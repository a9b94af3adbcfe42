"""
Loguru sinks and shared state for ``Logger.io``

Standard ``logging`` records (uvicorn, pymongo, opentelemetry) are routed into
loguru so every line carries the same service context and format. Sinks are
picked from settings: colored text on stdout by default, one JSON object per
line when ``LOG_JSON`` is on, and an hourly rotated file when ``LOG_TO_FILE``
(default: ``DEBUG``) is on.
"""

from contextvars import ContextVar
from datetime import datetime
from enum import StrEnum
import logging
import os
import re
import sys
from typing import TYPE_CHECKING
import zoneinfo

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


SENSITIVE_KEYWORDS = {
    'password',
    'token',
    'authorization',
    'transaction_id',
    'provider_reference_id',
}
MASK = '********'
DEPTH_LINE = '│'

# Debug chatter from these libraries never reaches the sinks
QUIET_LOGGER_PREFIXES = ('asyncio', 'pymongo', 'sse_starlette', 'httpcore', 'httpx')

chain_start_time_var: ContextVar[float] = ContextVar('first_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


class GeneratorMethod(StrEnum):
    NEXT = 'next'
    SEND = 'send'
    THROW = 'throw'


# uvicorn access line: '127.0.0.1:50312 - "PATCH /api/vendor/orders/<id>/status HTTP/1.1" 200'
_ACCESS_LOG_STATUS = re.compile(r'" (\d{3})\b')


def access_log_level(message: str) -> str | None:
    """Level for a uvicorn access line by response status, None for any other message"""
    if ' HTTP/' not in message:
        return None
    match = _ACCESS_LOG_STATUS.search(message)
    if match is None:
        return None

    status_code = int(match.group(1))
    if status_code >= 500:
        return 'CRITICAL'
    if status_code >= 400:
        return 'ERROR'
    if status_code >= 300:
        return 'WARNING'
    return 'SUCCESS'


def _default_extra() -> dict[str, str]:
    return {
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }


_intercept_bound_logger: 'LoguruLogger | None' = None


def _get_intercept_bound_logger() -> 'LoguruLogger':
    global _intercept_bound_logger
    if _intercept_bound_logger is None:
        _intercept_bound_logger = loguru_logger.bind(**_default_extra())
    return _intercept_bound_logger


class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno <= logging.DEBUG and record.name.startswith(QUIET_LOGGER_PREFIXES):
            return

        message = record.getMessage()
        level: str | int | None = access_log_level(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        # Report the line that called logging, not logging itself
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        _get_intercept_bound_logger().opt(depth=depth, exception=record.exc_info).log(
            level, message
        )


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


def _log_file_path() -> str:
    log_dir = os.environ.get('TEST_LOG_DIR', str(LOG_DIR))
    stamp = datetime.now(zoneinfo.ZoneInfo(settings.LOG_TIMEZONE)).strftime('%Y-%m-%d_%H')
    prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else ''
    return f'{log_dir}/{prefix}{stamp}.log'


def configure_logging() -> 'LoguruLogger':
    """Install the sinks once per process and return the bound application logger"""
    loguru_logger.remove()
    bound = loguru_logger.bind(**_default_extra())
    level = settings.LOG_LEVEL or ('DEBUG' if settings.DEBUG else 'INFO')

    if settings.LOG_JSON:
        bound.add(sys.stdout, serialize=True, level=level, enqueue=True)
    else:
        bound.add(sys.stdout, format=io_log_format, level=level, enqueue=True)

    log_to_file = settings.DEBUG if settings.LOG_TO_FILE is None else settings.LOG_TO_FILE
    if log_to_file:
        bound.add(
            _log_file_path(),
            format=io_log_format,
            rotation='1 hour',
            retention='7 days',
            compression='gz',
            enqueue=True,
            level=level,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    return bound


custom_logger = configure_logging()
