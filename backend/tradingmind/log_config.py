"""
Logging setup: loguru sinks, stdlib interception and structlog events.

loguru owns the output; stdlib logging (uvicorn, sqlalchemy, the api
layer) is routed into it. structlog is used for key/value events such as
the access log, and every event passes through PIIRedactor so phones,
passwords, tokens and verification codes never reach the output.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from loguru import logger
from structlog.typing import EventDict, WrappedLogger

from tradingmind.config import settings

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


class PIIRedactor:
    """structlog processor replacing credential-bearing fields with [REDACTED]."""

    SENSITIVE_KEYS = ("phone", "password", "token", "secret", "code", "authorization", "access_key")

    def __call__(self, logger: WrappedLogger, name: str, event_dict: EventDict) -> EventDict:
        for key in list(event_dict):
            if any(marker in key.lower() for marker in self.SENSITIVE_KEYS):
                event_dict[key] = "[REDACTED]"
        return event_dict


def mask_phone(phone: str) -> str:
    """Keep the first three and last four digits: 138****8000."""
    if not phone or len(phone) < 8:
        return "***"
    return f"{phone[:3]}****{phone[-4:]}"


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru, keeping the caller's location."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging() -> None:
    as_json = settings.log_format == "json"
    sink_options = {
        "format": "{message}" if as_json else TEXT_FORMAT,
        "level": settings.log_level,
        "serialize": as_json,
    }

    logger.remove()
    logger.add(sys.stderr, diagnose=settings.is_development, **sink_options)

    if settings.log_file:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(settings.log_file, rotation="100 MB", retention="10 days", diagnose=False, **sink_options)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            PIIRedactor(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if as_json else structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.log_level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)

    logger.debug(f"Logging configured: level={settings.log_level} format={settings.log_format} env={settings.app_env}")


def get_logger(name: str) -> Any:
    """structlog logger bound to a component name."""
    return structlog.get_logger(name).bind(component=name)


configure_logging()
