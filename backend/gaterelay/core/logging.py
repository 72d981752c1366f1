"""
Structured Logging Configuration

Provides structured logging using structlog, rendered as JSON in
production and as coloured console output during development.
"""

import logging
import logging.config
import re
import sys
import time
from typing import Any, List, Optional

import structlog
from structlog.processors import JSONRenderer

from gaterelay.core.config import Settings, get_settings


# =============================================================================
# Secret Redaction Filter
# =============================================================================

class SecretFilter(logging.Filter):
    """
    Filter to redact sensitive values from logs.

    Prevents the Slack verification token and the device API token
    from leaking into log output.
    """

    SENSITIVE_PATTERNS = [
        (r'["\']?token["\']?\s*[:=]\s*["\']?[^"\'\s&]+["\']?', '***REDACTED***'),
        (r'["\']?x-api-token["\']?\s*[:=]\s*["\']?[^"\'\s]+["\']?', '***REDACTED***'),
    ]

    def __init__(self, secrets: Optional[List[str]] = None):
        super().__init__()
        self.secrets = [s for s in (secrets or []) if s]

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact sensitive information from log record."""
        if isinstance(record.msg, str):
            record.msg = self._redact(record.msg)

        if record.args:
            record.args = tuple(
                self._redact(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )

        return True

    def _redact(self, text: str) -> str:
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            text = re.sub(pattern, replacement, text, flags=re.IGNORECASE)

        for secret in self.secrets:
            if len(secret) > 3:  # Avoid replacing short strings
                text = text.replace(secret, '***REDACTED***')

        return text


# =============================================================================
# Logging Configuration
# =============================================================================

def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structured logging for the application.

    Sets up both standard library logging and structlog so that uvicorn's
    own records and the relay's structured events share one handler.
    """
    settings = settings or get_settings()
    is_json = settings.LOG_FORMAT == "json" and not settings.is_development

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": JSONRenderer(),
                "foreign_pre_chain": [
                    structlog.stdlib.add_log_level,
                    structlog.stdlib.add_logger_name,
                    structlog.processors.TimeStamper(fmt="iso"),
                ],
            },
            "console": {
                "format": "%(message)s",
            },
        },
        "filters": {
            "secret_filter": {
                "()": SecretFilter,
                "secrets": [settings.SLACK_TOKEN, settings.API_TOKEN],
            },
        },
        "handlers": {
            "default": {
                "level": settings.LOG_LEVEL.value,
                "class": "logging.StreamHandler",
                "formatter": "json" if is_json else "console",
                "stream": sys.stdout,
                "filters": ["secret_filter"],
            },
        },
        "loggers": {
            "": {
                "handlers": ["default"],
                "level": settings.LOG_LEVEL.value,
                "propagate": True,
            },
            "uvicorn": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["default"],
                "level": "WARNING",
                "propagate": False,
            },
            "httpx": {
                "handlers": ["default"],
                "level": "WARNING" if not settings.DEBUG else "INFO",
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)

    structlog_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if is_json:
        structlog_processors.append(JSONRenderer())
    else:
        structlog_processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=structlog_processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


# =============================================================================
# Logger Factory
# =============================================================================

def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Example:
        logger = get_logger(__name__)
        logger.info("Gate confirmed", callback=True)
    """
    return structlog.get_logger(name)


# =============================================================================
# Context Binding
# =============================================================================

class LogContext:
    """
    Context manager for adding context to logs.

    Example:
        with LogContext(request_id="abc123"):
            logger.info("Processing request")
    """

    def __init__(self, **context: Any) -> None:
        self.context = context
        self.tokens = None

    def __enter__(self) -> "LogContext":
        self.tokens = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        structlog.contextvars.reset_contextvars(**self.tokens)


# =============================================================================
# Request Logging Middleware
# =============================================================================

class RequestLoggingMiddleware:
    """
    Middleware for logging HTTP requests.

    Logs method, path, status code and processing time, with the
    caller's request id bound for every event logged while handling it.
    """

    def __init__(self) -> None:
        self.logger = get_logger("http.request")

    async def __call__(self, request: Any, call_next: Any) -> Any:
        start_time = time.time()

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else None
        request_id = request.headers.get("x-request-id")

        with LogContext(request_id=request_id, client_ip=client_ip):
            try:
                response = await call_next(request)
            except Exception as e:
                self.logger.error(
                    "Request failed",
                    method=method,
                    path=path,
                    error=str(e),
                    duration_ms=round((time.time() - start_time) * 1000, 2),
                )
                raise

            self.logger.info(
                "Request completed",
                method=method,
                path=path,
                status_code=response.status_code,
                duration_ms=round((time.time() - start_time) * 1000, 2),
            )
            return response
