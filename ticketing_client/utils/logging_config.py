"""
Logging configuration for the ticketing seat booking client.
"""

import contextvars
import json
import logging
import logging.config
import re
import sys
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from pathlib import Path

from ..config import get_settings

# Correlation id of the outgoing API call currently in progress
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar('request_id', default='no-request-id')


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    enable_json_logging: Optional[bool] = None,
) -> None:
    """
    Set up logging for the client and its HTTP stack.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        enable_json_logging: Enable JSON formatted logs
    """
    settings = get_settings()
    log_level = (log_level or settings.log_level).upper()
    log_file = log_file or settings.log_file
    if enable_json_logging is None:
        enable_json_logging = settings.enable_json_logging

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    formatter = "json" if enable_json_logging else "detailed"
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
            "detailed": {
                "format": (
                    "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d "
                    "[%(request_id)s] %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
            "json": {
                "()": "ticketing_client.utils.logging_config.JSONFormatter",
            }
        },
        "filters": {
            "request_id": {
                "()": "ticketing_client.utils.logging_config.RequestIDFilter"
            },
            "sensitive_data": {
                "()": "ticketing_client.utils.logging_config.SensitiveDataFilter"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": formatter,
                "stream": sys.stdout,
                "filters": ["request_id", "sensitive_data"]
            }
        },
        "loggers": {
            "ticketing_client": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False
            },
            "uvicorn": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False
            },
            "httpx": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False
            },
            "httpcore": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False
            },
            "redis": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False
            }
        },
        "root": {
            "level": log_level,
            "handlers": ["console"]
        }
    }

    if log_file:
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": formatter,
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,  # 10MB
            "backupCount": 5,
            "filters": ["request_id", "sensitive_data"]
        }
        for logger_config in config["loggers"].values():
            logger_config["handlers"].append("file")
        config["root"]["handlers"].append("file")

    logging.config.dictConfig(config)


class RequestIDFilter(logging.Filter):
    """Filter to add the current API request ID to log records."""

    def filter(self, record):
        if not getattr(record, 'request_id', None):
            record.request_id = request_id_var.get()
        return True


class SensitiveDataFilter(logging.Filter):
    """Filter to remove auth and queue tokens from log records."""

    SENSITIVE_KEYS = {
        'password', 'token', 'secret', 'authorization',
        'cookie', 'session', 'api_key', 'access_token',
        'queue_token', 'queuetoken', 'authtoken'
    }

    _TOKEN_PATTERN = re.compile(r'\b[A-Za-z0-9_\-\.]{32,}\b')
    _BEARER_PATTERN = re.compile(r'(Bearer\s+)\S+', re.IGNORECASE)

    def filter(self, record):
        if isinstance(record.msg, str):
            record.msg = self._sanitize_string(record.msg)

        for key, value in list(record.__dict__.items()):
            if key in ('msg', 'args'):
                continue
            if isinstance(value, dict):
                setattr(record, key, self._sanitize_data(value))
            elif isinstance(value, str) and any(sensitive in key.lower() for sensitive in self.SENSITIVE_KEYS):
                setattr(record, key, '***MASKED***')

        return True

    def _sanitize_string(self, text: str) -> str:
        """Mask bearer tokens and long opaque strings."""
        text = self._BEARER_PATTERN.sub(r'\1***MASKED***', text)
        return self._TOKEN_PATTERN.sub('***MASKED***', text)

    def _sanitize_data(self, data):
        """Recursively sanitize sensitive data."""
        if isinstance(data, dict):
            return {
                key: '***MASKED***' if any(sensitive in str(key).lower() for sensitive in self.SENSITIVE_KEYS)
                else self._sanitize_data(value)
                for key, value in data.items()
            }
        elif isinstance(data, str):
            return self._sanitize_string(data)
        elif isinstance(data, (list, tuple)):
            return type(data)(self._sanitize_data(item) for item in data)
        else:
            return data


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    _RESERVED = {
        'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
        'filename', 'module', 'lineno', 'funcName', 'created',
        'msecs', 'relativeCreated', 'thread', 'threadName',
        'processName', 'process', 'getMessage', 'exc_info',
        'exc_text', 'stack_info', 'request_id', 'taskName'
    }

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, 'request_id'):
            log_entry["request_id"] = record.request_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value for key, value in record.__dict__.items()
            if key not in self._RESERVED
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        return json.dumps(log_entry, default=str, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name."""
    return logging.getLogger(name)


def log_business_event(event_type: str, details: Dict[str, Any], user_id: Optional[str] = None):
    """Log booking lifecycle events for analytics."""
    logger = get_logger("ticketing_client.business")
    logger.info(
        f"Business event: {event_type}",
        extra={
            "event_type": event_type,
            "business_event": True,
            "user_id": user_id,
            **details
        }
    )
