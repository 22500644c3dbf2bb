"""Logging configuration for the application."""

import json
import logging
import logging.handlers
import os
import sys
import time
from typing import Any, Callable, Dict, Optional

from fastapi import Request, Response
from fastapi.routing import APIRoute
from starlette.middleware.base import BaseHTTPMiddleware

from sustainaview.config import LOGS_DIR, settings

# Initialize logger
logger = logging.getLogger(__name__)

# Request fields carrying encoded photos; logged as a size marker instead of the payload
IMAGE_FIELDS = {"image_base64", "original_image", "generated_image", "data"}
SENSITIVE_HEADERS = {"authorization", "cookie"}


def redact_payload(body: Any) -> Any:
    """Replace encoded image payloads with a short placeholder."""
    if isinstance(body, dict):
        redacted = {}
        for key, value in body.items():
            if key in IMAGE_FIELDS and isinstance(value, str) and len(value) > 256:
                redacted[key] = f"<{len(value)} chars>"
            else:
                redacted[key] = redact_payload(value)
        return redacted
    if isinstance(body, list):
        return [redact_payload(item) for item in body]
    return body


def _file_handler(level: str, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        LOGS_DIR / "app.log",
        when="midnight",
        interval=1,  # Create new file every day
        backupCount=settings.logging.backup_count,
        encoding="utf-8",
        delay=True,
    )
    handler.suffix = "%Y-%m-%d"  # Add date suffix to rotated files
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging():
    """Set up logging configuration."""
    os.makedirs(LOGS_DIR, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all logs, handlers will filter

    # Remove existing handlers to prevent duplicates if logging was configured elsewhere
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(settings.logging.log_level)
    console_handler.setFormatter(logging.Formatter(settings.logging.format))
    root_logger.addHandler(console_handler)

    root_logger.addHandler(
        _file_handler(settings.logging.file_log_level, logging.Formatter(settings.logging.file_format))
    )

    for logger_name, level in settings.logging.noisy_loggers.items():
        logging.getLogger(logger_name).setLevel(level)


class EndpointLoggingRoute(APIRoute):
    """Custom API route that logs request information."""

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def custom_route_handler(request: Request) -> Response:
            endpoint_logger = logging.getLogger("endpoint")

            body = await self._get_request_body(request)
            headers = {k: v for k, v in request.headers.items() if k.lower() not in SENSITIVE_HEADERS}

            endpoint_logger.debug(
                "Endpoint called",
                extra={
                    "endpoint": {
                        "method": request.method,
                        "url": str(request.url),
                        "path_params": request.path_params,
                        "query_params": dict(request.query_params),
                        "body": redact_payload(body),
                        "headers": headers,
                    }
                },
            )

            return await original_route_handler(request)

        return custom_route_handler

    @staticmethod
    async def _get_request_body(request: Request) -> Optional[Dict[str, Any]]:
        """Get the request body if it exists and is JSON."""
        try:
            return await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None


class EndpointLogFormatter(logging.Formatter):
    """Formatter for endpoint logs that renders the structured extras."""

    def format(self, record: logging.LogRecord) -> str:
        record_copy = logging.makeLogRecord(record.__dict__)

        if hasattr(record_copy, "endpoint"):
            info = record_copy.endpoint  # type: ignore
            record_copy.msg = (
                f"Request: {info['method']} {info['url']}\n"
                f"Query Params: {json.dumps(info['query_params'], indent=2)}\n"
                f"Path Params: {json.dumps(info['path_params'], indent=2, default=str)}\n"
                f"Body: {json.dumps(info['body'], indent=2, default=str)}"
            )

        if hasattr(record_copy, "response"):
            info = record_copy.response  # type: ignore
            record_copy.msg = f"Response: {info['status_code']} {info['path']} ({info['duration_ms']:.2f}ms)"

        return super().format(record_copy)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging request timing and response status."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        endpoint_logger = logging.getLogger("endpoint")

        try:
            response = await call_next(request)
        except Exception as e:
            endpoint_logger.error(f"Request failed: {request.method} {request.url.path}: {str(e)}")
            raise

        endpoint_logger.debug(
            "Response sent",
            extra={
                "response": {
                    "status_code": response.status_code,
                    "path": request.url.path,
                    "duration_ms": (time.time() - start_time) * 1000,
                }
            },
        )
        return response


def setup_endpoint_logging():
    """Route endpoint logs to the application log file only."""
    os.makedirs(LOGS_DIR, exist_ok=True)

    endpoint_logger = logging.getLogger("endpoint")
    endpoint_logger.handlers.clear()

    # Prevent propagation to root logger since we want separate handling
    endpoint_logger.propagate = False
    endpoint_logger.setLevel(settings.logging.file_log_level)

    endpoint_logger.addHandler(
        _file_handler(
            settings.logging.file_log_level,
            EndpointLogFormatter("%(asctime)s - endpoint - %(levelname)s - %(message)s"),
        )
    )
