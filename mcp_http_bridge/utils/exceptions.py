"""
Exception hierarchy and error handling utilities for mcp_http_bridge.

Provides:
- Custom exception classes with error codes
- Error categorization (retryable, fatal, validation)
- Safe error message formatting (no credential leak)
"""

from __future__ import annotations

import errno
import re
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"


class BridgeError(Exception):
    """Base exception for all bridge errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    @property
    def retryable(self) -> bool:
        return self.category is ErrorCategory.RETRYABLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigError(BridgeError):
    """Invalid or missing startup configuration."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="CONFIG_ERROR", category=ErrorCategory.VALIDATION, details=details)


class InvalidMessageError(BridgeError):
    """An input unit that could not be parsed as a JSON-RPC message."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_MESSAGE", category=ErrorCategory.VALIDATION)


class UpstreamHttpError(BridgeError):
    """Upstream answered with a non-2xx status."""

    def __init__(
        self,
        status: int,
        reason: str,
        body: str = "",
        content_type: str = "",
    ):
        category = ErrorCategory.RETRYABLE if status >= 500 else ErrorCategory.FATAL
        super().__init__(
            f"HTTP {status}: {reason}",
            code="UPSTREAM_HTTP_ERROR",
            category=category,
            details={"status": status, "reason": reason},
        )
        self.status = status
        self.reason = reason
        self.body = body
        self.content_type = content_type


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"[a-zA-Z0-9]{32,}"),
    re.compile(r"sk-[a-zA-Z0-9]{20,}"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def is_connection_refused(exc: BaseException) -> bool:
    """Walk the cause/context chain looking for a refused TCP connect."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, ConnectionRefusedError):
            return True
        if isinstance(current, OSError) and current.errno == errno.ECONNREFUSED:
            return True
        if "connection refused" in str(current).lower():
            return True
        current = current.__cause__ or current.__context__
    return False
