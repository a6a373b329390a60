# Area: Shared
"""
rankify_sdk.errors — Custom exception classes
=============================================

Defines the exception hierarchy for derivation and reconstruction errors.
Each exception stores full context for structured logging.

Taxonomy
--------
MalformedInputError
    Bad permutation, wrong key length, invalid address. Raised before any
    partial result is produced.
NotFoundError
    Zero or more than one event where exactly one was expected.
UpstreamError
    The data source failed or returned data that does not fit the
    expected event shape.
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import json


class RankifySDKError(Exception):
    """Base exception for all rankify_sdk errors."""
    pass


class MalformedInputError(RankifySDKError):
    """Raised when an input violates a precondition of a pure operation."""

    def __init__(self, field: str, reason: str, value: Any = None):
        self.field = field
        self.reason = reason
        self.value = value
        super().__init__(f"Malformed '{field}': {reason}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="MALFORMED_INPUT",
            subject=self.field,
            context={"reason": self.reason, "value": self.value},
        )


class NotFoundError(RankifySDKError):
    """Raised when exactly one event was expected but not returned."""

    def __init__(self, entity: str, identifiers: Dict[str, Any], count: int = 0):
        self.entity = entity
        self.identifiers = identifiers
        self.count = count
        ids = ", ".join(f"{k}={v}" for k, v in identifiers.items())
        super().__init__(
            f"{entity} not found for {ids} (expected 1 event, got {count})"
        )

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="NOT_FOUND",
            subject=self.entity,
            context={"identifiers": self.identifiers, "events_returned": self.count},
        )


class UpstreamError(RankifySDKError):
    """Raised when the external data source fails or returns malformed data."""

    def __init__(self, source: str, message: str, cause: Optional[BaseException] = None):
        self.source = source
        self.message = message
        self.cause = cause
        super().__init__(f"Upstream '{source}' failed: {message}")

    def format_error_log(self) -> str:
        context: Dict[str, Any] = {"message": self.message}
        if self.cause is not None:
            context["cause"] = f"{self.cause.__class__.__name__}: {self.cause}"
        return _format_error_block(
            error_type="UPSTREAM_FAILURE",
            subject=self.source,
            context=context,
        )


def _format_error_block(
    error_type: str,
    subject: str,
    context: Dict[str, Any],
) -> str:
    """Format a structured error block for terminal output."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " RANKIFY SDK ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Subject:      {subject}",
        "",
        " ── CONTEXT " + "─" * 52,
        _indent_json(context),
        "",
        "=" * 64,
        "",
    ]

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        # Add leading space to each line
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
