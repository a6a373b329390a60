# Area: Shared
"""
Shared utilities used by the public modules.

This package contains:
- Logging configuration
- GraphQL documents for the event indexer
"""

from .logging_config import setup_logging, log_sdk_error
from .graphql import build_event_query, EVENT_ENTITIES

__all__ = [
    "setup_logging",
    "log_sdk_error",
    "build_event_query",
    "EVENT_ENTITIES",
]
