"""Repository checker integration."""

from .decorate import decorate_message
from .repository import check_repository, parse_repository
from .source import CheckResult, FindingSource, HttpCheckerSource, JsonFileCheckerSource

__all__ = [
    "check_repository",
    "CheckResult",
    "decorate_message",
    "FindingSource",
    "HttpCheckerSource",
    "JsonFileCheckerSource",
    "parse_repository",
]
