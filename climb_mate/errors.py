# climb_mate/errors.py
"""
Exception types raised by climb_mate.

Every error derives from ClimbMateError so callers (CLI, window) can catch the
whole family in one place.
"""
from __future__ import annotations

from typing import Any, Optional


class ClimbMateError(Exception):
    """Base exception for all climb_mate errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidGradeForRouteType(ClimbMateError, ValueError):
    """A grade that is not part of the route type's grade list."""

    def __init__(self, route_type: Any, grade: str):
        route_name = getattr(route_type, "value", route_type)
        super().__init__(f"Grade '{grade}' is not valid for route type '{route_name}'")
        self.route_type = route_type
        self.grade = grade


class InvalidRecord(ClimbMateError):
    """A stored record that cannot be converted into a video asset."""

    def __init__(self, record_id: str, reason: str):
        super().__init__(f"Invalid record '{record_id}': {reason}")
        self.record_id = record_id
        self.reason = reason


class StoreFormatError(ClimbMateError):
    """
    The store file exists but its content is not a valid record list.

    Examples:
        - Invalid JSON
        - Missing required keys
        - Unknown container format / route type
    """
    pass


class RecordNotFound(ClimbMateError, KeyError):
    def __init__(self, video_id: str):
        super().__init__(f"No video with id '{video_id}'")
        self.video_id = video_id

    def __str__(self) -> str:
        return self.message


class ConfigError(ClimbMateError):
    """Invalid configuration value."""
    pass
