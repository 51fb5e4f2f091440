"""
Error types raised while collecting and publishing build metrics.
"""

from typing import Optional


class PublisherError(Exception):
    """Base exception for all publisher errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidTargetURL(PublisherError):
    """
    Raised when a target endpoint cannot be parsed.

    The publication loop skips the target and moves on.
    """

    def __init__(self, url: Optional[str]):
        self.url = url
        super().__init__(f"Invalid target URL: {url!r}")


class GeneratorUnavailable(PublisherError):
    """Raised when the integration that provides a report is not installed."""

    def __init__(self, plugin: str):
        self.plugin = plugin
        super().__init__(f"Report integration not available: {plugin}")


class ReportParseError(PublisherError):
    """
    Raised when report data is present but malformed.

    Examples:
    - Negative test counts
    - Coverage percentages outside 0..100
    - A report handle that is not a mapping
    """

    pass


class PublishError(PublisherError):
    """Raised when a write fails for a target that exposes its exceptions."""

    def __init__(self, message: str, target: Optional[str] = None):
        self.target = target
        super().__init__(message)
