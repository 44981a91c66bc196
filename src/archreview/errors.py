"""Exceptions raised by the review engine."""

from __future__ import annotations


class ReviewError(Exception):
    """Raised when a review cannot run at all (missing source root, bad config)."""


class ParseError(Exception):
    """Raised when a single source file cannot be read or parsed."""
