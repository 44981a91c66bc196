"""archreview - Clean Architecture review for TypeScript projects."""

from __future__ import annotations

from archreview.config import ReviewOptions
from archreview.errors import ParseError, ReviewError
from archreview.reviewer import CodeReviewer
from archreview.violations import ReviewResult, Severity, Violation, ViolationCode

__version__ = "0.1.0"

__all__ = [
    "CodeReviewer",
    "ParseError",
    "ReviewError",
    "ReviewOptions",
    "ReviewResult",
    "Severity",
    "Violation",
    "ViolationCode",
    "__version__",
]
