"""Violation taxonomy and the per-run violation store."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path


class Severity(enum.Enum):
    """Severity level of a violation."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ViolationCode(enum.Enum):
    """Closed set of violation codes, each with the severity it is reported at."""

    PARSE_ERROR = ("PARSE_ERROR", Severity.ERROR)
    LAYER_VIOLATION = ("LAYER_VIOLATION", Severity.ERROR)
    INTERFACE_NAMING = ("INTERFACE_NAMING", Severity.WARNING)
    FILE_NAMING = ("FILE_NAMING", Severity.WARNING)
    MULTIPLE_INTERFACES = ("MULTIPLE_INTERFACES", Severity.INFO)
    REPOSITORY_LOCATION = ("REPOSITORY_LOCATION", Severity.ERROR)
    REPOSITORY_DI = ("REPOSITORY_DI", Severity.WARNING)
    SERVICE_LOCATION = ("SERVICE_LOCATION", Severity.WARNING)
    SERVICE_DI = ("SERVICE_DI", Severity.WARNING)
    ERROR_INHERITANCE = ("ERROR_INHERITANCE", Severity.ERROR)
    USE_DOMAIN_ERROR = ("USE_DOMAIN_ERROR", Severity.WARNING)
    ANY_TYPE = ("ANY_TYPE", Severity.WARNING)

    def __init__(self, label: str, severity: Severity) -> None:
        self.label = label
        self.severity = severity

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class Violation:
    """A single finding produced by one rule check."""

    severity: Severity
    file: str  # posix path relative to the project root
    line: int | None
    code: ViolationCode
    message: str

    @property
    def location(self) -> str:
        """``file:line``, or just ``file`` for file-level findings."""
        if self.line is None:
            return self.file
        return f"{self.file}:{self.line}"

    def to_dict(self) -> dict[str, object]:
        return {
            "file": self.file,
            "line": self.line,
            "code": self.code.label,
            "message": self.message,
        }


@dataclass
class ReviewStats:
    """Aggregate counters for a review run."""

    files_scanned: int = 0
    total_violations: int = 0


@dataclass
class ReviewResult:
    """Violations of one run split into severity buckets, plus stats."""

    errors: list[Violation] = field(default_factory=list)
    warnings: list[Violation] = field(default_factory=list)
    info: list[Violation] = field(default_factory=list)
    stats: ReviewStats = field(default_factory=ReviewStats)

    @property
    def failed(self) -> bool:
        """Return True if any error-severity violation was recorded."""
        return bool(self.errors)

    def bucket(self, severity: Severity) -> list[Violation]:
        if severity is Severity.ERROR:
            return self.errors
        if severity is Severity.WARNING:
            return self.warnings
        return self.info

    def all(self) -> list[Violation]:
        """All violations, errors first, then warnings, then info."""
        return [*self.errors, *self.warnings, *self.info]


class ViolationStore:
    """Accumulates violations for a single run.

    Paths are stored relative to *project_root*.  Nothing is deduplicated:
    recording the same finding twice yields two entries.
    """

    def __init__(self, project_root: Path) -> None:
        self._project_root = project_root
        self.result = ReviewResult()

    def add(
        self,
        severity: Severity,
        file_path: Path,
        line: int | None,
        code: ViolationCode,
        message: str,
    ) -> Violation:
        """Record a violation and return it."""
        violation = Violation(
            severity=severity,
            file=self._relative(file_path),
            line=line,
            code=code,
            message=message,
        )
        self.result.bucket(severity).append(violation)
        self.result.stats.total_violations += 1
        return violation

    def report(
        self, code: ViolationCode, file_path: Path, line: int | None, message: str
    ) -> Violation:
        """Record a violation at the code's own severity."""
        return self.add(code.severity, file_path, line, code, message)

    def _relative(self, file_path: Path) -> str:
        # os.path.relpath tolerates files outside the root ("../x.ts").
        return Path(os.path.relpath(file_path, self._project_root)).as_posix()
