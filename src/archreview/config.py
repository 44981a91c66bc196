"""Review options and the optional ``.archreview.yml`` project config."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Any

import yaml

from archreview.errors import ReviewError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".archreview.yml"
VALID_FORMATS: frozenset[str] = frozenset({"console", "json"})


@dataclass(frozen=True)
class ReviewOptions:
    """Options for one review run.

    ``fix`` is accepted for compatibility with callers that pass it, but no
    auto-fixing is performed.
    """

    detailed: bool = False
    format: str = "console"  # "console" | "json"
    fix: bool = False
    source_dir: str = "src"
    skip_dirs: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.format not in VALID_FORMATS:
            msg = f"invalid format '{self.format}', must be one of {sorted(VALID_FORMATS)}"
            raise ReviewError(msg)

    def merged(self, **overrides: Any) -> ReviewOptions:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_options(project_root: Path) -> ReviewOptions:
    """Load review options from ``<project_root>/.archreview.yml``.

    Only the ``review`` section is read.  A missing file gives the defaults; an
    unreadable or malformed file logs a warning and gives the defaults too.

    Raises
    ------
    ReviewError
        When the file sets an invalid ``format``.
    """
    config_path = project_root / CONFIG_FILENAME
    if not config_path.is_file():
        return ReviewOptions()

    try:
        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError):
        logger.warning("Failed to read %s, using default options", CONFIG_FILENAME)
        return ReviewOptions()

    if not isinstance(data, dict):
        return ReviewOptions()
    section = data.get("review")
    if not isinstance(section, dict):
        return ReviewOptions()

    known = {f.name for f in fields(ReviewOptions)}
    kwargs: dict[str, Any] = {}
    for key, value in section.items():
        if key not in known:
            logger.warning("Ignoring unknown option '%s' in %s", key, CONFIG_FILENAME)
            continue
        if value is None:
            continue
        if key == "skip_dirs":
            kwargs[key] = tuple(str(v) for v in value) if isinstance(value, list) else (str(value),)
        elif key in ("detailed", "fix"):
            if not isinstance(value, bool):
                logger.warning(
                    "Ignoring option '%s' in %s: expected true or false, got %r",
                    key,
                    CONFIG_FILENAME,
                    value,
                )
                continue
            kwargs[key] = value
        else:
            kwargs[key] = str(value)

    return ReviewOptions(**kwargs)
