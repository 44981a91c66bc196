"""Code reviewer: run the collect -> parse -> check -> report pipeline."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from archreview.collector import collect_source_files
from archreview.config import ReviewOptions
from archreview.errors import ParseError
from archreview.parser import FactCache
from archreview.report import print_report
from archreview.rules import RuleContext, run_checks
from archreview.violations import ViolationCode, ViolationStore

if TYPE_CHECKING:
    from collections.abc import Sequence

    from archreview.violations import ReviewResult

logger = logging.getLogger(__name__)


class CodeReviewer:
    """Reviews one TypeScript project for Clean Architecture violations.

    Every call to :meth:`analyze` starts from an empty fact cache and an
    empty violation store, so a reviewer can be reused and several reviewers
    can run side by side without sharing results.
    """

    def __init__(
        self,
        project_root: Path | str,
        options: ReviewOptions | None = None,
        *,
        console: Console | None = None,
    ) -> None:
        self.project_root = Path(os.path.abspath(project_root))
        self.options = options or ReviewOptions()
        self.source_root = Path(os.path.abspath(self.project_root / self.options.source_dir))
        self._console = console

    def analyze(self) -> ReviewResult:
        """Run the full review, print the report, and return the result.

        Raises
        ------
        ReviewError
            When the source directory does not exist.  Nothing is parsed and
            no report is printed in that case.
        """
        logger.info("Starting code review analysis of %s", self.project_root)
        if self.options.fix:
            logger.info("Auto-fix is not supported; reporting violations only")

        files = collect_source_files(self.source_root, extra_skip_dirs=self.options.skip_dirs)

        cache = FactCache()
        store = ViolationStore(self.project_root)
        self._parse_files(files, cache, store)

        run_checks(RuleContext(files=files, cache=cache, store=store, source_root=self.source_root))
        logger.info("Analysis complete: %d violation(s)", store.result.stats.total_violations)

        print_report(store.result, self.options, self._console or Console())
        return store.result

    def _parse_files(
        self, files: Sequence[Path], cache: FactCache, store: ViolationStore
    ) -> None:
        for path in files:
            try:
                cache.load(path)
            except ParseError as exc:
                logger.warning("Failed to parse %s: %s", path, exc)
                store.report(
                    ViolationCode.PARSE_ERROR, path, None, f"Failed to parse file: {exc}"
                )
                continue
            store.result.stats.files_scanned += 1
