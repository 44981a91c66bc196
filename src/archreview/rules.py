"""Rule engine: the six architecture checks run over the fact cache.

Every check walks the files in collection order, skips files without a fact
bundle (those failed to parse) and only ever appends to the violation store.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from archreview.layers import classify_import, classify_path, has_segments, is_forbidden
from archreview.violations import ViolationCode

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence
    from pathlib import Path, PurePath

    from archreview.parser import FactCache, SourceFacts
    from archreview.violations import ViolationStore

logger = logging.getLogger(__name__)

INTERFACE_PREFIX = "I"
DOMAIN_ERROR_BASE = "DomainError"
NATIVE_ERROR = "Error"

# `: any` followed by whitespace, `;`, `,` or `)`.
_ANY_TYPE_RE = re.compile(r":\s*any(\s|;|,|\))")


@dataclass(frozen=True)
class RuleContext:
    """Inputs shared by all checks for one run."""

    files: Sequence[Path]
    cache: FactCache
    store: ViolationStore
    source_root: Path

    def parsed(self) -> Iterator[tuple[Path, SourceFacts]]:
        """Yield ``(path, facts)`` for every file that parsed successfully."""
        for path in self.files:
            facts = self.cache.get(path)
            if facts is not None:
                yield path, facts

    def directory(self, path: Path) -> PurePath:
        """Directory of *path* relative to the source root."""
        try:
            return path.parent.relative_to(self.source_root)
        except ValueError:
            return path.parent


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def check_layers(ctx: RuleContext) -> None:
    """Flag imports that point outward, away from the domain."""
    for path, facts in ctx.parsed():
        layer = classify_path(path, ctx.source_root)
        if layer is None:
            continue
        for imp in facts.imports:
            imported = classify_import(imp.module_path, path, ctx.source_root)
            if not is_forbidden(layer, imported):
                continue
            ctx.store.report(
                ViolationCode.LAYER_VIOLATION,
                path,
                imp.line,
                f"{layer.capitalize()} layer cannot import from {imported} layer "
                f"(import: {imp.module_path})",
            )


def check_interface_conventions(ctx: RuleContext) -> None:
    """Interface names carry the ``I`` prefix and a single interface names its file."""
    for path, facts in ctx.parsed():
        count = len(facts.interfaces)
        for iface in facts.interfaces:
            if not iface.name.startswith(INTERFACE_PREFIX):
                ctx.store.report(
                    ViolationCode.INTERFACE_NAMING,
                    path,
                    iface.line,
                    f"Interface '{iface.name}' should be prefixed with "
                    f"'{INTERFACE_PREFIX}' (e.g., {INTERFACE_PREFIX}{iface.name})",
                )

            if count == 1 and path.stem != iface.name:
                ctx.store.report(
                    ViolationCode.FILE_NAMING,
                    path,
                    iface.line,
                    f"File name '{path.name}' should match interface name '{iface.name}.ts'",
                )

            if count > 1:
                ctx.store.report(
                    ViolationCode.MULTIPLE_INTERFACES,
                    path,
                    None,
                    f"File contains {count} interfaces. Consider splitting into separate files.",
                )
                break


def check_repository_pattern(ctx: RuleContext) -> None:
    """Repository contracts live in the domain, implementations in infrastructure/repositories."""
    for path, facts in ctx.parsed():
        directory = ctx.directory(path)

        for iface in facts.interfaces:
            if "Repository" in iface.name and not has_segments(directory, "domain"):
                ctx.store.report(
                    ViolationCode.REPOSITORY_LOCATION,
                    path,
                    iface.line,
                    f"Repository interface '{iface.name}' should be in domain/interfaces/",
                )

        for cls in facts.classes:
            if "Repository" not in cls.name:
                continue
            if not has_segments(directory, "infrastructure", "repositories"):
                ctx.store.report(
                    ViolationCode.REPOSITORY_LOCATION,
                    path,
                    cls.line,
                    f"Repository implementation '{cls.name}' should be in "
                    "infrastructure/repositories/",
                )
            if not cls.has_constructor:
                ctx.store.report(
                    ViolationCode.REPOSITORY_DI,
                    path,
                    cls.line,
                    f"Repository '{cls.name}' should use constructor injection for dependencies",
                )


def check_service_pattern(ctx: RuleContext) -> None:
    """Service contracts live in the application layer; services use constructor injection."""
    for path, facts in ctx.parsed():
        directory = ctx.directory(path)

        for iface in facts.interfaces:
            if iface.name.endswith("Service") and not has_segments(directory, "application"):
                ctx.store.report(
                    ViolationCode.SERVICE_LOCATION,
                    path,
                    iface.line,
                    f"Service interface '{iface.name}' should typically be in "
                    "application/interfaces/",
                )

        for cls in facts.classes:
            if cls.name.endswith("Service") and not cls.has_constructor:
                ctx.store.report(
                    ViolationCode.SERVICE_DI,
                    path,
                    cls.line,
                    f"Service '{cls.name}' should use constructor injection for dependencies",
                )


def check_domain_errors(ctx: RuleContext) -> None:
    """Error classes extend DomainError (or at least Error)."""
    for path, facts in ctx.parsed():
        in_domain = has_segments(ctx.directory(path), "domain")

        for cls in facts.classes:
            if "Error" not in cls.name:
                continue
            extends_domain_error = any(DOMAIN_ERROR_BASE in ref for ref in cls.extends)
            extends_error = NATIVE_ERROR in cls.extends

            if not extends_domain_error and not extends_error:
                ctx.store.report(
                    ViolationCode.ERROR_INHERITANCE,
                    path,
                    cls.line,
                    f"Error class '{cls.name}' should extend {DOMAIN_ERROR_BASE} or {NATIVE_ERROR}",
                )

            if extends_error and not extends_domain_error and in_domain:
                ctx.store.report(
                    ViolationCode.USE_DOMAIN_ERROR,
                    path,
                    cls.line,
                    f"Error class '{cls.name}' should extend {DOMAIN_ERROR_BASE} "
                    f"instead of {NATIVE_ERROR}",
                )


def count_any_usages(content: str) -> int:
    """Count ``: any`` annotations in raw source text (strings and comments included)."""
    return len(_ANY_TYPE_RE.findall(content))


def check_any_usage(ctx: RuleContext) -> None:
    """One file-level warning per file annotated with ``any``."""
    for path, facts in ctx.parsed():
        matches = count_any_usages(facts.content)
        if matches:
            ctx.store.report(
                ViolationCode.ANY_TYPE,
                path,
                None,
                f"Found {matches} usage(s) of 'any' type. Consider using specific types.",
            )


ALL_CHECKS: tuple[Callable[[RuleContext], None], ...] = (
    check_layers,
    check_interface_conventions,
    check_repository_pattern,
    check_service_pattern,
    check_domain_errors,
    check_any_usage,
)


def run_checks(ctx: RuleContext) -> None:
    """Run every check in order."""
    for check in ALL_CHECKS:
        before = ctx.store.result.stats.total_violations
        check(ctx)
        logger.debug(
            "%s: %d violation(s)", check.__name__, ctx.store.result.stats.total_violations - before
        )
