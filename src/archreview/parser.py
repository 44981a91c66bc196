"""Parser cache: tree-sitter parsing of TypeScript files into fact bundles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Parser

from archreview.errors import ParseError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from tree_sitter import Node as TSNode

logger = logging.getLogger(__name__)

_ANONYMOUS = "anonymous"


# ---------------------------------------------------------------------------
# Facts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ImportFact:
    """An import declaration with a string module specifier."""

    module_path: str
    line: int


@dataclass(frozen=True)
class ExportFact:
    """An export statement; ``name`` is None for re-exports and default expressions."""

    name: str | None
    line: int


@dataclass(frozen=True)
class ClassFact:
    """A class declaration and its heritage."""

    name: str
    line: int
    has_constructor: bool
    extends: tuple[str, ...] = ()
    implements: tuple[str, ...] = ()


@dataclass(frozen=True)
class InterfaceFact:
    """An interface declaration."""

    name: str
    line: int
    extends: tuple[str, ...] = ()


@dataclass(frozen=True)
class SourceFacts:
    """Everything the rule checks need to know about one source file."""

    path: Path
    content: str
    imports: tuple[ImportFact, ...] = ()
    exports: tuple[ExportFact, ...] = ()
    classes: tuple[ClassFact, ...] = ()
    interfaces: tuple[InterfaceFact, ...] = ()


# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------

# Loaded once per process; Language objects are immutable.
_LANG_CACHE: dict[str, Language] = {}


def get_language() -> Language:
    """Return the (lazily loaded) tree-sitter TypeScript language."""
    language = _LANG_CACHE.get("typescript")
    if language is None:
        language = Language(tstypescript.language_typescript())
        _LANG_CACHE["typescript"] = language
    return language


# ---------------------------------------------------------------------------
# Node helpers
# ---------------------------------------------------------------------------


def _text(node: TSNode | None) -> str:
    if node is None or not node.text:
        return ""
    return node.text.decode("utf-8")


def _line(node: TSNode) -> int:
    """1-based line of a declaration, counting an enclosing ``export`` and its decorators."""
    anchor = node
    if node.parent is not None and node.parent.type == "export_statement":
        anchor = node.parent
    return anchor.start_point.row + 1


def _walk(root: TSNode) -> Iterator[TSNode]:
    """Yield every node in document order, always descending into children."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _heritage_refs(clause: TSNode) -> tuple[str, ...]:
    """Type references named by an ``extends``/``implements`` clause."""
    return tuple(
        _text(child) for child in clause.named_children if child.type != "type_arguments"
    )


def _has_constructor(class_node: TSNode) -> bool:
    body = class_node.child_by_field_name("body")
    if body is None:
        return False
    for member in body.named_children:
        if member.type in ("method_definition", "method_signature"):
            if _text(member.child_by_field_name("name")) == "constructor":
                return True
    return False


# ---------------------------------------------------------------------------
# Visitors
# ---------------------------------------------------------------------------


@dataclass
class _Collected:
    imports: list[ImportFact]
    exports: list[ExportFact]
    classes: list[ClassFact]
    interfaces: list[InterfaceFact]


def _visit_import(node: TSNode, out: _Collected) -> None:
    # `import x = require("y")` keeps its source on the require clause; skip it.
    source = node.child_by_field_name("source")
    if source is None or source.type != "string":
        return
    out.imports.append(ImportFact(module_path=_text(source)[1:-1], line=node.start_point.row + 1))


def _export_name(node: TSNode) -> str | None:
    declaration = node.child_by_field_name("declaration")
    if declaration is None:
        return None
    name = declaration.child_by_field_name("name")
    if name is not None:
        return _text(name)
    # export const a = 1, b = 2;
    for child in declaration.named_children:
        if child.type == "variable_declarator":
            return _text(child.child_by_field_name("name")) or None
    return None


def _visit_export(node: TSNode, out: _Collected) -> None:
    out.exports.append(ExportFact(name=_export_name(node), line=node.start_point.row + 1))


def _visit_class(node: TSNode, out: _Collected) -> None:
    # Class expressions only count as declarations in `export default class {}`.
    if node.type == "class" and (
        not node.is_named or node.parent is None or node.parent.type != "export_statement"
    ):
        return

    extends: tuple[str, ...] = ()
    implements: tuple[str, ...] = ()
    for child in node.children:
        if child.type != "class_heritage":
            continue
        for clause in child.named_children:
            if clause.type == "extends_clause":
                extends = _heritage_refs(clause)
            elif clause.type == "implements_clause":
                implements = _heritage_refs(clause)

    out.classes.append(
        ClassFact(
            name=_text(node.child_by_field_name("name")) or _ANONYMOUS,
            line=_line(node),
            has_constructor=_has_constructor(node),
            extends=extends,
            implements=implements,
        )
    )


def _visit_interface(node: TSNode, out: _Collected) -> None:
    extends: tuple[str, ...] = ()
    for child in node.named_children:
        if child.type == "extends_type_clause":
            extends = _heritage_refs(child)
    out.interfaces.append(
        InterfaceFact(
            name=_text(node.child_by_field_name("name")),
            line=_line(node),
            extends=extends,
        )
    )


_VISITORS: dict[str, Callable[[TSNode, _Collected], None]] = {
    "import_statement": _visit_import,
    "export_statement": _visit_export,
    "class_declaration": _visit_class,
    "abstract_class_declaration": _visit_class,
    "class": _visit_class,
    "interface_declaration": _visit_interface,
}


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def extract_facts(path: Path, content: str, parser: Parser | None = None) -> SourceFacts:
    """Parse *content* and extract its fact bundle.

    tree-sitter recovers from syntax errors, so a malformed file still yields
    whatever declarations the parser could make sense of.
    """
    if parser is None:
        parser = Parser(get_language())
    tree = parser.parse(content.encode("utf-8"))

    out = _Collected(imports=[], exports=[], classes=[], interfaces=[])
    for node in _walk(tree.root_node):
        visitor = _VISITORS.get(node.type)
        if visitor is not None:
            visitor(node, out)

    return SourceFacts(
        path=path,
        content=content,
        imports=tuple(out.imports),
        exports=tuple(out.exports),
        classes=tuple(out.classes),
        interfaces=tuple(out.interfaces),
    )


def parse_source(path: Path, parser: Parser | None = None) -> SourceFacts:
    """Read and parse a single file.

    Bytes that are not valid UTF-8 are replaced with U+FFFD.

    Raises
    ------
    ParseError
        When the file cannot be read.
    """
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ParseError(str(exc)) from exc
    return extract_facts(path, content, parser)


class FactCache:
    """Fact bundles for one run, keyed by absolute path.

    Each path is parsed at most once; a failed parse leaves no entry.
    """

    def __init__(self) -> None:
        self._facts: dict[Path, SourceFacts] = {}
        self._parser = Parser(get_language())

    def load(self, path: Path) -> SourceFacts:
        """Return the cached bundle for *path*, parsing it on first use."""
        key = path.absolute()
        cached = self._facts.get(key)
        if cached is not None:
            return cached
        facts = parse_source(key, self._parser)
        self._facts[key] = facts
        logger.debug(
            "Parsed %s: %d imports, %d classes, %d interfaces",
            key,
            len(facts.imports),
            len(facts.classes),
            len(facts.interfaces),
        )
        return facts

    def get(self, path: Path) -> SourceFacts | None:
        return self._facts.get(path.absolute())

    def __len__(self) -> int:
        return len(self._facts)
