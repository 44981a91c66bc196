"""Layer classifier: map file paths and import specifiers to architecture layers.

Classification is a cheap path heuristic, not module resolution.  A bare
package whose name happens to contain ``/domain/`` is classified as
``domain`` even though it is external.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath

# Segment name -> layer label, in matching order.
LAYERS: tuple[str, ...] = ("domain", "application", "infrastructure", "utils")

# Allowed direction is infrastructure -> application -> domain.
# Maps a layer to the layers it must never import from.
FORBIDDEN_IMPORTS: dict[str, frozenset[str]] = {
    "domain": frozenset({"application", "infrastructure"}),
    "application": frozenset({"infrastructure"}),
}


def classify_path(file_path: PurePath, source_root: PurePath) -> str | None:
    """Return the layer of *file_path*, or ``None`` when unclassified.

    The first segment below *source_root* decides the layer, but only when a
    further segment follows it: ``domain/User.ts`` is ``domain`` while a file
    named ``domain.ts`` at the root is not.
    """
    try:
        parts = file_path.relative_to(source_root).parts
    except ValueError:
        return None
    if len(parts) < 2:
        return None
    return parts[0] if parts[0] in LAYERS else None


def classify_import(specifier: str, importing_file: Path, source_root: Path) -> str | None:
    """Return the layer an import specifier points into.

    Relative specifiers are resolved lexically against the importing file's
    directory and classified like a file path.  Anything else is matched by
    ``/<layer>/`` substring; no match means an external dependency.
    """
    if specifier.startswith("."):
        resolved = Path(os.path.normpath(importing_file.parent / specifier))
        return classify_path(resolved, source_root)

    for layer in LAYERS:
        if f"/{layer}/" in specifier:
            return layer
    return None


def is_forbidden(from_layer: str | None, to_layer: str | None) -> bool:
    """Return True if a file in *from_layer* may not import *to_layer*."""
    if from_layer is None or to_layer is None:
        return False
    return to_layer in FORBIDDEN_IMPORTS.get(from_layer, frozenset())


def has_segments(relative_dir: PurePath, *segments: str) -> bool:
    """Return True if *segments* appear consecutively among the directory parts."""
    parts = relative_dir.parts
    width = len(segments)
    return any(parts[i : i + width] == segments for i in range(len(parts) - width + 1))
