"""Display normalization for resolved source paths.

Source maps record sources relative to wherever the bundler ran
(``../../src/app.ts``, ``webpack:///./src/app.ts``). For display and for
``path:line:column`` export, paths are rewritten to start at the project
root marker (``/src/...``). This never feeds back into matching.
"""

from __future__ import annotations

from stack_resolver.models.frame import DEFAULT_ALIAS, DEFAULT_ROOT_MARKER, ResolvedFrame

RELATIVE_MARKERS = ("../../", "../", "./")


def normalize_path(
    path: str,
    root_marker: str = DEFAULT_ROOT_MARKER,
    alias: str = DEFAULT_ALIAS,
) -> str:
    """Canonicalize a source path for display.

    Leading relative markers and the alias are stripped repeatedly. If a
    ``/marker/`` segment occurs, everything before it is dropped; a
    leading ``marker/`` gains a slash. Otherwise the result gets exactly
    one leading slash. Normalizing twice gives the same result.

    Args:
        path: Source path as recorded in the source map
        root_marker: Project-root directory name
        alias: Script-root alias to strip

    Returns:
        Normalized path, or an empty string for an empty input
    """
    if not path:
        return ""

    markers = [*RELATIVE_MARKERS, alias] if alias else list(RELATIVE_MARKERS)
    normalized = path

    stripped = True
    while stripped:
        stripped = False
        for marker in markers:
            if normalized.startswith(marker):
                normalized = normalized[len(marker) :]
                stripped = True

    segment = f"/{root_marker}/"
    index = normalized.find(segment)
    if index != -1:
        return normalized[index:]
    if normalized.startswith(f"{root_marker}/"):
        return "/" + normalized

    return "/" + normalized.lstrip("/")


def format_location(
    frame: ResolvedFrame,
    root_marker: str | None = None,
    alias: str | None = None,
) -> str:
    """Render a frame as ``path:line:column`` for export.

    Mapped frames use the original position; unmapped frames fall back
    to the compiled one. Display settings default to those the frame
    was resolved with.
    """
    path = normalize_path(
        frame.source,
        root_marker=frame.root_marker if root_marker is None else root_marker,
        alias=frame.alias if alias is None else alias,
    )
    if frame.has_mapping and frame.original_line is not None:
        line = frame.original_line
        column = frame.original_column if frame.original_column is not None else frame.compiled_column
    else:
        line = frame.compiled_line
        column = frame.compiled_column
    return f"{path}:{line}:{column}"
