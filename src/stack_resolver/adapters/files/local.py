"""Load source map documents from the local filesystem.

Supports:
- Single source map files (any extension, must be JSON)
- Directories, searched recursively for ``*.map`` files
- ZIP archives, whose ``*.map`` entries are loaded

Documents are returned in the order the paths were given; within a
directory or archive, entries are ordered by path.
"""

from __future__ import annotations

import json
import zipfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from ...models.sourcemap import SourceMapDocument
from ...utils.logging import LogEventNames

log = structlog.get_logger()

MAP_SUFFIX = ".map"


class SourceMapLoadError(ValueError):
    """An explicitly named file is not a usable source map."""


def _parse_json(text: str) -> dict[str, Any] | None:
    """Parse map JSON, returning None when it is not a JSON object."""
    # Some maps start with the XSSI guard ")]}'" on their own line
    if text.startswith(")]}"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    return data


def load_file(path: Path) -> SourceMapDocument:
    """Load a single source map file.

    Args:
        path: Path to the map file

    Returns:
        The loaded document, named after the file

    Raises:
        FileNotFoundError: If the file does not exist
        SourceMapLoadError: If the file is not a JSON object
    """
    if not path.is_file():
        raise FileNotFoundError(f"Source map file not found: {path}")

    text = path.read_text(encoding="utf-8", errors="replace")
    data = _parse_json(text)
    if data is None:
        raise SourceMapLoadError(
            f"File format error, {path} is not a valid JSON source map"
        )

    log.debug(LogEventNames.DOCUMENT_LOADED, name=path.name, path=str(path))
    return SourceMapDocument(name=path.name, content=data)


def load_directory(path: Path) -> list[SourceMapDocument]:
    """Load every ``*.map`` file below a directory.

    Files that are not valid JSON are skipped with a warning.
    """
    documents: list[SourceMapDocument] = []

    for map_path in sorted(path.rglob(f"*{MAP_SUFFIX}")):
        if not map_path.is_file():
            continue
        try:
            text = map_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            log.warning(LogEventNames.DOCUMENT_SKIPPED, path=str(map_path), error=str(e))
            continue

        name = map_path.relative_to(path).as_posix()
        data = _parse_json(text)
        if data is None:
            log.warning(LogEventNames.DOCUMENT_SKIPPED, path=str(map_path), reason="invalid_json")
            continue

        log.debug(LogEventNames.DOCUMENT_LOADED, name=name, path=str(map_path))
        documents.append(SourceMapDocument(name=name, content=data))

    return documents


def load_zip(path: Path) -> list[SourceMapDocument]:
    """Load every ``*.map`` entry in a ZIP archive.

    Raises:
        SourceMapLoadError: If the archive cannot be read
    """
    documents: list[SourceMapDocument] = []

    try:
        with zipfile.ZipFile(path) as archive:
            for info in sorted(archive.infolist(), key=lambda i: i.filename):
                if info.is_dir() or not info.filename.endswith(MAP_SUFFIX):
                    continue
                text = archive.read(info).decode("utf-8", errors="replace")
                data = _parse_json(text)
                if data is None:
                    log.warning(
                        LogEventNames.DOCUMENT_SKIPPED,
                        archive=str(path),
                        entry=info.filename,
                        reason="invalid_json",
                    )
                    continue

                log.debug(LogEventNames.DOCUMENT_LOADED, name=info.filename, archive=str(path))
                documents.append(SourceMapDocument(name=info.filename, content=data))
    except zipfile.BadZipFile as e:
        raise SourceMapLoadError(f"ZIP file parsing failed: {path}: {e}") from e

    return documents


def load_documents(paths: Iterable[Path]) -> list[SourceMapDocument]:
    """Load documents from a mix of files, directories and ZIP archives.

    Args:
        paths: Paths in upload order

    Returns:
        All loaded documents, preserving the order of ``paths``

    Raises:
        FileNotFoundError: If a path does not exist
        SourceMapLoadError: If an explicit file or archive is unusable
    """
    documents: list[SourceMapDocument] = []

    for path in paths:
        if path.is_dir():
            documents.extend(load_directory(path))
        elif path.suffix.lower() == ".zip":
            if not path.is_file():
                raise FileNotFoundError(f"Archive not found: {path}")
            documents.extend(load_zip(path))
        else:
            documents.append(load_file(path))

    return documents
