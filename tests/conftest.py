"""Shared test fixtures for stack-resolver."""

import json
from pathlib import Path
from typing import Any

import pytest

from stack_resolver.models.sourcemap import MappedPosition, SourceMapDocument

# Get the fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
SOURCEMAPS_DIR = FIXTURES_DIR / "sourcemaps"
STACKS_DIR = FIXTURES_DIR / "stacks"


def load_document(file_name: str) -> SourceMapDocument:
    """Load a fixture source map as a document named after its file."""
    content = json.loads((SOURCEMAPS_DIR / file_name).read_text())
    return SourceMapDocument(name=file_name, content=content)


class DictDecoder:
    """Decoder test double answering only exact (line, column) hits.

    The "index" is the dict passed through the document content under
    ``"positions"``; every query is recorded in ``queries``.
    """

    def __init__(self) -> None:
        self.decoded: list[str] = []
        self.queries: list[tuple[int, int]] = []

    def decode(self, document: SourceMapDocument) -> Any:
        self.decoded.append(document.name)
        return document.content["positions"]

    def query(self, index: Any, line: int, column: int) -> MappedPosition | None:
        self.queries.append((line, column))
        return index.get((line, column))


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sourcemaps_dir() -> Path:
    """Return the path to the fixture source maps."""
    return SOURCEMAPS_DIR


@pytest.fixture
def app_map() -> SourceMapDocument:
    """Two-source map for app.min.js with embedded sources."""
    return load_document("app.min.js.map")


@pytest.fixture
def vendor_map() -> SourceMapDocument:
    """Single-mapping map for vendor.min.js."""
    return load_document("vendor.min.js.map")


@pytest.fixture
def broken_map() -> SourceMapDocument:
    """Map for broken.min.js that has no mappings table."""
    return load_document("broken.min.js.map")


@pytest.fixture
def all_maps(
    app_map: SourceMapDocument,
    vendor_map: SourceMapDocument,
    broken_map: SourceMapDocument,
) -> list[SourceMapDocument]:
    """All fixture maps in upload order."""
    return [app_map, vendor_map, broken_map]


@pytest.fixture
def chrome_stack() -> str:
    """Load a V8/Chrome text stack trace."""
    return (STACKS_DIR / "chrome.txt").read_text()


@pytest.fixture
def sentry_stack() -> str:
    """Load a JSON stack trace with two malformed entries."""
    return (STACKS_DIR / "sentry.json").read_text()


@pytest.fixture
def dict_decoder() -> DictDecoder:
    """Return an exact-hit decoder test double."""
    return DictDecoder()
