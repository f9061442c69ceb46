"""Load a content directory into a corpus of documents.

Each file is parsed on its own. Parsed documents are cached by file mtime so
an unchanged file is only read and parsed once.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from corpus.models.document import Document
from corpus.services.errors import MalformedMetadata
from corpus.services.frontmatter import parse_document

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".md", ".markdown")

# Parsed documents keyed by (path, root), with the mtime they were parsed at
_document_cache: dict[tuple[str, str], tuple[float, Document]] = {}


class ErrorPolicy(str, Enum):
    """What to do with a document whose front matter is malformed."""

    # Abort loading and surface the error to the caller
    FAIL = "fail"
    # Log a warning, record the error, and carry on without the document
    SKIP = "skip"


@dataclass
class LoadError:
    """A document that was skipped under ErrorPolicy.SKIP."""

    path: str
    message: str


@dataclass
class LoadedCorpus:
    """Documents loaded from one content directory."""

    root: str
    documents: list[Document] = field(default_factory=list)
    errors: list[LoadError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "root": self.root,
            "documents": len(self.documents),
            "errors": [{"path": e.path, "message": e.message} for e in self.errors],
        }


def _iter_content_files(root: Path, extensions: tuple[str, ...]) -> list[Path]:
    """Content files below *root* in path order, skipping hidden files and dirs."""
    suffixes = {ext.lower() for ext in extensions}
    files = []
    for path in root.rglob("*"):
        relative = path.relative_to(root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if path.is_file() and path.suffix.lower() in suffixes:
            files.append(path)
    return sorted(files)


def load_document(path: str | Path, root: str | Path | None = None) -> Document:
    """Read and parse a single file.

    Raises:
        MalformedMetadata: If the file is not UTF-8 or its front matter is bad.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    key = (str(path), str(root) if root is not None else "")
    mtime = os.path.getmtime(path)

    cached = _document_cache.get(key)
    if cached is not None and cached[0] == mtime:
        return cached[1]

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedMetadata(f"file is not valid UTF-8: {e}", str(path)) from e

    document = parse_document(text, source_path=path, root=root)
    _document_cache[key] = (mtime, document)
    return document


def _prune_cache(root: Path, paths: list[Path]) -> None:
    """Forget cached documents under *root* whose files are gone."""
    current = {(str(path), str(root)) for path in paths}
    stale = [key for key in _document_cache if key[1] == str(root) and key not in current]
    for key in stale:
        del _document_cache[key]
    if stale:
        logger.debug("Dropped %d cached documents no longer on disk", len(stale))


def load_corpus(
    root: str | Path,
    *,
    on_error: ErrorPolicy | str = ErrorPolicy.FAIL,
    extensions: tuple[str, ...] | list[str] = DEFAULT_EXTENSIONS,
) -> LoadedCorpus:
    """Load every content file below *root*.

    Args:
        root: Content directory.
        on_error: ``fail`` raises the first MalformedMetadata; ``skip`` logs
            it, records it in ``errors`` and leaves the document out.
        extensions: File suffixes treated as documents.

    Raises:
        FileNotFoundError: If *root* is not a directory.
        MalformedMetadata: Under ErrorPolicy.FAIL, for the first bad document.
    """
    root = Path(root)
    policy = ErrorPolicy(on_error)
    if not root.is_dir():
        raise FileNotFoundError(f"Content directory not found: {root}")

    corpus = LoadedCorpus(root=str(root))
    paths = _iter_content_files(root, tuple(extensions))
    _prune_cache(root, paths)
    for path in paths:
        try:
            corpus.documents.append(load_document(path, root))
        except MalformedMetadata as e:
            if policy is ErrorPolicy.FAIL:
                raise
            logger.warning("Skipping malformed document: %s", e)
            corpus.errors.append(LoadError(path=str(path), message=str(e)))

    logger.info(
        "Loaded %d documents from %s (%d skipped)",
        len(corpus.documents),
        root,
        len(corpus.errors),
    )
    return corpus
