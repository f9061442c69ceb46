"""Slugs and document identity."""

import re
from pathlib import Path, PurePath
from unicodedata import normalize

from corpus.models.document import DocumentMetadata

_NON_WORD_RE = re.compile(r"[^\w\s-]")
_SEPARATOR_RE = re.compile(r"[\s_-]+")


def slugify(text: str, max_len: int = 80) -> str:
    """Convert text to a lowercase, ASCII, hyphen-separated slug.

    >>> slugify("Speed up your Rails specs!")
    'speed-up-your-rails-specs'
    >>> slugify("Café à Paris")
    'cafe-a-paris'
    """
    # NFKD splits accented letters so the ASCII encode keeps the base letter
    ascii_text = normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = _NON_WORD_RE.sub("", ascii_text.strip().lower())
    slug = _SEPARATOR_RE.sub("-", slug).strip("-")
    if len(slug) > max_len:
        slug = slug[:max_len].rstrip("-")
    return slug or "untitled"


def identity_from_path(path: str | PurePath, root: str | PurePath | None = None) -> str:
    """Identity of a file: its path below *root*, suffix dropped, each segment slugified."""
    path = PurePath(path)
    if root is not None:
        path = path.relative_to(root)
    parts = [*path.parent.parts, path.stem]
    return "/".join(slugify(part) for part in parts if part != path.anchor)


def derive_identity(
    metadata: DocumentMetadata,
    path: str | Path | None = None,
    root: str | Path | None = None,
) -> str:
    """Pick the identity of a document.

    An explicit ``slug`` in the front matter wins. Otherwise the file path
    is used, and documents without a path fall back to
    ``YYYY-MM-DD-<title slug>``. Collisions are left to the caller.
    """
    if metadata.slug and metadata.slug.strip():
        return slugify(metadata.slug)
    if path is not None:
        return identity_from_path(path, root)
    return f"{metadata.date:%Y-%m-%d}-{slugify(metadata.title)}"
