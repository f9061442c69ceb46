"""Document query service: loads the content directory and answers listing queries."""

import logging
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path

from corpus.config import get_settings
from corpus.models.document import (
    DocumentDetail,
    DocumentIndex,
    DocumentSummary,
    TaxonomyIndex,
)
from corpus.services.cache import TTLCache
from corpus.services.listing import DocumentListing, list_documents
from corpus.services.loader import LoadedCorpus, load_corpus

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Lazy singleton, TTL comes from settings
_cache: TTLCache | None = None


def _get_cache() -> TTLCache:
    global _cache
    if _cache is None:
        _cache = TTLCache(ttl=get_settings().corpus_cache_ttl, max_size=4)
    return _cache


def resolve_content_dir() -> Path:
    """Configured content directory; relative paths fall back to the project root."""
    path = Path(get_settings().content_dir).expanduser()
    if path.is_absolute() or path.is_dir():
        return path
    return PROJECT_ROOT / path


def check_content_dir() -> bool:
    """Lightweight content check: the directory exists."""
    return resolve_content_dir().is_dir()


def get_corpus() -> LoadedCorpus:
    """Load the configured content directory, reusing a recent load if there is one."""
    settings = get_settings()
    root = resolve_content_dir()
    cache = _get_cache()

    corpus = cache.get(str(root))
    if corpus is None:
        corpus = load_corpus(
            root,
            on_error=settings.corpus_on_error,
            extensions=tuple(settings.content_extensions),
        )
        cache.set(str(root), corpus)
    return corpus


def _listing(include_drafts: bool) -> DocumentListing:
    settings = get_settings()
    published_before = None if settings.include_future else datetime.now(timezone.utc)
    return list_documents(
        get_corpus().documents,
        include_drafts=include_drafts,
        published_before=published_before,
    )


def get_document_index(
    category: str | None = None,
    tag: str | None = None,
    search: str | None = None,
    include_drafts: bool = False,
    limit: int = 0,
    offset: int = 0,
) -> DocumentIndex:
    """List documents newest first.

    Args:
        category: Only documents in this category (case-insensitive).
        tag: Only documents with this tag (case-insensitive).
        search: Substring matched against title and body (case-insensitive).
        include_drafts: Keep draft documents.
        limit: Maximum number of documents to return (0 = unlimited).
        offset: Number of documents to skip before returning results.
    """
    documents = list(_listing(include_drafts))

    if category:
        category_lower = category.lower()
        documents = [
            d for d in documents if category_lower in [c.lower() for c in d.categories]
        ]

    if tag:
        tag_lower = tag.lower()
        documents = [d for d in documents if tag_lower in [t.lower() for t in d.tags]]

    if search:
        search_lower = search.lower()
        documents = [
            d
            for d in documents
            if search_lower in d.title.lower() or search_lower in d.body.lower()
        ]

    total = len(documents)

    if offset > 0:
        documents = documents[offset:]
    if limit > 0:
        documents = documents[:limit]

    return DocumentIndex(
        documents=[DocumentSummary.from_document(d) for d in documents],
        total=total,
    )


def get_document(doc_id: str, include_drafts: bool = False) -> DocumentDetail | None:
    """Get a single listed document by identity, or None."""
    for doc in _listing(include_drafts):
        if doc.id == doc_id:
            return DocumentDetail.from_document(doc)
    return None


def get_taxonomies() -> TaxonomyIndex:
    """Count categories and tags across published documents, most used first."""
    categories: Counter[str] = Counter()
    tags: Counter[str] = Counter()
    for doc in _listing(include_drafts=False):
        categories.update(doc.categories)
        tags.update(doc.tags)

    def _ordered(counts: Counter[str]) -> dict[str, int]:
        return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0].lower())))

    return TaxonomyIndex(categories=_ordered(categories), tags=_ordered(tags))
