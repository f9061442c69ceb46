"""Corpus listing: newest first, drafts hidden unless asked for."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Iterator
from datetime import datetime

from corpus.models.document import Document
from corpus.services.errors import DuplicateIdentity

logger = logging.getLogger(__name__)


def check_unique_identities(documents: Iterable[Document]) -> None:
    """Raise DuplicateIdentity for the first identity held by two documents.

    Identities are checked in sorted order so the reported clash does not
    depend on the order the documents were loaded in.
    """
    sources: dict[str, list[str]] = defaultdict(list)
    for doc in documents:
        sources[doc.id].append(doc.source_path or doc.title)

    for identity in sorted(sources):
        if len(sources[identity]) > 1:
            raise DuplicateIdentity(identity, sources[identity])


class DocumentListing:
    """A lazy, restartable view over a set of documents.

    Nothing is checked or sorted until the listing is iterated, and every
    iteration starts over from the held documents::

        listing = DocumentListing(docs)
        newest = next(iter(listing))
        everything = list(listing)  # starts from the top again

    Order is ``date`` descending; documents sharing a date are ordered by
    identity ascending.
    """

    def __init__(
        self,
        documents: Iterable[Document],
        *,
        include_drafts: bool = False,
        published_before: datetime | None = None,
    ) -> None:
        self._documents = tuple(documents)
        self.include_drafts = include_drafts
        self.published_before = published_before

    def __iter__(self) -> Iterator[Document]:
        check_unique_identities(self._documents)

        # Two stable sorts: identity ascending first, then date descending
        ordered = sorted(self._documents, key=lambda d: d.id)
        ordered.sort(key=lambda d: d.date, reverse=True)

        for doc in ordered:
            if doc.draft and not self.include_drafts:
                continue
            if self.published_before is not None and doc.date > self.published_before:
                continue
            yield doc

    def __repr__(self) -> str:
        return (
            f"DocumentListing({len(self._documents)} documents, "
            f"include_drafts={self.include_drafts})"
        )


def list_documents(
    documents: Iterable[Document],
    *,
    include_drafts: bool = False,
    published_before: datetime | None = None,
) -> DocumentListing:
    """List documents newest first, excluding drafts unless *include_drafts*.

    Args:
        documents: Parsed documents. Identities must be unique.
        include_drafts: Keep documents whose front matter sets ``draft``.
        published_before: When set, drop documents dated after it.

    Raises:
        DuplicateIdentity: When the returned listing is iterated and two
            documents share an identity.
    """
    listing = DocumentListing(
        documents,
        include_drafts=include_drafts,
        published_before=published_before,
    )
    logger.debug("Created %r", listing)
    return listing
