"""Load the content directory and print the document listing.

Usage:
    python -m scripts.check_corpus                  # Published documents, fail on errors
    python -m scripts.check_corpus --drafts         # Include drafts
    python -m scripts.check_corpus --skip-errors    # Skip malformed documents, report them

Exits 1 when any document is malformed or two documents share an identity.
"""

import logging
import sys

from corpus.config import get_settings
from corpus.services.documents import resolve_content_dir
from corpus.services.errors import CorpusError
from corpus.services.listing import list_documents
from corpus.services.loader import ErrorPolicy, load_corpus

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    include_drafts = "--drafts" in argv
    policy = ErrorPolicy.SKIP if "--skip-errors" in argv else ErrorPolicy.FAIL

    settings = get_settings()
    root = resolve_content_dir()
    print(f"Loading documents from {root} (on error: {policy.value})...")

    try:
        corpus = load_corpus(
            root, on_error=policy, extensions=tuple(settings.content_extensions)
        )
        listing = list(list_documents(corpus.documents, include_drafts=include_drafts))
    except (CorpusError, FileNotFoundError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"\n{len(listing)} documents:")
    for doc in listing:
        flag = " [draft]" if doc.draft else ""
        print(f"  {doc.date:%Y-%m-%d}  {doc.id}  {doc.title}{flag}")

    if corpus.errors:
        print(f"\n{len(corpus.errors)} skipped:")
        for error in corpus.errors:
            print(f"  {error.message}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
