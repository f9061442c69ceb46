"""Front matter parsing and serialization.

A document starts with a metadata block followed by its body:

    ---
    title: Speed up your test suite
    date: 2017-10-31T09:00:00-04:00
    tags: [rspec, rails]
    ---
    Body text, kept verbatim.

``---`` blocks are YAML; ``+++`` blocks are TOML. Parsing is pure: no I/O,
the caller supplies the text and, optionally, where it came from.
"""

import logging
import re
import tomllib
from collections.abc import Mapping
from datetime import time
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from corpus.models.document import Document, DocumentMetadata
from corpus.services.errors import MalformedMetadata
from corpus.services.slugs import derive_identity

logger = logging.getLogger(__name__)

YAML_DELIMITER = "---"
TOML_DELIMITER = "+++"

# Opening delimiter, block, closing delimiter on a line of its own
_BLOCK_PATTERNS = {
    delimiter: re.compile(
        rf"\A{re.escape(delimiter)}[ \t]*\r?\n(.*?)^{re.escape(delimiter)}[ \t]*\r?$\n?",
        re.DOTALL | re.MULTILINE,
    )
    for delimiter in (YAML_DELIMITER, TOML_DELIMITER)
}


def _without_times(value: Any) -> Any:
    """Replace TOML local times, which YAML has no type for, with ISO strings."""
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _without_times(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_without_times(v) for v in value]
    return value


def split_front_matter(
    text: str, source: str | None = None
) -> tuple[dict[str, Any], str]:
    """Split raw document text into (metadata mapping, body).

    Raises:
        MalformedMetadata: If there is no metadata block, it is not closed,
            it cannot be decoded, or it does not hold a mapping.
    """
    text = text.lstrip("\ufeff")

    for delimiter, pattern in _BLOCK_PATTERNS.items():
        if not text.startswith(delimiter):
            continue
        match = pattern.match(text)
        if match is None:
            raise MalformedMetadata(
                f"front matter opened with {delimiter!r} is never closed", source
            )
        block, body = match.group(1), text[match.end():]
        try:
            if delimiter == TOML_DELIMITER:
                data = _without_times(tomllib.loads(block))
            else:
                data = yaml.safe_load(block)
        except (yaml.YAMLError, tomllib.TOMLDecodeError) as e:
            raise MalformedMetadata(f"front matter cannot be decoded: {e}", source) from e

        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise MalformedMetadata(
                f"front matter must be a mapping, got {type(data).__name__}", source
            )
        return {str(k): v for k, v in data.items()}, body

    raise MalformedMetadata("document has no front matter block", source)


def parse_metadata(raw: Mapping[str, Any], source: str | None = None) -> DocumentMetadata:
    """Validate a raw metadata mapping.

    Raises:
        MalformedMetadata: If ``title`` or ``date`` is missing or any known
            field has the wrong shape.
    """
    try:
        return DocumentMetadata.model_validate(dict(raw))
    except ValidationError as e:
        details = e.errors()
        missing = [
            ".".join(str(p) for p in err["loc"])
            for err in details
            if err["type"] == "missing"
        ]
        messages = tuple(
            f"{'.'.join(str(p) for p in err['loc']) or 'metadata'}: {err['msg']}"
            for err in details
        )
        if missing:
            message = f"missing required field(s): {', '.join(missing)}"
        else:
            message = "invalid front matter"
        raise MalformedMetadata(message, source, messages) from e


def parse_document(
    text: str,
    *,
    identity: str | None = None,
    source_path: str | Path | None = None,
    root: str | Path | None = None,
) -> Document:
    """Parse raw document text into a :class:`Document`.

    Args:
        text: Full document text, front matter first.
        identity: Explicit identity. Derived from the metadata and
            *source_path* when omitted.
        source_path: Where the text came from; used for error messages and
            path-based identity.
        root: Content root that *source_path* is relative to.

    Raises:
        MalformedMetadata: See :func:`split_front_matter` and
            :func:`parse_metadata`.
    """
    source = str(source_path) if source_path is not None else None
    raw, body = split_front_matter(text, source)
    metadata = parse_metadata(raw, source)

    if metadata.extra:
        logger.debug(
            "Keeping unrecognized front matter keys %s in %s",
            sorted(metadata.extra),
            source or metadata.title,
        )

    return Document(
        id=identity or derive_identity(metadata, source_path, root),
        metadata=metadata,
        body=body,
        source_path=source,
    )


def dump_document(document: Document) -> str:
    """Serialize a document as YAML front matter followed by its body."""
    front = yaml.safe_dump(
        document.metadata.to_front_matter(),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    return f"{YAML_DELIMITER}\n{front}{YAML_DELIMITER}\n{document.body}"
