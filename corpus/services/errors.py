"""Errors raised while loading and listing the document corpus."""


class CorpusError(Exception):
    """Base class for corpus errors."""

    pass


class MalformedMetadata(CorpusError):
    """A document's front matter is missing, unparsable, or fails validation.

    ``errors`` holds one human-readable line per offending field when the
    failure came from field validation.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        errors: tuple[str, ...] = (),
    ) -> None:
        self.message = message
        self.source = source
        self.errors = tuple(errors)
        super().__init__(str(self))

    def __str__(self) -> str:
        prefix = f"{self.source}: " if self.source else ""
        if self.errors:
            return f"{prefix}{self.message} ({'; '.join(self.errors)})"
        return f"{prefix}{self.message}"


class DuplicateIdentity(CorpusError):
    """Two or more documents resolve to the same identity."""

    def __init__(self, identity: str, sources: list[str]) -> None:
        self.identity = identity
        self.sources = list(sources)
        super().__init__(
            f"Identity {identity!r} is shared by: {', '.join(self.sources)}"
        )
