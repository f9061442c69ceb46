"""Document data models."""

from datetime import date, datetime, time, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class DocumentMetadata(BaseModel):
    """Front matter of a single document.

    Keys other than the declared fields are kept as extras (see
    ``model_extra``) so newer front matter does not break the parser.
    """

    model_config = ConfigDict(extra="allow")

    title: str
    date: datetime
    draft: bool = False
    categories: list[str] = []
    tags: list[str] = []
    showpagemeta: bool = True
    slug: str | None = None

    @field_validator("title", "slug", mode="before")
    @classmethod
    def _scalar_to_str(cls, value: Any) -> Any:
        """YAML reads ``title: 1984`` as an int and ``slug: 2017-10-30`` as a date."""
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, (date, time)):
            return value.isoformat()
        return value

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Any:
        """Accept bare dates and ISO strings, including a trailing ``Z``.

        Numbers are rejected rather than read as Unix timestamps.
        """
        if isinstance(value, (int, float)):
            raise ValueError("date must be a date or an ISO 8601 string, not a number")
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time.min, tzinfo=timezone.utc)
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.strip())
            except ValueError:
                # Let pydantic report the bad value
                return value
        return value

    @field_validator("date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("categories", "tags", mode="before")
    @classmethod
    def _coerce_terms(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple, set)):
            return [
                str(v) if isinstance(v, (int, float)) and not isinstance(v, bool) else v
                for v in value
            ]
        return value

    @field_validator("categories", "tags")
    @classmethod
    def _dedupe_terms(cls, value: list[str]) -> list[str]:
        seen: set[str] = set()
        terms: list[str] = []
        for term in value:
            term = term.strip()
            if term and term not in seen:
                seen.add(term)
                terms.append(term)
        return terms

    @property
    def extra(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    def to_front_matter(self) -> dict[str, Any]:
        """Return the metadata as a plain mapping, ready to be serialized."""
        data = self.model_dump()
        if data.get("slug") is None:
            data.pop("slug", None)
        return data


class Document(BaseModel):
    """One authored document: identity, metadata and verbatim body."""

    id: str
    metadata: DocumentMetadata
    body: str = ""
    source_path: str | None = None

    @property
    def title(self) -> str:
        return self.metadata.title

    @property
    def date(self) -> datetime:
        return self.metadata.date

    @property
    def draft(self) -> bool:
        return self.metadata.draft

    @property
    def categories(self) -> list[str]:
        return self.metadata.categories

    @property
    def tags(self) -> list[str]:
        return self.metadata.tags


class DocumentSummary(BaseModel):
    """Document metadata for index display."""

    id: str
    title: str
    date: datetime
    draft: bool = False
    categories: list[str] = []
    tags: list[str] = []
    showpagemeta: bool = True
    extra: dict[str, Any] = {}

    @classmethod
    def from_document(cls, document: Document) -> "DocumentSummary":
        meta = document.metadata
        return cls(
            id=document.id,
            title=meta.title,
            date=meta.date,
            draft=meta.draft,
            categories=meta.categories,
            tags=meta.tags,
            showpagemeta=meta.showpagemeta,
            extra=meta.extra,
        )


class DocumentDetail(DocumentSummary):
    """Full document data."""

    body: str

    @classmethod
    def from_document(cls, document: Document) -> "DocumentDetail":
        summary = DocumentSummary.from_document(document)
        return cls(**summary.model_dump(), body=document.body)


class DocumentIndex(BaseModel):
    """Document listing index."""

    documents: list[DocumentSummary]
    total: int


class TaxonomyIndex(BaseModel):
    """Term counts for categories and tags."""

    categories: dict[str, int]
    tags: dict[str, int]
