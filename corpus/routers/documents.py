"""Document listing endpoints."""

from fastapi import APIRouter, HTTPException, Query

from corpus.models.document import DocumentDetail, DocumentIndex, TaxonomyIndex
from corpus.services.documents import get_document, get_document_index, get_taxonomies

router = APIRouter(tags=["documents"])


@router.get("/documents", response_model=DocumentIndex)
async def list_documents(
    category: str | None = Query(
        default=None,
        description="Filter documents by category (case-insensitive)",
    ),
    tag: str | None = Query(
        default=None,
        description="Filter documents by tag (case-insensitive)",
    ),
    search: str | None = Query(
        default=None,
        description="Match against title and body text",
    ),
    include_drafts: bool = Query(
        default=False,
        description="Include documents marked as drafts",
    ),
    limit: int = Query(
        default=50,
        ge=1,
        le=200,
        description="Maximum number of documents to return",
    ),
    offset: int = Query(
        default=0,
        ge=0,
        description="Number of documents to skip",
    ),
):
    """Get the document listing, newest first."""
    return get_document_index(
        category=category,
        tag=tag,
        search=search,
        include_drafts=include_drafts,
        limit=limit,
        offset=offset,
    )


@router.get("/documents/{doc_id:path}", response_model=DocumentDetail)
async def get_document_by_id(
    doc_id: str,
    include_drafts: bool = Query(default=False),
):
    """Get a single document, body included."""
    document = get_document(doc_id, include_drafts=include_drafts)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    return document


@router.get("/taxonomies", response_model=TaxonomyIndex)
async def list_taxonomies():
    """Get category and tag counts for published documents."""
    return get_taxonomies()
