"""HTTP API for Page-O-Matic: page content load/save and the section catalogue."""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from pageomatic.config import get_settings
from pageomatic.exceptions import (
    DatabaseError,
    LoadFailedError,
    MissingActorError,
    NotFoundError,
    PageServiceError,
    UnknownSectionTypeError,
    ValidationError,
)
from pageomatic.sections.registry import create_default, get_spec, list_section_types
from pageomatic.services.document import PageDocument, PageProperties
from pageomatic.services.page_service import PageService, SaveResult
from pageomatic.storage.database import Database, get_db

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Page-O-Matic",
    description="Section-based page composition service",
    version="0.1.0",
)


class PageContentIn(BaseModel):
    """Body of a page content save."""

    sections: list[Dict[str, Any]] = Field(default_factory=list)
    properties: Optional[Dict[str, Any]] = None
    auxiliary: Dict[str, Any] = Field(default_factory=dict)
    expected_versions: Optional[Dict[str, int]] = None


def get_database() -> Database:
    """Database dependency; overridden in tests."""
    return get_db()


def require_actor(x_actor_id: Optional[str] = Header(default=None)) -> str:
    """Acting user from the X-Actor-Id header."""
    if not x_actor_id or not x_actor_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-Actor-Id header")
    return x_actor_id


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "field": exc.field})


@app.exception_handler(MissingActorError)
async def missing_actor_handler(request: Request, exc: MissingActorError):
    return JSONResponse(status_code=401, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(LoadFailedError)
@app.exception_handler(DatabaseError)
async def storage_error_handler(request: Request, exc: PageServiceError):
    logger.error("Storage error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def _failure_payload(result: SaveResult) -> Dict[str, Any]:
    failures = {}
    for component_type, error in result.failures.items():
        entry: Dict[str, Any] = {"error": str(error), "conflict": component_type in result.conflicts}
        if entry["conflict"]:
            entry["expected_version"] = error.expected_version
            entry["actual_version"] = error.actual_version
        failures[component_type] = entry
    return failures


def _save_status(result: SaveResult) -> int:
    if result.ok:
        return 200
    if len(result.conflicts) == len(result.failures):
        return 409
    if result.saved:
        return 207
    return 500


@app.get("/pages")
def list_pages(db: Database = Depends(get_database)):
    """List slugs of pages with stored content."""
    with db.session() as session:
        return {"pages": PageService(session).list_pages()}


@app.get("/pages/{slug}/content")
def get_page_content(slug: str, db: Database = Depends(get_database)):
    """Load a page's sections, properties and auxiliary components."""
    with db.session() as session:
        loaded = PageService(session).load(slug)
    return {
        "slug": slug,
        **loaded.document.to_payload(),
        "versions": loaded.versions,
        "has_sections": loaded.has_sections,
    }


@app.put("/pages/{slug}/content")
def put_page_content(
    slug: str,
    body: PageContentIn,
    actor_id: str = Depends(require_actor),
    db: Database = Depends(get_database),
):
    """Save a page; each component is written independently."""
    document = PageDocument(
        sections=body.sections,
        properties=PageProperties.from_payload(body.properties),
        auxiliary=body.auxiliary,
        dirty=True,
    )
    with db.session() as session:
        result = PageService(session).save(
            slug, document, actor_id, expected_versions=body.expected_versions
        )
    return JSONResponse(
        status_code=_save_status(result),
        content={
            "slug": slug,
            "ok": result.ok,
            "saved": result.saved,
            "failures": _failure_payload(result),
        },
    )


@app.delete("/pages/{slug}/components/{component_type}")
def delete_component(
    slug: str,
    component_type: str,
    actor_id: str = Depends(require_actor),
    db: Database = Depends(get_database),
):
    """Soft-deactivate one component of a page."""
    with db.session() as session:
        deactivated = PageService(session).deactivate_component(slug, component_type, actor_id)
    if not deactivated:
        raise NotFoundError("Component", f"{slug}/{component_type}")
    return {"slug": slug, "component_type": component_type, "deactivated": True}


@app.get("/section-types")
def section_types():
    """The section catalogue with each type's media targets."""
    return {
        "section_types": [
            {
                "type": spec.tag.value,
                "label": spec.label,
                "media_targets": [
                    {
                        "slot": target.slot.value,
                        "url_field": target.url_field,
                        "kind_field": target.kind_field,
                        "card_scoped": target.card_scoped,
                    }
                    for target in spec.media_targets
                ],
            }
            for spec in list_section_types()
        ]
    }


@app.get("/section-types/{tag}/default")
def section_type_default(tag: str):
    """A freshly constructed default section of one type."""
    try:
        get_spec(tag)
    except UnknownSectionTypeError:
        raise HTTPException(status_code=404, detail=f"Unknown section type '{tag}'")
    return create_default(tag)


@app.get("/health")
def health_check(db: Database = Depends(get_database)):
    """Health check endpoint."""
    database_ok = db.ping()
    return {
        "status": "healthy" if database_ok else "degraded",
        "service": "page-o-matic",
        "database": "ok" if database_ok else "unavailable",
    }


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
