"""HTTP API for the wiki section tree."""

import logging
from datetime import date
from typing import Any, Optional

from fastapi import Body, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from wikitree.config import Settings, configure_logging, get_settings
from wikitree.exceptions import WikiServiceError
from wikitree.schemas.content import describe_errors
from wikitree.schemas.section import SectionCreate, SectionUpdate, validate_payload
from wikitree.services.events import TreeEvents, log_tree_change
from wikitree.services.section_service import UNSET, SectionService
from wikitree.storage.database import Database, get_db

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "validation_error": 400,
    "invalid_hierarchy": 400,
    "not_found": 404,
    "conflict": 409,
    "unexpected_error": 500,
}

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


def error_body(kind: str, message: str, field: Optional[str] = None, errors: Optional[list] = None) -> dict[str, Any]:
    """Build the JSON error envelope shared by every failing endpoint."""
    error: dict[str, Any] = {"kind": kind, "message": message}
    if field:
        error["field"] = field
    if errors:
        error["errors"] = errors
    return {"error": error}


async def handle_service_error(request: Request, exc: WikiServiceError) -> JSONResponse:
    status = STATUS_BY_KIND.get(exc.kind, 500)
    if status == 500:
        logger.error(
            "Unexpected error on %s %s",
            request.method,
            request.url.path,
            exc_info=getattr(exc, "original_error", None) or exc,
        )
        return JSONResponse(status_code=500, content=error_body("unexpected_error", GENERIC_ERROR_MESSAGE))

    body = error_body(
        exc.kind,
        str(exc),
        field=getattr(exc, "field", None),
        errors=getattr(exc, "errors", None),
    )
    return JSONResponse(status_code=status, content=body)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are reported as plain validation errors (400, not 422)."""
    errors = describe_errors(exc)
    message = errors[0]["message"] if errors else "Invalid request"
    field = errors[0]["field"] if errors else None
    return JSONResponse(
        status_code=400,
        content=error_body("validation_error", message, field=field, errors=errors),
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body("unexpected_error", GENERIC_ERROR_MESSAGE))


def create_app(
    database: Optional[Database] = None,
    events: Optional[TreeEvents] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        database: Database to serve. If None, the global database is used on first request.
        events: Tree change hub. If None, a hub that logs every change is created.
        settings: Application settings. If None, read from the environment.

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    configure_logging(settings)

    if events is None:
        events = TreeEvents()
        events.subscribe(log_tree_change)

    app = FastAPI(
        title=settings.wiki_title,
        description="Section tree authoring backend for a documentation wiki",
        version="0.1.0",
    )
    app.state.database = database
    app.state.tree_events = events
    app.state.settings = settings

    app.add_exception_handler(WikiServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)

    def database_for(request: Request) -> Database:
        return request.app.state.database or get_db()

    @app.get("/sections")
    def list_sections(request: Request):
        """Get the whole section tree."""
        with database_for(request).session() as session:
            sections = SectionService(session).list_sections()
            return {"sections": [section.to_dict() for section in sections]}

    @app.post("/sections", status_code=201)
    def create_section(request: Request, payload: Any = Body(...)):
        """Create a section."""
        data = validate_payload(SectionCreate, payload)
        with database_for(request).session() as session:
            service = SectionService(session, request.app.state.tree_events)
            section = service.create_section(
                section_id=data.id,
                title=data.title,
                summary=data.summary,
                parent_id=data.parent_id,
                position=data.position,
                content=data.content,
            )
            return {"status": "created", "id": section.id}

    @app.get("/sections/{section_id}")
    def get_section(section_id: str, request: Request):
        """Get one section with its subtree."""
        with database_for(request).session() as session:
            return SectionService(session).get_section(section_id).to_dict()

    @app.get("/sections/{section_id}/path")
    def get_section_path(section_id: str, request: Request):
        """Root-to-node ID path of a section."""
        with database_for(request).session() as session:
            path = SectionService(session).get_section_path(section_id)
        return {"id": section_id, "path": path}

    @app.patch("/sections/{section_id}")
    def update_section(section_id: str, request: Request, payload: Any = Body(...)):
        """Partially update a section."""
        data = validate_payload(SectionUpdate, payload)
        parent_id = data.parent_id if "parent_id" in data.model_fields_set else UNSET
        with database_for(request).session() as session:
            service = SectionService(session, request.app.state.tree_events)
            section = service.update_section(
                section_id,
                title=data.title,
                summary=data.summary,
                parent_id=parent_id,
                position=data.position,
                content=data.content,
            )
            return {"status": "updated", "id": section.id}

    @app.delete("/sections/{section_id}")
    def delete_section(section_id: str, request: Request):
        """Delete a section and its whole subtree."""
        with database_for(request).session() as session:
            service = SectionService(session, request.app.state.tree_events)
            removed = service.delete_section(section_id)
            return {"status": "deleted", "ids": removed}

    @app.get("/wiki")
    def wiki(request: Request):
        """Site payload: title, tagline and the assembled tree."""
        site = request.app.state.settings
        with database_for(request).session() as session:
            service = SectionService(session)
            sections = service.list_sections()
            landing = service.landing_path(sections)
        body: dict[str, Any] = {"title": site.wiki_title}
        if site.wiki_tagline:
            body["tagline"] = site.wiki_tagline
        body["sections"] = [section.to_dict() for section in sections]
        body["firstLeafPath"] = landing
        return body

    @app.get("/wiki/timeline")
    def wiki_timeline(
        request: Request,
        root: Optional[str] = None,
        since: Optional[date] = Query(default=None, alias="from"),
        until: Optional[date] = Query(default=None, alias="to"),
    ):
        """Every leaf, most recently changed first."""
        with database_for(request).session() as session:
            entries = SectionService(session).timeline(root_id=root, since=since, until=until)
        return {"items": [entry.to_dict() for entry in entries]}

    @app.get("/wiki/{path:path}")
    def wiki_page(path: str, request: Request):
        """Resolve a slash-separated section ID path."""
        ids = [segment for segment in path.split("/") if segment]
        with database_for(request).session() as session:
            section, leaf_path = SectionService(session).get_section_by_path(ids)
        return {"section": section.to_dict(), "path": ids, "leafPath": leaf_path}

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "wikitree"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8005)
