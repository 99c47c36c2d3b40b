"""
Notes Service - Health Check & API Index Routes
================================================

What:  GET /health for liveness probes and GET / describing the API.
How:   /health pings the database with SELECT 1; OK → 200, unreachable → 503.
Who:   Docker health checks, load balancers, NotesClient.check_health().
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from notes_service import __version__
from notes_service.database import Database
from notes_service.dependencies import get_database
from notes_service.schemas.note import ApiIndexResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(database: Database = Depends(get_database)):
    if not await database.ping():
        logger.warning("Health check: database unreachable")
        return JSONResponse(
            status_code=503,
            content=HealthResponse(status="ERROR", message="Database unavailable").model_dump(),
        )
    return HealthResponse(status="OK", message="Notes microservice is running")


@router.get("/", response_model=ApiIndexResponse, summary="API index")
async def api_index(request: Request) -> ApiIndexResponse:
    """Informational listing of the routes; nothing depends on its shape."""
    notes = f"{request.app.state.settings.api_prefix}/notes"
    return ApiIndexResponse(
        message="Notes Microservice API",
        version=__version__,
        endpoints={
            "health": "GET /health",
            "notes": {
                "getAll": f"GET {notes}",
                "getById": f"GET {notes}/:id",
                "create": f"POST {notes}",
                "update": f"PUT {notes}/:id",
                "delete": f"DELETE {notes}/:id",
            },
        },
    )
