"""
FastAPI application setup for the constellation dashboard.

Creates the FastAPI app instance, registers routes and installs the
exception handlers that give every error the same JSON shape:

    {"error": "Project not found", "code": "NOT_FOUND"}

Error bodies never carry filesystem paths or exception text.
"""

import logging
import traceback
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from constellation import __version__
from constellation.api.errors import ErrorCode
from constellation.api.routes import agents, departments, ideas, overview, projects, system

# Configure logging
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

# Create FastAPI app
app = FastAPI(
    title="Constellation Dashboard API",
    description="Read-only API over the agent workspace",
    version=__version__,
)

# Configure CORS for local UI development; the API is read-only
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],  # Vite default ports
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Register routes
app.include_router(projects.router, prefix="/api", tags=["projects"])
app.include_router(overview.router, prefix="/api", tags=["overview"])
app.include_router(agents.router, prefix="/api", tags=["agents"])
app.include_router(ideas.router, prefix="/api", tags=["ideas"])
app.include_router(departments.router, prefix="/api", tags=["departments"])
app.include_router(system.router, prefix="/api", tags=["system"])


@app.get("/", include_in_schema=False)
async def root() -> FileResponse:
    """Serve the dashboard UI shell."""
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


def error_response(status_code: int, message: str, code: ErrorCode) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "code": code.value},
    )


# Exception handlers for consistent error responses
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """
    Handle HTTP exceptions (ours, FastAPI's and Starlette's routing errors).

    ApiError carries its own code; everything else is mapped from the
    status code.
    """
    code = getattr(exc, "code", None)
    if not isinstance(code, ErrorCode):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            code = ErrorCode.NOT_FOUND
        elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            code = ErrorCode.METHOD_NOT_ALLOWED
        elif exc.status_code >= 500:
            code = ErrorCode.INTERNAL_ERROR
        else:
            code = ErrorCode.VALIDATION_ERROR

    # Log based on severity
    if exc.status_code >= 500:
        logger.error(
            "HTTP %d on %s %s: %s",
            exc.status_code,
            request.method,
            request.url.path,
            exc.detail,
        )
    else:
        logger.info(
            "HTTP %d on %s %s: %s",
            exc.status_code,
            request.method,
            request.url.path,
            exc.detail,
        )

    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = "Method not allowed"
    elif isinstance(exc.detail, str) and exc.status_code < 500:
        message = exc.detail
    else:
        message = "An internal server error occurred"

    response = error_response(exc.status_code, message, code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle validation errors from query and path parameters.

    Logs the full error for debugging; the client only sees which field failed.
    """
    logger.warning(
        "Validation error on %s %s: %s",
        request.method,
        request.url.path,
        exc.errors(),
    )

    first_error = exc.errors()[0] if exc.errors() else {}
    field = " -> ".join(str(loc) for loc in first_error.get("loc", []))
    message = f"Invalid request: {field}" if field else "Invalid request"

    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY, message, ErrorCode.VALIDATION_ERROR
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all uncaught exceptions.

    Logs the full exception with traceback, but returns a generic message
    so no internal detail reaches the client.
    """
    logger.error(
        "Unhandled exception on %s %s: %s\n%s",
        request.method,
        request.url.path,
        str(exc),
        traceback.format_exc(),
    )

    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An internal server error occurred",
        ErrorCode.INTERNAL_ERROR,
    )
