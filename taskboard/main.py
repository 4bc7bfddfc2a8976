import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings
from .core.database import init_db
from .core.exceptions import AppError
from .core.rabbitmq import get_event_publisher
from .routers import auth, health, projects, tasks, users
from .schemas.common import ErrorResponse

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Taskboard",
    description="Project and task management API with cookie-based JWT authentication",
    version=settings.service_version,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str, errors=None, headers=None) -> JSONResponse:
    body = ErrorResponse(message=message, errors=errors)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True), headers=headers)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return _error(status.HTTP_400_BAD_REQUEST, "Validation failed", errors=errors)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(auth.router, prefix=settings.api_prefix + "/auth", tags=["auth"])
app.include_router(users.router, prefix=settings.api_prefix + "/users", tags=["users"])
app.include_router(projects.router, prefix=settings.api_prefix + "/projects", tags=["projects"])
app.include_router(tasks.router, prefix=settings.api_prefix + "/tasks", tags=["tasks"])


@app.on_event("startup")
async def startup_event():
    """Initialize application on startup"""
    logger.info("🚀 Starting Taskboard...")
    init_db()
    logger.info("Taskboard startup completed")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down Taskboard...")
    get_event_publisher().close()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("taskboard.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
