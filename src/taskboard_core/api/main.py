"""Taskboard Core FastAPI application."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import get_settings
from ..errors import TaskboardError
from ..notifications import NotificationService
from .realtime import WebSocketHub
from .routers import organizations, projects, tasks, teams, finance, users, notifications

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("taskboard-core")

# HTTP status for each domain error kind
ERROR_STATUS_CODES: dict[str, int] = {
    "not_found": 404,
    "validation_error": 422,
    "permission_denied": 403,
    "conflict": 409,
    "notification_delivery_failed": 500,
}

logger.info("Starting Taskboard Core API")

# Create FastAPI app
app = FastAPI(
    title="Taskboard Core API",
    description="Multi-tenant project and task management",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Live notifications go through the hub; stored notifications work without it
app.state.realtime = WebSocketHub(send_timeout=settings.realtime_send_timeout)
app.state.notifier = NotificationService(
    realtime=app.state.realtime,
    link_prefix=settings.notification_link_prefix,
)


@app.exception_handler(TaskboardError)
def handle_domain_error(request: Request, exc: TaskboardError):
    status_code = ERROR_STATUS_CODES.get(exc.kind, 500)
    if status_code >= 500:
        logger.error(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# Include all business logic routers with /api/v1 prefix
app.include_router(users.router, prefix="/api/v1/users")
app.include_router(organizations.router, prefix="/api/v1/organizations")
app.include_router(projects.router, prefix="/api/v1/projects")
app.include_router(tasks.router, prefix="/api/v1/projects/{project_id}/tasks")
app.include_router(teams.router, prefix="/api/v1/teams")
app.include_router(finance.router, prefix="/api/v1/finance")
app.include_router(notifications.router, prefix="/api/v1/notifications")


@app.get("/")
def root():
    """Root endpoint with server info."""
    return {
        "name": "Taskboard Core API",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


def run() -> None:
    """Serve the API with uvicorn (``taskboard-api`` command)."""
    import uvicorn

    uvicorn.run(
        "taskboard_core.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
