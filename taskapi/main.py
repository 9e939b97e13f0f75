"""FastAPI application entry point."""

import logging
import time
from typing import Any
from uuid import UUID

import uvicorn
from dotenv import load_dotenv
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskapi import __version__
from taskapi.config import DEFAULT_JWT_SECRET, Settings, load_settings
from taskapi.errors import TaskAPIError, ValidationError, status_code_for
from taskapi.identity import IdentityStore
from taskapi.logging_setup import setup_logging
from taskapi.models import (
    SORT_FIELDS,
    SORT_ORDERS,
    APIResponse,
    HealthResponse,
    LoginRequest,
    MetaInfo,
    TaskCreate,
    TaskFilter,
    TaskSort,
    TaskUpdate,
    User,
)
from taskapi.service import TaskService, seed_demo_tasks
from taskapi.store import TaskStore

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def envelope(
    message: str,
    *,
    data: Any = None,
    meta: MetaInfo | None = None,
    error: bool = False,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Wrap a payload in the standard response envelope."""
    body = APIResponse(error=error, message=message, data=data, meta=meta)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


# ----------------------------
# Dependencies
# ----------------------------
def get_identity(request: Request) -> IdentityStore:
    return request.app.state.identity


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    identity: IdentityStore = Depends(get_identity),
) -> User:
    """Resolve the bearer credential to a user before any task code runs."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header is required",
        )
    return identity.verify_credential(credentials.credentials)


def _parse_task_id(raw: str) -> UUID:
    try:
        return UUID(raw)
    except ValueError as exc:
        raise ValidationError("Invalid task ID") from exc


def _parse_int(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _parse_filter(status_value: str | None, search: str | None) -> TaskFilter | None:
    task_filter = TaskFilter(status=status_value or None, search=search or None)
    return None if task_filter.is_empty() else task_filter


def _parse_sort(sort_field: str | None, sort_order: str | None) -> TaskSort:
    field = sort_field if sort_field in SORT_FIELDS else "created_at"
    order = sort_order if sort_order in SORT_ORDERS else "desc"
    return TaskSort(field=field, order=order)


# ----------------------------
# Routes
# ----------------------------
auth_router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])
tasks_router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])


@auth_router.post("/login")
def login(data: LoginRequest, identity: IdentityStore = Depends(get_identity)) -> JSONResponse:
    """Exchange email and password for a token pair."""
    tokens = identity.login(data)
    return envelope("Login successful", data=tokens)


@tasks_router.get("")
def list_tasks(
    page: str | None = None,
    limit: str | None = None,
    status_filter: str | None = Query(default=None, alias="status"),
    search: str | None = None,
    sort_field: str | None = None,
    sort_order: str | None = None,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    """List the caller's tasks with filtering, sorting and pagination."""
    task_filter = _parse_filter(status_filter, search)
    sort = _parse_sort(sort_field, sort_order)
    items, pagination = service.list_tasks(
        user.id, task_filter, sort, _parse_int(page), _parse_int(limit)
    )
    meta = MetaInfo(
        pagination=pagination,
        sort=sort.describe(),
        filter=task_filter.describe() if task_filter else None,
    )
    return envelope("Tasks retrieved successfully", data=items, meta=meta)


@tasks_router.post("")
def create_task(
    data: TaskCreate,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    """Create a new task owned by the caller."""
    task = service.create_task(data.title, user.id)
    return envelope("Task created successfully", data=task, status_code=status.HTTP_201_CREATED)


@tasks_router.get("/{task_id}")
def get_task(
    task_id: str,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    task = service.get_task(_parse_task_id(task_id), user.id)
    return envelope("Task retrieved successfully", data=task)


@tasks_router.put("/{task_id}")
def update_task(
    task_id: str,
    data: TaskUpdate,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    task = service.update_task(_parse_task_id(task_id), user.id, data)
    return envelope("Task updated successfully", data=task)


@tasks_router.delete("/{task_id}")
def delete_task(
    task_id: str,
    user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    service.delete_task(_parse_task_id(task_id), user.id)
    return envelope("Task deleted successfully")


# ----------------------------
# Application factory
# ----------------------------
def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TaskAPIError)
    async def _task_api_error(request: Request, exc: TaskAPIError) -> JSONResponse:
        return envelope(exc.message, error=True, status_code=status_code_for(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return envelope(message, error=True, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return envelope("Invalid request body", error=True, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return envelope(
            "Internal server error",
            error=True,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def create_app(
    settings: Settings | None = None,
    *,
    identity: IdentityStore | None = None,
    store: TaskStore | None = None,
) -> FastAPI:
    """Build the application with its own store instances."""
    if settings is None:
        settings = load_settings()
    if identity is None:
        identity = IdentityStore(settings)
    if store is None:
        store = TaskStore()
    service = TaskService(store)

    if settings.is_production and settings.jwt_secret_key == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET_KEY is the built-in default; set it in production")
    if settings.seed_demo_data:
        seeded = seed_demo_tasks(service, identity)
        logger.info("seeded %d demo tasks", len(seeded))

    app = FastAPI(
        title="Task Tracker API",
        description="Personal task tracking with filtering, sorting and pagination.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.identity = identity
    app.state.task_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
    )

    @app.middleware("http")
    async def _log_requests(request: Request, call_next: Any) -> Any:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    _install_error_handlers(app)

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse()

    app.include_router(auth_router)
    app.include_router(tasks_router)
    return app


def main() -> None:
    """Load configuration and serve the API with uvicorn."""
    load_dotenv(override=False)
    settings = load_settings()
    setup_logging(settings.log_level)
    app = create_app(settings)
    logger.info("server starting on %s:%d (%s)", settings.host, settings.port, settings.environment)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
