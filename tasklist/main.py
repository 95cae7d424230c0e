"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tasklist import __version__
from tasklist.config import get_settings
from tasklist.errors import PersistenceError
from tasklist.models import (
    FormState,
    HealthResponse,
    HistoryView,
    SortKey,
    StatusFilter,
    SubmitResult,
    Task,
    TaskFields,
    TaskView,
    ToggleResult,
    ViewCriteria,
)
from tasklist.state import AppState, create_initial_state

router = APIRouter(prefix="/api")


def get_state(request: Request) -> AppState:
    """The application state attached to the running app."""
    return request.app.state.tasklist


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse()


@router.get("/tasks", response_model=list[TaskView], tags=["Tasks"])
async def list_tasks(
    search: str | None = None,
    status_filter: StatusFilter | None = Query(default=None, alias="status"),
    category: str | None = None,
    sort: SortKey | None = None,
    state: AppState = Depends(get_state),
) -> list[TaskView]:
    """Render visible tasks.

    Query parameters override the current criteria for this request only;
    use ``PUT /api/view`` to change them.
    """
    overrides = {
        "search_text": search,
        "status_filter": status_filter,
        "category_filter": category,
        "sort_key": sort,
    }
    criteria = state.criteria.model_copy(
        update={name: value for name, value in overrides.items() if value is not None}
    )
    return state.visible(criteria)


@router.get("/tasks/{task_id}", response_model=Task, tags=["Tasks"])
async def get_task(task_id: str, state: AppState = Depends(get_state)) -> Task:
    """Get a specific task by ID."""
    task = state.store.find_by_id(task_id)
    if task is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found",
        )
    return task


@router.get("/tasks/{task_id}/history", response_model=HistoryView, tags=["Tasks"])
async def get_history(task_id: str, state: AppState = Depends(get_state)) -> HistoryView:
    """Show the prior versions of a task."""
    view = state.history(task_id)
    if view is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found",
        )
    return view


@router.post("/tasks/{task_id}/toggle", response_model=ToggleResult, tags=["Tasks"])
async def toggle_task(task_id: str, state: AppState = Depends(get_state)) -> ToggleResult:
    """Flip a task between complete and incomplete."""
    return state.toggle(task_id)


@router.post("/tasks/{task_id}/edit", response_model=FormState, tags=["Form"])
async def edit_task(task_id: str, state: AppState = Depends(get_state)) -> FormState:
    """Load a task into the form for editing."""
    return state.begin_edit(task_id)


@router.delete(
    "/tasks/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Tasks"],
)
async def delete_task(task_id: str, state: AppState = Depends(get_state)) -> None:
    """Delete a task. Unknown ids are ignored."""
    state.delete(task_id)


@router.get("/form", response_model=FormState, tags=["Form"])
async def get_form(state: AppState = Depends(get_state)) -> FormState:
    """Current form contents and edit mode."""
    return state.form()


@router.post("/form", response_model=SubmitResult, tags=["Form"])
async def submit_form(data: TaskFields, state: AppState = Depends(get_state)) -> SubmitResult:
    """Submit the form: creates a task, or updates the one being edited."""
    return state.submit_form(data)


@router.delete("/form", response_model=FormState, tags=["Form"])
async def cancel_form(state: AppState = Depends(get_state)) -> FormState:
    """Leave edit mode and clear the form."""
    return state.cancel_edit()


@router.get("/view", response_model=ViewCriteria, tags=["View"])
async def get_view(state: AppState = Depends(get_state)) -> ViewCriteria:
    """Current search, filter and sort criteria."""
    return state.criteria


@router.put("/view", response_model=ViewCriteria, tags=["View"])
async def put_view(criteria: ViewCriteria, state: AppState = Depends(get_state)) -> ViewCriteria:
    """Replace the search, filter and sort criteria."""
    return state.set_criteria(criteria)


@router.get("/categories", response_model=list[str], tags=["View"])
async def list_categories(state: AppState = Depends(get_state)) -> list[str]:
    """Categories available to the category filter."""
    return state.store.categories()


async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_507_INSUFFICIENT_STORAGE,
        content={"detail": "Storage write failed"},
    )


def create_app(state: AppState | None = None) -> FastAPI:
    """Build the API around ``state``, or around the configured storage on startup."""
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "tasklist", None) is None:
            app.state.tasklist = create_initial_state(settings)
        yield

    app = FastAPI(
        title="Task List API",
        description="Single-user task list with filtering, sorting and edit history.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.tasklist = state

    # Configure CORS for frontend access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.include_router(router)
    return app


app = create_app()
