"""FastAPI application entry point for running the task API locally."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from .config import get_settings
from .db import ensure_table
from .logging_setup import setup_logging
from .routers import tasks


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and, when enabled, create the table on startup."""
    settings = get_settings()
    setup_logging(settings.log_level)
    if settings.create_table:
        ensure_table(settings)
    yield


app = FastAPI(
    title="Task API",
    description="CRUD task management over a DynamoDB table",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(RequestValidationError, tasks.validation_exception_handler)
app.include_router(tasks.router)


def main():
    """Run the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "task_api.main:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
