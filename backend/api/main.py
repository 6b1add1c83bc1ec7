"""
FastAPI application entry point.

Run with: book-api
      or: uvicorn api.main:create_app --factory --port 4000
"""
import logging
import sys
import time
from pathlib import Path
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import books
from repositories import BooksRepository, build_books_repository
from settings import Settings

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("api.access")


def configure_logging(settings: Settings) -> None:
    """
    Send log records to stdout at the configured level.

    Leaves the root logger alone when something already installed handlers
    on it, so repeated calls never duplicate output.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        stream=sys.stdout,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(
    books_repo: Optional[BooksRepository] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the application around ``books_repo`` (or the store named in settings)."""
    settings = settings or Settings()
    configure_logging(settings)
    if books_repo is None:
        books_repo = build_books_repository(settings)

    # Store must exist before the first request is accepted
    books_repo.init_store()

    app = FastAPI(
        title="Book API",
        description="A sample FastAPI Book API",
        version="1.0.0",
        servers=[{"url": f"http://localhost:{settings.PORT}"}],
        docs_url="/api-docs",
        redoc_url=None,
    )

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        """Log method, path, status and latency of every request."""
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            # Unhandled errors are logged as 500 before they propagate
            elapsed_ms = (time.perf_counter() - start) * 1000
            access_logger.info(
                "%s %s %d %.1f ms",
                request.method,
                request.url.path,
                status_code,
                elapsed_ms,
            )

    # Added last so it wraps everything else, including the request log
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(books.build_router(books_repo), prefix="/books", tags=["Books"])
    return app


def run() -> None:
    """Console entry point: serve the API until terminated."""
    settings = Settings()
    app = create_app(settings=settings)
    logger.info("Starting server on port %d (store: %s)", settings.PORT, settings.BOOKS_STORE)
    # Request lines come from api.access; uvicorn's own access log would duplicate them.
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, access_log=False, log_config=None)


if __name__ == "__main__":
    run()
