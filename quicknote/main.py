import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from quicknote import config
from quicknote.api import notes
from quicknote.exceptions import InvalidRequestBody, QuicknoteError
from quicknote.middleware.access_log import RequestLoggingMiddleware
from quicknote.storage.notes_store import NotesStore

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # our access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    store: NotesStore = app.state.store
    store.ensure_dir()
    logger.info("Saving notes under %s, serving at %s", store.base_dir.resolve(), config.BASE_PATH)
    yield


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidRequestBody)
    async def invalid_body_handler(request: Request, exc: InvalidRequestBody) -> JSONResponse:
        logger.warning("Rejected body for %s: %s", request.url.path, exc.context.get("reason"))
        return JSONResponse({"success": False, "reason": exc.message}, status_code=400)

    @app.exception_handler(QuicknoteError)
    async def quicknote_error_handler(request: Request, exc: QuicknoteError) -> Response:
        logger.error("%s %s failed: %s %s", request.method, request.url.path, exc.message, exc.context, exc_info=exc)
        if request.method == "POST":
            return JSONResponse({"success": False}, status_code=500)
        return Response(status_code=500)


def create_app(data_dir: Optional[Path] = None) -> FastAPI:
    app = FastAPI(title="quicknote", lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.store = NotesStore(data_dir if data_dir is not None else config.data_dir())

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    @app.api_route("/", methods=notes.ALL_METHODS, include_in_schema=False)
    def root() -> RedirectResponse:
        return RedirectResponse(config.BASE_PATH, status_code=302)

    app.include_router(notes.router)
    return app


app = create_app()
