from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import Settings
from core.db import Database
from core.errors import AppError, AuthError
from core.logs import configure_logging
from core.responses import UTF8JSONResponse, error_response
from recipes.repository import RecipeRepository, get_recipe_repository
from recipes.router import router as recipes_router

logger = logging.getLogger(__name__)

BASIC_CHALLENGE = {"WWW-Authenticate": 'Basic realm="Restricted"'}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process; a failure here aborts startup.
    settings: Settings = app.state.settings
    try:
        app.state.db = await Database.connect(
            settings.database_dsn(),
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )
    except Exception:
        logger.exception("db_connect_failed host=%s db=%s", settings.db_host, settings.db_name)
        raise
    try:
        yield
    finally:
        await app.state.db.close()
        app.state.db = None


async def handle_app_error(request: Request, exc: AppError) -> UTF8JSONResponse:
    headers = BASIC_CHALLENGE if isinstance(exc, AuthError) else None
    return error_response(exc.status_code, exc.message, headers=headers)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> UTF8JSONResponse:
    bad_path = any((err.get("loc") or ("",))[0] == "path" for err in exc.errors())
    message = "Invalid recipe ID" if bad_path else "Invalid request payload"
    return error_response(400, message)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> UTF8JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def handle_unexpected_error(request: Request, exc: Exception) -> UTF8JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    return error_response(500, "Internal server error")


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(
        title="recipes-api",
        lifespan=lifespan,
        default_response_class=UTF8JSONResponse,
    )
    app.state.settings = settings or Settings.from_env()
    app.state.db = None

    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(recipes_router, tags=["recipes"])

    @app.get("/health")
    async def health(repository: RecipeRepository = Depends(get_recipe_repository)) -> dict:
        await repository.ping()
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)
    logger.info("serving_recipes host=%s port=%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
