import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.auth.passwords import PasswordHasher
from app.auth.tokens import TokenIssuer
from app.config import Settings, settings as default_settings
from app.errors import AppError, Transient
from app.logging_config import configure_logging
from app.routes.auth import router as auth_router
from app.routes.health import router as health_router
from app.routes.projects import router as projects_router
from app.routes.tasks import router as tasks_router
from app.routes.users import router as users_router

logger = logging.getLogger(__name__)

def _error_body(exc: AppError) -> dict:
    body: dict = {"detail": exc.code, "message": exc.message}
    if exc.details:
        body["details"] = exc.details
    return body

async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, Transient):
        logger.warning("%s %s transient failure: %s", request.method, request.url.path, exc)
    else:
        logger.debug("%s %s -> %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s %s unhandled error", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "internal_error", "message": "internal server error"})

def create_app(
    settings: Settings | None = None,
    password_hasher: PasswordHasher | None = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(title="taskhub-api", version="0.1.0")

    # collaborators are built once here and read from app.state per request
    app.state.settings = settings
    app.state.password_hasher = password_hasher or PasswordHasher()
    app.state.token_issuer = TokenIssuer(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",")],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(projects_router)
    app.include_router(tasks_router)
    return app

app = create_app()
