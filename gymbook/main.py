from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.responses import JSONResponse

import gymbook.db.base  # noqa: F401
from gymbook.api.main import api_router
from gymbook.core.errors import error_body
from gymbook.core.logging import configure_logging, get_logger
from gymbook.core.settings import Env, settings
from gymbook.db import Database
from gymbook.middlewares.telemetry import RequestContextMiddleware
from gymbook.services.report_scheduler import ReportScheduler
from gymbook.version import APP_VERSION, build_info

configure_logging(json=True, level="DEBUG" if settings.DEBUG else "INFO")


def _allowed_origins() -> list[str]:
    origins = []
    for host in settings.ALLOWED_HOSTS.split(","):
        _host = host.strip()
        if not _host:
            continue
        # aceita tanto com quanto sem protocolo
        if _host.startswith("http"):
            origins.append(_host)
        else:
            origins.append(f"http://{_host}")
            origins.append(f"https://{_host}")
    return origins


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request body"


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = error_body("http_error", str(exc.detail))
    return JSONResponse(body, status_code=exc.status_code, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    missing = [_field_name(e["loc"]) for e in errors if e.get("type") == "missing"]
    if missing:
        if len(missing) == 1:
            message = f"Please provide the {missing[0]} field"
        else:
            message = f"Please provide the following fields: {', '.join(missing)}"
        return JSONResponse(
            error_body("missing_fields", message), status_code=status.HTTP_400_BAD_REQUEST
        )

    first = errors[0] if errors else {"loc": (), "msg": "Invalid request"}
    where = first["loc"][0] if first["loc"] else "body"
    message = f"Invalid value for {_field_name(first['loc'])}: {first['msg']}"
    if where in ("path", "query"):
        return JSONResponse(
            error_body("invalid_parameter", message), status_code=status.HTTP_400_BAD_REQUEST
        )
    return JSONResponse(
        error_body("validation_error", message),
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    get_logger().exception("request.unhandled", path=request.url.path)
    body = error_body("internal_error", "Something went wrong. Please try again later.")
    if settings.DEBUG:
        body["detail"] = repr(exc)
    return JSONResponse(body, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def create_app(database: Database | None = None) -> FastAPI:
    """Build the application. ``database`` overrides the settings-derived one
    (tests hand in an in-memory engine)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = database or Database.from_settings()
        app.state.database = db
        scheduler = ReportScheduler(db.session)
        app.state.report_scheduler = scheduler
        if settings.SCHEDULER_ENABLED:
            scheduler.start()
        get_logger().info("app.started", env=settings.APP_ENV.value, version=APP_VERSION)
        try:
            yield
        finally:
            scheduler.shutdown()
            db.dispose()

    app = FastAPI(title="gymbook", version=APP_VERSION, debug=settings.DEBUG, lifespan=lifespan)

    # --- Middlewares de contexto/log
    app.add_middleware(RequestContextMiddleware)

    origins = _allowed_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=(origins or ["*"]) if settings.DEBUG else origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Segurança: HTTPS only em prod
    if settings.APP_ENV == Env.PROD:
        app.add_middleware(HTTPSRedirectMiddleware)

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        if settings.APP_ENV == Env.PROD:
            response.headers["Strict-Transport-Security"] = (
                "max-age=15552000; includeSubDomains"
            )
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        return response

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router)

    @app.get("/healthz", tags=["ops"])
    def healthz():
        get_logger().info("health.check")
        return {"status": "ok", "env": settings.APP_ENV, "version": APP_VERSION}

    @app.get("/version", tags=["ops"])
    def version():
        return {**build_info(), "env": settings.APP_ENV, "debug": settings.DEBUG}

    return app


app = create_app()
