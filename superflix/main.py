import logging
import sys
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from .auth.router import router as auth_router
from .core.config import Settings, settings
from .core.errors import register_error_handlers, unhandled_error_handler
from .movies.router import router as movies_router
from .users.router import router as users_router

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("superflix.access")


def configure_logging(app_settings: Settings) -> None:
    handlers = [logging.StreamHandler(sys.stdout)]
    if app_settings.LOG_FILE:
        handlers.append(logging.FileHandler(app_settings.LOG_FILE))
    logging.basicConfig(
        level=app_settings.LOG_LEVEL,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def create_app(app_settings: Settings = settings) -> FastAPI:
    configure_logging(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"SuperFlix is listening on Port {app_settings.PORT}")
        yield

    app = FastAPI(title="SuperFlix API", lifespan=lifespan)
    app.state.settings = app_settings

    @app.get("/", response_class=HTMLResponse)
    def welcome_page():
        return "<h1>Welcome to SuperFlix!</h1>"

    app.include_router(auth_router)
    app.include_router(movies_router)
    app.include_router(users_router)

    register_error_handlers(app)

    @app.middleware("http")
    async def respond_to_unhandled(request: Request, call_next):
        # Innermost, so the 500 still passes through CORS and the access log
        try:
            return await call_next(request)
        except Exception as exc:
            return await unhandled_error_handler(request, exc)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    allowed_origins = set(app_settings.ALLOWED_ORIGINS)

    @app.middleware("http")
    async def check_origin(request: Request, call_next):
        origin = request.headers.get("origin")
        # Requests without an Origin (curl, server to server) are allowed
        if origin and origin not in allowed_origins:
            logger.info(f"Rejected request from origin {origin}")
            return JSONResponse(
                status_code=403,
                content={
                    "error": "The CORS policy for this application does not allow access from origin " + origin
                },
            )
        return await call_next(request)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        # Apache "common" log format
        client = request.client.host if request.client else "-"
        timestamp = time.strftime("%d/%b/%Y:%H:%M:%S %z")
        target = request.url.path + (f"?{request.url.query}" if request.url.query else "")
        http_version = request.scope.get("http_version", "1.1")
        access_logger.info(
            f'{client} - - [{timestamp}] "{request.method} {target} HTTP/{http_version}" '
            f'{response.status_code} {response.headers.get("content-length", "-")}'
        )
        return response

    return app


app = create_app()
