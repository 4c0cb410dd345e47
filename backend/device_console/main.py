import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from . import __version__
from .config import Config
from .database import make_engine, init_db
from .errors import ApiError, ErrorKind, error_response
from .models import utcnow
from .routers import admin, device

logger = logging.getLogger(__name__)


def create_app(config: Config | None = None, engine=None, clock=utcnow) -> FastAPI:
    """Build the application. Configuration and engine are resolved once, here."""
    config = config or Config.from_env()

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if engine is None:
        engine = make_engine(config)
    init_db(engine)
    logger.info("Database ready: %s", engine.url.render_as_string(hide_password=True))

    app = FastAPI(title="Device Console API", version=__version__)
    app.state.config = config
    app.state.engine = engine
    app.state.clock = clock

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return error_response(exc.result)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected malformed request to %s at %s",
                    request.url.path, [e.get("loc") for e in exc.errors()])
        return error_response(ErrorKind.INVALID_REQUEST)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s", request.url.path, exc_info=exc)
        return error_response(ErrorKind.INTERNAL_FAILURE)

    # Inclusion des routers
    app.include_router(device.router, prefix="/api/device", tags=["device"])
    app.include_router(admin.router, prefix="/api/admin", tags=["admin"])

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # Servir le dashboard si buildé
    if config.frontend_dist and config.frontend_dist.exists():
        app.mount("/", StaticFiles(directory=str(config.frontend_dist), html=True), name="frontend")
    else:
        @app.get("/")
        def index():
            return {"service": "Device Console API", "version": __version__}

    return app
