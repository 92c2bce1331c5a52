"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from suq.api.auth import router as auth_router
from suq.api.pages import router as pages_router
from suq.api.products import discover_router, router as products_router
from suq.auth import build_auth_backend
from suq.config import Settings, get_settings
from suq.database import Base, create_db_engine, create_session_factory
from suq.errors import register_exception_handlers
from suq.guard import AccessGuardMiddleware, session_lookup
from suq.models import AccessToken, User  # noqa: F401 - Import to register models
from suq.mongo import MongoHandle

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    handlers = [logging.StreamHandler()]  # Console output
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    # Set specific log levels for noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    The MongoDB handle and the SQL engine are created here, once, and
    reach request handlers through ``app.state``.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    engine = create_db_engine(settings)
    session_factory = create_session_factory(engine)
    mongo = MongoHandle.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create auth tables on startup, release connections on shutdown."""
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"{settings.app_name} started ({settings.app_env})")
        yield
        mongo.close()
        await engine.dispose()

    app = FastAPI(
        title="Suq Marketplace",
        description="Product listings, seller dashboard and sessions for the Suq marketplace",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.mongo = mongo
    app.state.session_factory = session_factory
    app.state.auth_backend = build_auth_backend(settings)

    register_exception_handlers(app)

    app.add_middleware(
        AccessGuardMiddleware,
        lookup=session_lookup(session_factory, settings),
        protected_paths=settings.protected_paths,
        cookie_name=settings.session_cookie_name,
        login_path=settings.login_path,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(products_router)
    app.include_router(discover_router)
    app.include_router(auth_router)
    app.include_router(pages_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
