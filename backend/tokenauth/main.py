"""
Application factory.

Run with (needs the `server` extra): uvicorn --factory tokenauth.main:create_app
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from tokenauth.api.deps import AuthGate
from tokenauth.api.errors import register_exception_handlers
from tokenauth.api.routes import auth, health
from tokenauth.core.config import AuthConfig, Settings, get_settings
from tokenauth.core.logging import setup_logging, get_logger
from tokenauth.core.metrics import MetricsCollector
from tokenauth.services.auth import AuthService, UserRepository
from tokenauth.services.auth.passwords import PasswordHasher

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    repository: UserRepository | None = None,
    hasher: PasswordHasher | None = None,
) -> FastAPI:
    """
    Build the application.

    The token configuration is validated here, so a missing secret or TTL
    aborts startup with AUTH_MISCONFIGURED instead of failing per request.
    Without an explicit ``repository`` the SQLAlchemy one is used and the app
    owns its engine.
    """
    settings = settings or get_settings()
    config = AuthConfig.from_settings(settings)

    engine = None
    if repository is None:
        from tokenauth.db.repository import SqlAlchemyUserRepository
        from tokenauth.db.session import create_session_factory, engine_from_settings

        engine = engine_from_settings(settings)
        repository = SqlAlchemyUserRepository(create_session_factory(engine))

    metrics = MetricsCollector()
    auth_service = AuthService(config, repository, hasher=hasher, metrics=metrics)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        setup_logging(debug=settings.DEBUG)
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

        if engine is not None:
            from tokenauth.db.session import close_db, init_db

            await init_db(engine)
            logger.info("Database initialized")

        yield

        if engine is not None:
            await close_db(engine)
        logger.info("Application shutdown complete")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.metrics = metrics
    app.state.auth_service = auth_service
    app.state.auth_gate = AuthGate(auth_service.verifier)

    register_exception_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router, prefix="/api/v1", tags=["Auth"])

    return app
