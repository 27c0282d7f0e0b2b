"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from phonomorph import __version__
from phonomorph.api.error_handlers import register_error_handlers
from phonomorph.config import Settings, get_settings
from phonomorph.container import ApplicationContainer, create_container


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ApplicationContainer] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to environment)
        container: Prebuilt dependencies; when given, the lifespan does not
            open or close any connections
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        if container is not None:
            yield
            return

        # Startup
        app.state.container = await create_container(settings)
        yield
        # Shutdown
        await app.state.container.close()

    app = FastAPI(
        title="Phonomorph API",
        description="Custodial token wallets addressed by phone number",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    if container is not None:
        app.state.container = container

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Register routes
    from phonomorph.api.routers import wallet
    from phonomorph.api.routes import health

    app.include_router(health.router, tags=["Health"])
    app.include_router(wallet.router)

    return app
