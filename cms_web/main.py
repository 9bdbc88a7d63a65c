"""
FastAPI application factory for the Ledger1 CMS API.

    uvicorn cms_web.main:create_app --factory
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cms import __version__
from cms.context import CMSContext, build_context
from cms.store import DocumentStore
from cms.utils.config import Settings, load_settings
from cms.utils.logger import get_logger
from .auth_routes import router as auth_router
from .content_routes import build_content_routers
from .errors import register_error_handlers
from .session_sweeper import SessionSweeper
from .user_routes import router as user_router

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
    context: Optional[CMSContext] = None,
) -> FastAPI:
    """
    Build the API app.

    Args:
        settings: Loaded settings; read from the environment when omitted
        store: Document store override (tests)
        context: Fully built services override (tests); wins over store
    """
    if context is not None:
        settings = context.settings
    elif settings is None:
        settings = load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open storage, bootstrap the admin if enabled, run the sweeper"""
        cms = context or build_context(settings, store=store)
        cms.start()
        app.state.cms = cms

        sweeper = SessionSweeper(cms.sessions, settings.auth.session_sweep_interval_seconds)
        sweeper.start()
        logger.info(
            "CMS API started",
            environment=settings.app.environment,
            database_id=settings.store.database_id,
            container_id=settings.store.container_id,
        )
        try:
            yield
        finally:
            sweeper.stop()
            cms.close()
            logger.info("CMS API stopped")

    app = FastAPI(
        title="Ledger1 CMS API",
        description="Content management backend for the Ledger1 site",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.web.cors_origin_list(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(auth_router)
    app.include_router(user_router)
    for router in build_content_routers():
        app.include_router(router)

    @app.get("/api/cms/health")
    def health():
        return {"status": "ok"}

    return app
