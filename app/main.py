import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, get_settings
from app.core.errors import register_error_handlers
from app.core.logging import setup_logging
from app.routers import system, cards, frontend
from app.services.card_store import CardStore
from app.services.uploads import UploadService, UPLOADS_URL_PREFIX

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Dossier d'uploads créé au démarrage, pas à l'import
    app.state.uploads.ensure_dir()
    logger.info("Uploads dir: %s", app.state.uploads.base_path.resolve())
    logger.info("Public dir: %s", app.state.settings.PUBLIC_PATH)
    yield
    logger.info("API shutting down (%d cards discarded)", len(app.state.cards))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="API backend pour la gestion de cartes (titre, description, tags, image)",
        lifespan=lifespan,
    )

    # État du process : perdu au redémarrage
    app.state.settings = settings
    app.state.cards = CardStore()
    app.state.uploads = UploadService(
        base_path=settings.UPLOADS_PATH,
        max_upload_mb=settings.MAX_UPLOAD_MB,
    )

    # Middleware CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],  # fallback si mal configuré
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Routers
    app.include_router(system.router)
    app.include_router(cards.router)

    # Images uploadées, puis fallback SPA (toujours en dernier)
    app.mount(
        UPLOADS_URL_PREFIX,
        frontend.UploadsStaticFiles(
            directory=app.state.uploads.base_path,
            check_dir=False,
            public_dir=Path(settings.PUBLIC_PATH),
        ),
        name="uploads",
    )
    app.include_router(frontend.router)
    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    server_app = create_app(settings)
    logger.info("Server listening on %s:%s", settings.HOST, settings.PORT)
    uvicorn.run(server_app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


app = create_app()
