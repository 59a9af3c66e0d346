import logging
import os
import random
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine import Engine

from carlens.api.api import api_router
from carlens.api.endpoints import pages
from carlens.core.config import Settings, settings as default_settings
from carlens.core.errors import add_exception_handlers
from carlens.db.init_db import init_db
from carlens.db.session import build_engine, build_session_factory
from carlens.services.annotation import AnnotationClient, build_annotator
from carlens.services.uploads import UploadStorage

# Configure logging
logging.basicConfig(level=default_settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    annotator: Optional[AnnotationClient] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The database engine, the annotation client and the random source for
    the featured car are created from settings unless passed in.
    """
    settings = settings or default_settings
    engine = engine or build_engine(str(settings.SQLALCHEMY_DATABASE_URI))

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="CarLens API: upload car photos and get AI-generated vehicle details",
        version="0.1.0",
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.storage = UploadStorage(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)
    app.state.annotator = annotator or build_annotator(settings)
    app.state.rng = rng or random.Random()

    # Set CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(pages.router)

    # Serve uploaded images, e.g. /cars/2/1723453230000-car.jpg
    os.makedirs(app.state.storage.root, exist_ok=True)
    app.mount(
        settings.UPLOAD_URL_PREFIX,
        StaticFiles(directory=app.state.storage.root),
        name="uploads",
    )

    @app.on_event("startup")
    async def startup_event():
        """Run on application startup."""
        logger.info(f"Starting {settings.PROJECT_NAME}...")
        if settings.AUTO_CREATE_TABLES:
            init_db(engine)
        else:
            logger.info("Skipping table creation")

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("carlens.main:app", host=default_settings.HOST, port=default_settings.PORT)
