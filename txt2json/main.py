"""
FastAPI application entry point.
Mounts the conversion router, loads env vars, wires the secret store into the handler.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI

# Load .env from project root, regardless of where the app is started from
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

from txt2json.config import Settings, load_settings
from txt2json.router import router
from txt2json.secret_store import SecretStore, build_secret_store
from txt2json.services.authenticator import Authenticator
from txt2json.services.handler import ConversionHandler

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, secret_store: Optional[SecretStore] = None) -> FastAPI:
    """
    Build the application.

    When no secret store is passed in, one is built from settings at startup
    and closed at shutdown. An injected store is left to its owner.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = secret_store is None
        store = build_secret_store(settings.secret_store) if owned else secret_store
        try:
            app.state.handler = ConversionHandler(Authenticator(store, settings.secret_store), settings)
            logger.info("txt2json ready (secret store backend: %s)", settings.secret_store.backend)
            yield
        finally:
            if owned:
                await store.close()

    app = FastAPI(title="txt2json", lifespan=lifespan)
    app.include_router(router)

    @app.get("/")
    def read_root():
        return {"message": "txt2json is running"}

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
