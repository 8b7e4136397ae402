# bookstore/main.py
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .catalog import catalog_router
from .catalog.errors import StorageError
from .catalog.service import BookService
from .config import Config
from .storage import build_service

logger = logging.getLogger(__name__)


def create_app(service: Optional[BookService] = None, config: Optional[Config] = None) -> FastAPI:
    config = config or Config()
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    service = service or build_service(config)

    app = FastAPI(
        title="Bookstore catalogue",
        description=(
            "Petit catalogue de livres : liste, création, modification et "
            "suppression, avec image de couverture optionnelle."
        ),
        version="1.0.0",
    )
    app.state.book_service = service
    app.include_router(catalog_router)

    # Covers are served from the primary asset directory.
    service.covers.primary_root.mkdir(parents=True, exist_ok=True)
    app.mount(
        service.covers.public_prefix,
        StaticFiles(directory=service.covers.primary_root),
        name="image",
    )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": "Erreur de stockage."})

    # 🔹 Route de base pour tester rapidement
    @app.get("/")
    def health_check():
        return {"status": "ok", "message": "Bookstore API live 🚀"}

    return app


def run() -> None:
    """Serve the API with uvicorn using the environment configuration."""
    config = Config()
    try:
        port = int(config.PORT)
    except ValueError:
        raise SystemExit(f"BOOKSTORE_PORT must be an integer, got {config.PORT!r}")
    uvicorn.run(create_app(config=config), host=config.HOST, port=port)
