# craftcatalog/main.py
from typing import Optional

from fastapi import FastAPI

from .catalog import CatalogStore, catalog_router
from .config import Settings, load_settings
from .logging_config import setup_logging


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    logger = setup_logging(settings)

    app = FastAPI(
        title="Craft Catalog",
        description=(
            "Catalogue de produits et sous-produits persisté dans un seul "
            "fichier JSON, avec notation des produits."
        ),
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.store = CatalogStore(settings.data_file)
    app.include_router(catalog_router)

    # 🔹 Route de base pour tester rapidement
    @app.get("/")
    def health_check():
        return {"status": "ok", "data_file": str(settings.data_file)}

    logger.info("Catalog service ready, data file %s", settings.data_file)
    return app


app = create_app()
