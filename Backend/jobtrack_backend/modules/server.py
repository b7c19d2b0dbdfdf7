import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional

# Configure logging
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobtrack_backend.config import auth_settings as default_auth_settings
from jobtrack_backend.config import server_settings as default_server_settings
from jobtrack_backend.config import storage_settings
from jobtrack_backend.config.global_constants import Collection, VERSION
from jobtrack_backend.config.models import AuthSettingsModel, ServerSettingsModel
from jobtrack_backend.modules.api.auth import CurrentUser
from jobtrack_backend.modules.api.middleware import WriteLimitMiddleware
from jobtrack_backend.modules.api.rest import create_rest_api
from jobtrack_backend.modules.storage.record_storage import OwnedRecordStorage


def create_app(
    auth_settings: Optional[AuthSettingsModel] = None,
    server_settings: Optional[ServerSettingsModel] = None,
    record_storages: Optional[Dict[Collection, OwnedRecordStorage]] = None
) -> FastAPI:
    """Build the API server. Storages default to one CSV file per collection."""
    auth_settings = auth_settings or default_auth_settings.get()
    server_settings = server_settings or default_server_settings.get()
    if record_storages is None:
        record_storages = {collection: OwnedRecordStorage(collection.value) for collection in Collection}

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for FastAPI application."""
        # Startup
        logger.info("Starting server...")
        for storage in record_storages.values():
            await storage.start_backup_scheduler(storage_settings.backup_interval)
        yield
        # Shutdown
        logger.info("Shutting down server...")
        for storage in record_storages.values():
            storage.stop_backup_scheduler()

    app = FastAPI(title="JobTrack", version=VERSION, lifespan=lifespan)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(server_settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Record files are rewritten whole, so mutating requests run one at a time
    app.add_middleware(WriteLimitMiddleware, max_concurrent=server_settings.max_concurrent_writes)

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "version": VERSION}

    app.include_router(create_rest_api(record_storages, CurrentUser(auth_settings)))
    return app


def main():
    settings = default_server_settings.get()
    uvicorn.run(create_app(server_settings=settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
