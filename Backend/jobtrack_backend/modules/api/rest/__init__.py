from typing import Callable, Dict

from fastapi import APIRouter

from jobtrack_backend.config.global_constants import Collection
from jobtrack_backend.modules.api.rest.record_endpoints import RecordEndpoints
from jobtrack_backend.modules.models.services import (
    ApplicationCreate, ApplicationPatch, EventCreate, EventPatch, ProblemCreate, ProblemPatch
)
from jobtrack_backend.modules.storage.record_storage import OwnedRecordStorage

REQUEST_MODELS = {
    Collection.APPLICATIONS: (ApplicationCreate, ApplicationPatch),
    Collection.EVENTS: (EventCreate, EventPatch),
    Collection.PROBLEMS: (ProblemCreate, ProblemPatch),
}


def create_rest_api(
    record_storages: Dict[Collection, OwnedRecordStorage],
    current_user: Callable
) -> APIRouter:
    """Create and configure the REST API router."""
    api_router = APIRouter()

    for collection, storage in record_storages.items():
        create_model, patch_model = REQUEST_MODELS[collection]
        endpoints = RecordEndpoints(collection, storage, create_model, patch_model, current_user)
        api_router.include_router(endpoints.routes, tags=[collection.value])

    return api_router
