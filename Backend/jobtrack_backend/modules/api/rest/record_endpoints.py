import logging
from typing import Callable, Dict, List, Type

from fastapi import Depends, status
from pydantic import BaseModel

from jobtrack_backend.config.global_constants import Collection
from jobtrack_backend.modules.api.rest.base import BaseRESTEndpoint
from jobtrack_backend.modules.api.utils import handle_endpoint_errors
from jobtrack_backend.modules.errors import NotFoundOrDeniedError
from jobtrack_backend.modules.models.entities import ENTITY_TYPES, record_from_dict, record_to_dict
from jobtrack_backend.modules.storage.record_storage import OwnedRecordStorage
from jobtrack_backend.modules.utils import new_entity_id

logger = logging.getLogger(__name__)


class RecordEndpoints(BaseRESTEndpoint):
    """CRUD routes for one collection, scoped to the authenticated user.

    Ownership is checked before every change: a record owned by someone else
    is reported exactly like a missing one.
    """

    def __init__(self, collection: Collection, storage: OwnedRecordStorage,
                 create_model: Type[BaseModel], patch_model: Type[BaseModel],
                 current_user: Callable):
        self.collection = collection
        self.entity_type = ENTITY_TYPES[collection]
        self.storage = storage
        self.create_model = create_model
        self.patch_model = patch_model
        self.current_user = current_user
        super().__init__()

    def setup_routes(self) -> None:
        path = f"/api/{self.collection.value}"
        create_model = self.create_model
        patch_model = self.patch_model
        label = self.collection.value.rstrip('s').capitalize()

        @self.router.get(path)
        @handle_endpoint_errors
        async def list_records(user_id: str = Depends(self.current_user)) -> List[Dict]:
            """List the caller's records."""
            return await self.storage.list_for_user(user_id)

        @self.router.post(path, status_code=status.HTTP_201_CREATED)
        @handle_endpoint_errors
        async def create_record(body: create_model, user_id: str = Depends(self.current_user)) -> Dict:
            """Create a record owned by the caller."""
            record = body.model_dump(mode='json', exclude_none=True)
            record['id'] = new_entity_id()
            entity = record_from_dict(self.entity_type, record)
            created = await self.storage.create_for_user(user_id, record_to_dict(entity))
            logger.info(f"User {user_id} created {label.lower()} {created['id']}")
            return created

        @self.router.patch(path + "/{record_id}")
        @handle_endpoint_errors
        async def update_record(record_id: str, body: patch_model,
                                user_id: str = Depends(self.current_user)) -> Dict:
            """Change some fields of one of the caller's records."""
            existing = await self.storage.get_owned(record_id, user_id)
            if existing is None:
                raise NotFoundOrDeniedError(label, record_id)

            changes = body.model_dump(mode='json', exclude_unset=True)
            changes.pop('id', None)
            entity = record_from_dict(self.entity_type, {**existing, **changes})
            return await self.storage.update_for_user(record_id, user_id, record_to_dict(entity))

        @self.router.delete(path + "/{record_id}")
        @handle_endpoint_errors
        async def delete_record(record_id: str, user_id: str = Depends(self.current_user)) -> Dict:
            """Delete one of the caller's records."""
            await self.storage.delete_for_user(record_id, user_id)
            return {"success": True}
