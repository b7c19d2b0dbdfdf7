import logging
from typing import Any, Dict, List, Optional

import httpx

from jobtrack_backend.config.global_constants import Collection
from jobtrack_backend.modules.errors import (
    NotFoundOrDeniedError, TransientIOError, UnauthorizedError, ValidationFailure
)
from jobtrack_backend.modules.models.entities import (
    ENTITY_TYPES, Entity, record_from_dict, record_to_dict, records_from_list
)
from jobtrack_backend.modules.persistence.base import PersistenceBackend
from jobtrack_backend.modules.persistence.session import AuthSession
from jobtrack_backend.modules.utils import to_jsonable

logger = logging.getLogger(__name__)


class RemoteApiBackend(PersistenceBackend):
    """Talks to the JobTrack REST API on behalf of the signed-in user.

    Failed calls are never retried; they surface as domain errors so the
    caller can leave its in-memory state untouched.
    """

    name = "remote"

    def __init__(self, session: AuthSession, base_url: Optional[str] = None,
                 client: Optional[httpx.AsyncClient] = None, timeout: Optional[float] = None):
        if session is None or not session.is_authenticated:
            raise UnauthorizedError()
        self.session = session

        if client is None:
            from jobtrack_backend.config import client_settings
            client = httpx.AsyncClient(
                base_url=base_url or client_settings.api_base_url,
                timeout=timeout or client_settings.request_timeout
            )
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = client

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.session.access_token}"}

    async def _request(self, method: str, path: str, resource: str, entity_id: str = "",
                       json: Any = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TransientIOError(f"{method} {path} failed: {e}") from e

        if response.status_code == 401:
            raise UnauthorizedError()
        if response.status_code == 404:
            raise NotFoundOrDeniedError(resource, entity_id)
        if response.status_code in (400, 422):
            raise ValidationFailure(self._error_detail(response))
        if response.status_code >= 400:
            logger.error(f"{method} {path} returned {response.status_code}")
            raise TransientIOError(f"{method} {path} returned {response.status_code}: {self._error_detail(response)}")

        try:
            return response.json()
        except ValueError as e:
            raise TransientIOError(f"{method} {path} returned invalid JSON") from e

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            return str(body.get('detail') or body.get('error') or body)
        return str(body)

    async def load(self, collection: Collection) -> List[Entity]:
        data = await self._request("GET", f"/{collection.value}", collection.value)
        return records_from_list(ENTITY_TYPES[collection], data)

    async def create(self, collection: Collection, entity: Entity) -> Entity:
        body = record_to_dict(entity)
        body.pop('id', None)
        data = await self._request("POST", f"/{collection.value}", collection.value, json=body)
        return record_from_dict(ENTITY_TYPES[collection], data)

    async def update(self, collection: Collection, entity: Entity, changes: Dict[str, Any]) -> Entity:
        data = await self._request(
            "PATCH", f"/{collection.value}/{entity.id}", collection.value, entity.id,
            json=to_jsonable(changes)
        )
        return record_from_dict(ENTITY_TYPES[collection], data)

    async def delete(self, collection: Collection, entity_id: str) -> bool:
        data = await self._request("DELETE", f"/{collection.value}/{entity_id}", collection.value, entity_id)
        return bool(data.get('success')) if isinstance(data, dict) else True

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
