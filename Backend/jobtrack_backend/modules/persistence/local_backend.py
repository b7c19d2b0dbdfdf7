import json
import logging
from typing import Any, Dict, List

from jobtrack_backend.config.global_constants import Collection, STORAGE_KEYS, DEFAULT_DAILY_GOAL
from jobtrack_backend.modules.errors import StorageCorruptionError, ValidationFailure
from jobtrack_backend.modules.models.entities import (
    ENTITY_TYPES, Entity, record_from_dict, record_to_dict
)
from jobtrack_backend.modules.persistence.base import PersistenceBackend
from jobtrack_backend.modules.storage.key_value_storage import KeyValueStorage

logger = logging.getLogger(__name__)


def parse_daily_goal(raw: str) -> int:
    try:
        goal = int(str(raw).strip())
    except ValueError:
        raise ValidationFailure(f"Daily goal must be an integer, got {raw!r}")
    if goal < 1:
        raise ValidationFailure("Daily goal must be at least 1")
    return goal


class LocalStorageBackend(PersistenceBackend):
    """Keeps each collection as one JSON array under its own storage key.

    Every write serializes the whole collection. Unreadable values degrade to
    an empty collection and are replaced by the next successful write.
    """

    name = "local"

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    async def read_collection(self, collection: Collection) -> List[Entity]:
        key = collection.storage_key
        raw = await self.storage.get_item(key)
        if raw is None:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise StorageCorruptionError(key, f"expected a JSON array, got {type(data).__name__}")
        except json.JSONDecodeError as e:
            logger.warning(str(StorageCorruptionError(key, str(e))))
            return []
        except StorageCorruptionError as e:
            logger.warning(str(e))
            return []

        entity_type = ENTITY_TYPES[collection]
        entities = []
        for item in data:
            try:
                entities.append(record_from_dict(entity_type, item))
            except ValidationFailure as e:
                logger.warning(f"Skipping unreadable record under '{key}': {e}")
        return entities

    async def write_collection(self, collection: Collection, entities: List[Entity]) -> None:
        raw = json.dumps([record_to_dict(entity) for entity in entities])
        await self.storage.set_item(collection.storage_key, raw)

    async def load(self, collection: Collection) -> List[Entity]:
        return await self.read_collection(collection)

    async def create(self, collection: Collection, entity: Entity) -> Entity:
        entities = await self.read_collection(collection)
        entities.append(entity)
        await self.write_collection(collection, entities)
        return entity

    async def update(self, collection: Collection, entity: Entity, changes: Dict[str, Any]) -> Entity:
        entities = await self.read_collection(collection)
        for index, existing in enumerate(entities):
            if existing.id == entity.id:
                entities[index] = entity
                break
        else:
            # Another process removed it; last write wins
            entities.append(entity)
        await self.write_collection(collection, entities)
        return entity

    async def delete(self, collection: Collection, entity_id: str) -> bool:
        entities = await self.read_collection(collection)
        remaining = [entity for entity in entities if entity.id != entity_id]
        if len(remaining) == len(entities):
            return False
        await self.write_collection(collection, remaining)
        return True

    async def get_daily_goal(self) -> int:
        raw = await self.storage.get_item(STORAGE_KEYS['daily_goal'])
        if raw is None:
            return DEFAULT_DAILY_GOAL
        try:
            return parse_daily_goal(raw)
        except ValidationFailure as e:
            logger.warning(str(StorageCorruptionError(STORAGE_KEYS['daily_goal'], str(e))))
            return DEFAULT_DAILY_GOAL

    async def set_daily_goal(self, goal: int) -> None:
        await self.storage.set_item(STORAGE_KEYS['daily_goal'], str(goal))
