import logging
from dataclasses import fields, replace
from datetime import date, datetime
from typing import Any, Callable, Dict, Generic, List, Optional, Union

from jobtrack_backend.config.global_constants import Collection
from jobtrack_backend.modules.errors import ValidationFailure
from jobtrack_backend.modules.models.entities import (
    E, ENTITY_TYPES, company_of, day_of, record_from_dict, record_to_dict
)
from jobtrack_backend.modules.persistence.base import PersistenceBackend
from jobtrack_backend.modules.utils import new_entity_id, to_jsonable

logger = logging.getLogger(__name__)


class EntityStore(Generic[E]):
    """In-memory authoritative copy of one collection for the current session.

    Mutations are written to the backend first and committed to memory only
    once the backend call returned, so a failing backend leaves the store as
    it was.
    """

    def __init__(self, collection: Collection, backend: PersistenceBackend,
                 id_factory: Callable[[], str] = new_entity_id):
        self.collection = collection
        self.entity_type = ENTITY_TYPES[collection]
        self.backend = backend
        self._id_factory = id_factory
        self._entities: List[E] = []

    def __len__(self) -> int:
        return len(self._entities)

    def _index_of(self, entity_id: str) -> Optional[int]:
        for index, entity in enumerate(self._entities):
            if entity.id == entity_id:
                return index
        return None

    def _fresh_id(self) -> str:
        taken = {entity.id for entity in self._entities}
        entity_id = self._id_factory()
        while not entity_id or entity_id in taken:
            entity_id = self._id_factory()
        return entity_id

    async def hydrate(self) -> List[E]:
        """Replace the in-memory collection with what the backend holds"""
        self.replace_all(await self.backend.load(self.collection))
        logger.debug(f"Hydrated {len(self._entities)} {self.collection.value} from {self.backend.name}")
        return self.list()

    def replace_all(self, entities: List[E], backend: Optional[PersistenceBackend] = None) -> None:
        """Swap in an already loaded collection, optionally with its new backend"""
        if backend is not None:
            self.backend = backend
        self._entities = list(entities)

    async def rebind(self, backend: PersistenceBackend) -> List[E]:
        """Switch to another backend and re-hydrate from it.

        The store keeps its current backend and contents if loading fails.
        """
        entities = await backend.load(self.collection)
        self.replace_all(entities, backend)
        return self.list()

    def list(self) -> List[E]:
        return list(self._entities)

    def get(self, entity_id: str) -> Optional[E]:
        index = self._index_of(entity_id)
        return None if index is None else self._entities[index]

    async def add(self, entity: E) -> str:
        """Persist a new entity and return its id"""
        if not isinstance(entity, self.entity_type):
            raise ValidationFailure(f"Expected {self.entity_type.__name__}, got {type(entity).__name__}")
        if not entity.id or self._index_of(entity.id) is not None:
            entity = replace(entity, id=self._fresh_id())
        entity.validate()

        stored = await self.backend.create(self.collection, entity)
        self._entities.append(stored)
        return stored.id

    async def update(self, entity_id: str, patch: Dict[str, Any]) -> Optional[E]:
        """Apply a partial change.

        Returns:
            The updated entity, or None when no entity has this id
        """
        index = self._index_of(entity_id)
        if index is None:
            logger.info(f"Ignoring update of unknown {self.collection.value} id {entity_id}")
            return None

        known = {f.name for f in fields(self.entity_type)}
        unknown = set(patch) - known
        if unknown:
            raise ValidationFailure(f"Unknown fields for {self.entity_type.__name__}: {sorted(unknown)}")
        if 'id' in patch and patch['id'] != entity_id:
            raise ValidationFailure("The id of an entity cannot be changed")

        changes = to_jsonable({k: v for k, v in patch.items() if k != 'id'})
        merged = {**record_to_dict(self._entities[index]), **changes}
        candidate = record_from_dict(self.entity_type, merged)

        stored = await self.backend.update(self.collection, candidate, changes)
        # The collection may have been re-hydrated while the backend call was pending
        index = self._index_of(entity_id)
        if index is None:
            self._entities.append(stored)
        else:
            self._entities[index] = stored
        return stored

    async def remove(self, entity_id: str) -> bool:
        """Delete an entity; False when no entity has this id"""
        if self._index_of(entity_id) is None:
            return False
        await self.backend.delete(self.collection, entity_id)
        index = self._index_of(entity_id)
        if index is not None:
            del self._entities[index]
        return True

    def get_by_day(self, day: Union[date, datetime]) -> List[E]:
        if isinstance(day, datetime):
            day = day.date()
        return [entity for entity in self._entities if day_of(entity) == day]

    def get_by_company(self, name: str) -> List[E]:
        name = name.strip().lower()
        return [
            entity for entity in self._entities
            if (company_of(entity) or '').strip().lower() == name
        ]
