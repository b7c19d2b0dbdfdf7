from abc import ABC, abstractmethod
from typing import Any, Dict, List

from jobtrack_backend.config.global_constants import Collection
from jobtrack_backend.modules.models.entities import Entity


class PersistenceBackend(ABC):
    """Durable home of the entity collections.

    Backends never mutate the entities they are given; they serialize copies
    and hand back freshly decoded records.
    """

    name: str = "backend"

    @abstractmethod
    async def load(self, collection: Collection) -> List[Entity]:
        """Read the whole collection"""
        pass

    @abstractmethod
    async def create(self, collection: Collection, entity: Entity) -> Entity:
        """Persist a new entity and return the stored version"""
        pass

    @abstractmethod
    async def update(self, collection: Collection, entity: Entity, changes: Dict[str, Any]) -> Entity:
        """Persist an updated entity.

        Args:
            entity: The full record after the change
            changes: Only the changed fields, for backends that send deltas
        """
        pass

    @abstractmethod
    async def delete(self, collection: Collection, entity_id: str) -> bool:
        """Remove an entity, returning whether it existed"""
        pass

    async def close(self) -> None:
        pass
