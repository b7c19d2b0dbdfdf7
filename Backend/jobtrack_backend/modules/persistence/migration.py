import logging
from typing import Dict, Iterable

from jobtrack_backend.config.global_constants import Collection
from jobtrack_backend.modules.persistence.local_backend import LocalStorageBackend
from jobtrack_backend.modules.persistence.remote_backend import RemoteApiBackend

logger = logging.getLogger(__name__)


async def migrate_local_to_remote(local: LocalStorageBackend, remote: RemoteApiBackend,
                                  collections: Iterable[Collection] = tuple(Collection)) -> Dict[Collection, int]:
    """Move locally stored records to the signed-in user's account.

    Each record leaves local storage right after the server accepted it, so an
    interrupted migration can be resumed without uploading anything twice.
    Errors from the remote backend propagate unchanged.

    Returns:
        Number of records moved per collection
    """
    moved = {}
    for collection in collections:
        pending = await local.read_collection(collection)
        count = 0
        for entity in pending:
            await remote.create(collection, entity)
            await local.delete(collection, entity.id)
            count += 1
        moved[collection] = count
        if count:
            logger.info(f"Moved {count} {collection.value} to the remote backend")
    return moved
