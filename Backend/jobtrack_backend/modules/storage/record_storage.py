import json
import logging
import os
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, List, Optional

from jobtrack_backend.modules.errors import NotFoundOrDeniedError, StorageCorruptionError
from jobtrack_backend.modules.storage.csv_storage import CSVStorageService
from jobtrack_backend.modules.storage.key_value_storage import default_data_dir

logger = logging.getLogger(__name__)


@dataclass
class OwnedRecord:
    """Server-side row: one entity owned by exactly one user"""
    id: str
    user_id: str
    payload: str = "{}"
    date_created: str = field(default_factory=lambda: datetime.now().isoformat())
    date_updated: str = field(default_factory=lambda: datetime.now().isoformat())


class OwnedRecordStorage(CSVStorageService):
    """Storage for one resource type, scoped by owning user"""

    def __init__(self, resource: str, file_path: Optional[str] = None, backup_enabled: bool = False):
        if file_path is None:
            from jobtrack_backend.config import storage_settings
            file_path = os.path.join(
                default_data_dir(storage_settings.data_dir),
                storage_settings.records_dir,
                f"{resource}.csv"
            )
            backup_enabled = storage_settings.backup_enabled
        self.resource = resource
        super().__init__(
            file_path=file_path,
            key_column='id',
            data_class=OwnedRecord,
            backup_enabled=backup_enabled
        )

    def _decode(self, row: Dict) -> Dict:
        try:
            record = json.loads(row['payload'])
        except json.JSONDecodeError as e:
            raise StorageCorruptionError(f"{self.resource}/{row['id']}", str(e))
        record['id'] = row['id']
        return record

    async def list_for_user(self, user_id: str) -> List[Dict]:
        rows = await self.query({'user_id': user_id})
        return [self._decode(row) for row in rows]

    async def get_owned(self, record_id: str, user_id: str) -> Optional[Dict]:
        """Record if it exists and belongs to user_id, else None"""
        row = await self.get(record_id)
        if row is None or row['user_id'] != user_id:
            return None
        return self._decode(row)

    async def create_for_user(self, user_id: str, record: Dict) -> Dict:
        record_id = record['id']
        payload = json.dumps({k: v for k, v in record.items() if k != 'id'})
        await self.set(record_id, asdict(OwnedRecord(id=record_id, user_id=user_id, payload=payload)))
        return dict(record)

    async def update_for_user(self, record_id: str, user_id: str, record: Dict) -> Dict:
        if await self.get_owned(record_id, user_id) is None:
            raise NotFoundOrDeniedError(self.resource.rstrip('s').capitalize(), record_id)
        payload = json.dumps({k: v for k, v in record.items() if k != 'id'})
        await self.set(record_id, {'user_id': user_id, 'payload': payload})
        return {**record, 'id': record_id}

    async def delete_for_user(self, record_id: str, user_id: str) -> None:
        if await self.get_owned(record_id, user_id) is None:
            raise NotFoundOrDeniedError(self.resource.rstrip('s').capitalize(), record_id)
        await self.delete(record_id)
