import logging
import os
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, Optional

import platformdirs

from jobtrack_backend.config.global_constants import APP_NAME
from jobtrack_backend.modules.storage.csv_storage import CSVStorageService

logger = logging.getLogger(__name__)


@dataclass
class StorageEntry:
    """One key of the local key-value storage"""
    key: str
    value: str = ""
    date_created: str = field(default_factory=lambda: datetime.now().isoformat())
    date_updated: str = field(default_factory=lambda: datetime.now().isoformat())


def default_data_dir(data_dir: str = "") -> str:
    return data_dir or platformdirs.user_data_dir(APP_NAME, appauthor=False)


class KeyValueStorage(CSVStorageService):
    """Text key-value storage persisted to a single CSV file.

    Values are opaque strings; callers decide how to encode them.
    """

    def __init__(self, file_path: Optional[str] = None, backup_enabled: bool = False):
        if file_path is None:
            from jobtrack_backend.config import storage_settings
            file_path = os.path.join(
                default_data_dir(storage_settings.data_dir),
                storage_settings.local_storage_file
            )
            backup_enabled = storage_settings.backup_enabled
        super().__init__(
            file_path=file_path,
            key_column='key',
            data_class=StorageEntry,
            backup_enabled=backup_enabled
        )

    async def get_item(self, key: str) -> Optional[str]:
        """Raw text stored under key, or None when the key was never set"""
        row = await self.get(key)
        if row is None:
            return None
        return row.get('value', '')

    async def set_item(self, key: str, value: str) -> None:
        await self.set(key, asdict(StorageEntry(key=key, value=value)))

    async def set_items(self, values: Dict[str, str]) -> None:
        """Set several keys with one write; either all land or none do"""
        await self.set_many({
            key: asdict(StorageEntry(key=key, value=value))
            for key, value in values.items()
        })

    async def remove_item(self, key: str) -> bool:
        return await self.delete(key)

    async def items(self) -> Dict[str, str]:
        rows = await self.get_all()
        return {row['key']: row.get('value', '') for row in rows}
