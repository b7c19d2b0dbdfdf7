from jobtrack_backend.modules.storage.base import StorageService
from jobtrack_backend.modules.storage.csv_storage import CSVStorageService
from jobtrack_backend.modules.storage.key_value_storage import KeyValueStorage
from jobtrack_backend.modules.storage.record_storage import OwnedRecordStorage

__all__ = [
    'StorageService',
    'CSVStorageService',
    'KeyValueStorage',
    'OwnedRecordStorage'
]
