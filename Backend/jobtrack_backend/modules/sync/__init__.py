from jobtrack_backend.modules.sync.base import StorageChangeListener
from jobtrack_backend.modules.sync.storage_watcher import StorageFileWatcher, StorageFileHandler

__all__ = [
    'StorageChangeListener',
    'StorageFileWatcher',
    'StorageFileHandler'
]
