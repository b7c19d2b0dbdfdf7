from jobtrack_backend.modules.business.store.entity_store import EntityStore
from jobtrack_backend.modules.business.store.workspace import JobTrackWorkspace, open_workspace

__all__ = [
    'EntityStore',
    'JobTrackWorkspace',
    'open_workspace'
]
