from typing import Optional

import httpx

from jobtrack_backend.modules.persistence.base import PersistenceBackend
from jobtrack_backend.modules.persistence.local_backend import LocalStorageBackend
from jobtrack_backend.modules.persistence.migration import migrate_local_to_remote
from jobtrack_backend.modules.persistence.remote_backend import RemoteApiBackend
from jobtrack_backend.modules.persistence.session import AuthSession, ANONYMOUS


def select_backend(session: Optional[AuthSession], local: LocalStorageBackend,
                   client: Optional[httpx.AsyncClient] = None) -> PersistenceBackend:
    """Remote API for signed-in users, local storage otherwise"""
    if session is not None and session.is_authenticated:
        return RemoteApiBackend(session, client=client)
    return local


__all__ = [
    'PersistenceBackend',
    'LocalStorageBackend',
    'RemoteApiBackend',
    'AuthSession',
    'ANONYMOUS',
    'select_backend',
    'migrate_local_to_remote'
]
