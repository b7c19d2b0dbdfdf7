import json
import logging
from typing import Dict, Optional

import httpx

from jobtrack_backend.config.global_constants import ApplicationStatus, Collection, DEFAULT_DAILY_GOAL
from jobtrack_backend.modules.business.store.entity_store import EntityStore
from jobtrack_backend.modules.business.transfer.codec import TransferCodec
from jobtrack_backend.modules.errors import UnauthorizedError, ValidationFailure
from jobtrack_backend.modules.models.entities import (
    CalendarEvent, CompanyApplication, Problem, record_to_dict
)
from jobtrack_backend.modules.models.transfer import ExportDocument, ImportResult
from jobtrack_backend.modules.persistence import (
    ANONYMOUS, AuthSession, LocalStorageBackend, PersistenceBackend, RemoteApiBackend,
    migrate_local_to_remote, select_backend
)
from jobtrack_backend.modules.storage.key_value_storage import KeyValueStorage
from jobtrack_backend.modules.sync.base import StorageChangeListener
from jobtrack_backend.modules.sync.storage_watcher import StorageFileWatcher

logger = logging.getLogger(__name__)


class JobTrackWorkspace(StorageChangeListener):
    """Everything one user session works with: the three stores, the daily
    goal, backend selection and import/export.

    All three collections share one backend. The daily goal is a device
    preference and always stays in local storage.
    """

    def __init__(self, storage: KeyValueStorage, session: Optional[AuthSession] = None,
                 client: Optional[httpx.AsyncClient] = None):
        self.storage = storage
        self.local = LocalStorageBackend(storage)
        self.codec = TransferCodec(storage)
        self._client = client
        self.session = session or ANONYMOUS

        backend = select_backend(self.session, self.local, client)
        self.applications: EntityStore[CompanyApplication] = EntityStore(Collection.APPLICATIONS, backend)
        self.events: EntityStore[CalendarEvent] = EntityStore(Collection.EVENTS, backend)
        self.problems: EntityStore[Problem] = EntityStore(Collection.PROBLEMS, backend)

        self._daily_goal = DEFAULT_DAILY_GOAL
        self._watcher: Optional[StorageFileWatcher] = None

    @property
    def stores(self) -> Dict[Collection, EntityStore]:
        return {
            Collection.APPLICATIONS: self.applications,
            Collection.EVENTS: self.events,
            Collection.PROBLEMS: self.problems,
        }

    @property
    def backend(self) -> PersistenceBackend:
        return self.applications.backend

    @property
    def is_remote(self) -> bool:
        return isinstance(self.backend, RemoteApiBackend)

    @property
    def daily_goal(self) -> int:
        return self._daily_goal

    async def hydrate(self) -> None:
        for store in self.stores.values():
            await store.hydrate()
        self._daily_goal = await self.local.get_daily_goal()

    async def set_daily_goal(self, goal: int) -> int:
        if isinstance(goal, bool) or not isinstance(goal, int) or goal < 1:
            raise ValidationFailure("Daily goal must be a positive integer")
        await self.local.set_daily_goal(goal)
        self._daily_goal = goal
        return goal

    async def _switch_backend(self, backend: PersistenceBackend) -> None:
        """Load everything from the new backend before any store switches over"""
        previous = self.backend
        try:
            loaded = {collection: await backend.load(collection) for collection in self.stores}
        except Exception:
            if backend is not previous:
                await backend.close()
            raise

        for collection, store in self.stores.items():
            store.replace_all(loaded[collection], backend)
        if previous is not backend:
            await previous.close()

    async def authenticate(self, session: AuthSession) -> None:
        """Move all collections to the signed-in user's remote storage"""
        if not session.is_authenticated:
            raise UnauthorizedError()
        backend = select_backend(session, self.local, self._client)
        await self._switch_backend(backend)
        self.session = session
        logger.info(f"Using remote storage for user {session.user_id}")

    async def sign_out(self) -> None:
        await self._switch_backend(self.local)
        self.session = ANONYMOUS
        logger.info("Using local storage")

    async def migrate_local_to_remote(self) -> Dict[Collection, int]:
        """Upload local records to the remote account, then reload from it"""
        if not self.is_remote:
            raise UnauthorizedError()
        moved = await migrate_local_to_remote(self.local, self.backend)
        for store in self.stores.values():
            await store.hydrate()
        return moved

    async def toggle_problem(self, problem_id: str) -> Optional[Problem]:
        problem = self.problems.get(problem_id)
        if problem is None:
            return None
        return await self.problems.update(problem_id, {'completed': not problem.completed})

    async def toggle_action_item(self, event_id: str, item_id: str) -> Optional[CalendarEvent]:
        event = self.events.get(event_id)
        if event is None:
            return None
        items = [record_to_dict(item) for item in event.actionItems]
        for item in items:
            if item['id'] == item_id:
                item['completed'] = not item['completed']
                break
        else:
            return None
        return await self.events.update(event_id, {'actionItems': items})

    async def set_application_status(self, application_id: str,
                                     status: ApplicationStatus) -> Optional[CompanyApplication]:
        return await self.applications.update(application_id, {'status': ApplicationStatus(status)})

    def _remote_overrides(self) -> Dict[str, str]:
        if not self.is_remote:
            return {}
        return {
            collection.storage_key: json.dumps([record_to_dict(entity) for entity in store.list()])
            for collection, store in self.stores.items()
        }

    async def export_document(self) -> ExportDocument:
        return await self.codec.export_document(self._remote_overrides())

    async def export_json(self) -> str:
        return await self.codec.export_json(self._remote_overrides())

    async def import_json(self, text: str) -> ImportResult:
        """Overwrite local storage from an export. Stores keep their current
        contents until the next hydrate()."""
        return await self.codec.import_json(text)

    async def on_storage_change(self) -> None:
        if not self.is_remote:
            for store in self.stores.values():
                await store.hydrate()
        self._daily_goal = await self.local.get_daily_goal()

    def start_watching(self) -> StorageFileWatcher:
        """Re-hydrate whenever another process rewrites local storage.
        Must be called from a running event loop."""
        if self._watcher is None:
            self._watcher = StorageFileWatcher(str(self.storage.file_path), self)
        self._watcher.start()
        return self._watcher

    def stop_watching(self) -> None:
        if self._watcher is not None:
            self._watcher.stop()

    async def close(self) -> None:
        self.stop_watching()
        await self.backend.close()


async def open_workspace(storage: Optional[KeyValueStorage] = None, session: Optional[AuthSession] = None,
                         client: Optional[httpx.AsyncClient] = None,
                         watch: Optional[bool] = None) -> JobTrackWorkspace:
    """Create and hydrate a workspace over the configured local storage.

    Args:
        storage: Local storage to use instead of the configured file
        session: Signed-in session; anonymous sessions stay on local storage
        watch: Re-hydrate on external writes. Defaults to the storage settings.
    """
    from jobtrack_backend.config import storage_settings

    workspace = JobTrackWorkspace(storage or KeyValueStorage(), session, client)
    await workspace.hydrate()
    if watch is None:
        watch = storage_settings.watch_local_storage
    if watch:
        workspace.start_watching()
    return workspace
