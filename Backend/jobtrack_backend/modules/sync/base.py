from typing import Protocol


class StorageChangeListener(Protocol):
    """Interface for whoever re-hydrates after local storage changed underneath it"""
    async def on_storage_change(self) -> None:
        """Called after another process rewrote local storage"""
        pass
