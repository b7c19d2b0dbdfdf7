"""
Configuration models for the application.
These dataclasses match the structure of the YAML config files.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class StorageSettingsModel:
    # Empty means the platform user data directory
    data_dir: str = ""
    local_storage_file: str = "local_storage.csv"
    records_dir: str = "records"

    # Backups
    backup_enabled: bool = True
    backup_interval: int = 86400

    # Re-hydrate when another process rewrites local storage
    watch_local_storage: bool = True


@dataclass(frozen=True)
class ServerSettingsModel:
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: List[str] = field(default_factory=lambda: ["http://127.0.0.1"])
    max_concurrent_writes: int = 1


@dataclass(frozen=True)
class AuthSettingsModel:
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60


@dataclass(frozen=True)
class ClientSettingsModel:
    api_base_url: str = "http://127.0.0.1:8000/api"
    request_timeout: float = 10.0
