"""Configuration management for the application.

This module handles loading configuration from template files and local overrides.
Template files provide default values, while local files (if they exist) override these defaults.

Directory Structure:
    config/
        templates/  - Template files with default values (.yaml)
    {user_config_dir}/local/     - Local override files (OS-dependent)
"""
import logging
import os
import shutil
from dataclasses import is_dataclass, fields, dataclass
from importlib import resources
from pathlib import Path
from threading import Lock
from typing import Dict, Any, Type, List, Generic, TypeVar, Callable, Optional

import platformdirs
import yaml

from jobtrack_backend.config.global_constants import VERSION, APP_NAME
from jobtrack_backend.config.models import (
    StorageSettingsModel, ServerSettingsModel, AuthSettingsModel, ClientSettingsModel
)

T = TypeVar('T')

logger = logging.getLogger(__name__)


def construct_model_kwargs(data: Dict[str, Any], model_class: Type) -> Dict[str, Any]:
    """Keep only the keys the model declares, warning about the rest."""
    if not is_dataclass(model_class):
        return data

    known = {f.name for f in fields(model_class)}
    result = {}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown setting '{key}' for {model_class.__name__}")
            continue
        result[key] = value
    return result


@dataclass
class ConfigState(Generic[T]):
    data: T


class DynamicConfig(Generic[T]):
    def __init__(self, name: str, model_class: type[T], config_dir: Optional[str] = None):
        self.name = name
        self.model_class = model_class
        self.template_path = resources.files('jobtrack_backend.config.templates').joinpath(f"{name}.yaml")

        # Set up platform-specific config directory using platformdirs
        if config_dir is None:
            config_dir = platformdirs.user_config_dir(APP_NAME, appauthor=False, version=VERSION)
        local_dir = Path(config_dir) / "local"
        local_dir.mkdir(parents=True, exist_ok=True)

        self.local_path = str(local_dir / f"{name}.yaml")

        # Copy template to local if local doesn't exist but template does
        if os.path.exists(str(self.template_path)) and not os.path.exists(self.local_path):
            shutil.copy2(str(self.template_path), self.local_path)

        self._state: ConfigState[T] | None = None
        self._lock = Lock()
        self._listeners: List[Callable[[T], None]] = []

        self._load_config()

    def register_listener(self, callback: Callable[[T], None]) -> None:
        """
        Register a callback function to be called when config changes.

        Args:
            callback: A function that takes the config object as its argument
        """
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def unregister_listener(self, callback: Callable[[T], None]) -> None:
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def _notify_listeners(self, config: T) -> None:
        for listener in self._listeners:
            try:
                listener(config)
            except Exception as e:
                logger.error(f"Error in config listener: {e}")

    def _load_config(self) -> None:
        config = {}

        if os.path.exists(str(self.template_path)):
            with self.template_path.open('r') as f:
                config.update(yaml.safe_load(f) or {})

        if os.path.exists(self.local_path):
            with open(self.local_path, "r") as f:
                config.update(yaml.safe_load(f) or {})

        self._state = ConfigState(
            data=self.model_class(**construct_model_kwargs(config, self.model_class))
        )

    def get(self) -> T:
        return self._state.data

    def refresh(self):
        with self._lock:
            self._load_config()
            config = self._state.data

        # Notify listeners outside the lock to avoid deadlocks
        if self._listeners:
            self._notify_listeners(config)

    def __getattr__(self, name: str) -> Any:
        return getattr(self.get(), name)


# Initialize dynamic configurations
storage_settings = DynamicConfig('storage', StorageSettingsModel)
server_settings = DynamicConfig('server', ServerSettingsModel)
auth_settings = DynamicConfig('auth', AuthSettingsModel)
client_settings = DynamicConfig('client', ClientSettingsModel)
