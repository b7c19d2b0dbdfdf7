from unittest.mock import MagicMock

import yaml

from jobtrack_backend.config import DynamicConfig, construct_model_kwargs
from jobtrack_backend.config.models import ServerSettingsModel, StorageSettingsModel


def test_template_is_copied_to_local_dir(tmp_path):
    config = DynamicConfig('storage', StorageSettingsModel, config_dir=str(tmp_path))

    assert (tmp_path / "local" / "storage.yaml").exists()
    assert config.local_storage_file == 'local_storage.csv'
    assert config.get().backup_enabled is True


def test_local_override_and_refresh_notify_listeners(tmp_path):
    config = DynamicConfig('server', ServerSettingsModel, config_dir=str(tmp_path))
    listener = MagicMock()
    config.register_listener(listener)

    with open(config.local_path, "w") as f:
        yaml.safe_dump({'port': 9000, 'max_concurrent_writes': 2}, f)
    config.refresh()

    assert config.port == 9000
    assert config.host == '127.0.0.1'
    listener.assert_called_once_with(config.get())

    config.unregister_listener(listener)
    config.refresh()
    listener.assert_called_once()


def test_unknown_settings_are_ignored():
    kwargs = construct_model_kwargs({'port': 1234, 'colour': 'blue'}, ServerSettingsModel)

    assert kwargs == {'port': 1234}
