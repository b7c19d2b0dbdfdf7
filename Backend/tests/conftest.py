from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient

from jobtrack_backend.config.global_constants import ApplicationStatus, Collection, Difficulty, ProcessStep
from jobtrack_backend.config.models import AuthSettingsModel, ServerSettingsModel
from jobtrack_backend.modules.api.auth import create_access_token
from jobtrack_backend.modules.models.entities import ActionItem, CalendarEvent, CompanyApplication, Problem
from jobtrack_backend.modules.persistence.local_backend import LocalStorageBackend
from jobtrack_backend.modules.server import create_app
from jobtrack_backend.modules.storage.key_value_storage import KeyValueStorage
from jobtrack_backend.modules.storage.record_storage import OwnedRecordStorage


def create_test_application(**kwargs) -> CompanyApplication:
    """Create a CompanyApplication instance with test data"""
    defaults = {
        'companyName': 'Acme',
        'position': 'Backend Engineer',
        'dateApplied': date(2024, 5, 1),
        'status': ApplicationStatus.APPLIED,
    }
    defaults.update(kwargs)
    return CompanyApplication(**defaults)


def create_test_event(**kwargs) -> CalendarEvent:
    defaults = {
        'company': 'Acme',
        'position': 'Backend Engineer',
        'step': ProcessStep.PHONE_SCREEN,
        'date': datetime(2024, 5, 3, 9, 30),
        'actionItems': [ActionItem(text='Review system design'), ActionItem(text='Send thank-you note')],
    }
    defaults.update(kwargs)
    return CalendarEvent(**defaults)


def create_test_problem(**kwargs) -> Problem:
    defaults = {
        'name': 'Two Sum',
        'difficulty': Difficulty.EASY,
        'url': 'https://leetcode.com/problems/two-sum/',
    }
    defaults.update(kwargs)
    return Problem(**defaults)


@pytest.fixture
def storage(tmp_path):
    return KeyValueStorage(str(tmp_path / "local_storage.csv"))


@pytest.fixture
def local_backend(storage):
    return LocalStorageBackend(storage)


@pytest.fixture
def auth_config():
    return AuthSettingsModel(jwt_secret="test-secret", jwt_algorithm="HS256", access_token_expire_minutes=5)


@pytest.fixture
def token_for(auth_config):
    def _token_for(user_id: str) -> str:
        return create_access_token(user_id, auth_config)
    return _token_for


@pytest.fixture
def record_storages(tmp_path):
    return {
        collection: OwnedRecordStorage(collection.value, str(tmp_path / "records" / f"{collection.value}.csv"))
        for collection in Collection
    }


@pytest.fixture
def app(auth_config, record_storages):
    return create_app(
        auth_settings=auth_config,
        server_settings=ServerSettingsModel(cors_origins=["http://testserver"]),
        record_storages=record_storages
    )


@pytest.fixture
def test_client(app):
    return TestClient(app)
