import pytest

from jobtrack_backend.modules.errors import NotFoundOrDeniedError, StorageCorruptionError
from jobtrack_backend.modules.storage.key_value_storage import KeyValueStorage
from jobtrack_backend.modules.storage.record_storage import OwnedRecordStorage


@pytest.mark.asyncio
async def test_key_value_round_trip(storage):
    assert await storage.get_item('missing') is None

    await storage.set_item('calendar-events', '[{"id": "1", "company": "Acme, Inc."}]')
    await storage.set_item('leetcode-daily-goal', '3')
    await storage.set_item('leetcode-daily-goal', '4')

    assert await storage.items() == {
        'calendar-events': '[{"id": "1", "company": "Acme, Inc."}]',
        'leetcode-daily-goal': '4',
    }
    assert await storage.remove_item('leetcode-daily-goal') is True
    assert await storage.remove_item('leetcode-daily-goal') is False


@pytest.mark.asyncio
async def test_update_keeps_creation_date(storage):
    await storage.set_item('leetcode-daily-goal', '3')
    created = (await storage.get('leetcode-daily-goal'))['date_created']

    await storage.set_item('leetcode-daily-goal', '4')
    row = await storage.get('leetcode-daily-goal')

    assert row['date_created'] == created
    assert row['date_updated'] >= created


@pytest.mark.asyncio
async def test_set_items_writes_all_keys(storage):
    await storage.set_items({'a': '1', 'b': '2'})

    assert await storage.items() == {'a': '1', 'b': '2'}


@pytest.mark.asyncio
async def test_backups_keep_two_most_recent(tmp_path):
    storage = KeyValueStorage(str(tmp_path / "local_storage.csv"), backup_enabled=True)
    await storage.set_item('a', '1')

    for _ in range(4):
        storage._create_backup()

    backups = list(tmp_path.glob("local_storage.csv.*.bak"))
    assert len(backups) == 2


@pytest.mark.asyncio
async def test_owned_records_are_scoped_by_user(tmp_path):
    records = OwnedRecordStorage('problems', str(tmp_path / "problems.csv"))
    await records.create_for_user('alice', {'id': 'p1', 'name': 'Two Sum'})

    assert await records.list_for_user('alice') == [{'name': 'Two Sum', 'id': 'p1'}]
    assert await records.list_for_user('bob') == []
    assert await records.get_owned('p1', 'bob') is None
    with pytest.raises(NotFoundOrDeniedError, match='Problem not found or access denied'):
        await records.update_for_user('p1', 'bob', {'id': 'p1', 'name': 'Changed'})
    with pytest.raises(NotFoundOrDeniedError):
        await records.delete_for_user('p1', 'bob')

    await records.delete_for_user('p1', 'alice')
    assert await records.list_for_user('alice') == []


@pytest.mark.asyncio
async def test_corrupted_payload_is_reported(tmp_path):
    records = OwnedRecordStorage('problems', str(tmp_path / "problems.csv"))
    await records.set('p1', {'user_id': 'alice', 'payload': '{oops'})

    with pytest.raises(StorageCorruptionError):
        await records.list_for_user('alice')
