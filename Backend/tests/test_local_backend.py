import json
from datetime import date, datetime, timezone

import pytest

from jobtrack_backend.config.global_constants import ApplicationStatus, Collection, DEFAULT_DAILY_GOAL
from jobtrack_backend.modules.errors import ValidationFailure
from jobtrack_backend.modules.persistence.local_backend import parse_daily_goal
from tests.conftest import create_test_application, create_test_event


@pytest.mark.asyncio
async def test_missing_key_loads_empty(local_backend):
    assert await local_backend.load(Collection.EVENTS) == []


@pytest.mark.asyncio
async def test_corrupted_events_fall_back_to_empty_and_next_save_repairs(local_backend, storage):
    await storage.set_item('calendar-events', '{not json')

    assert await local_backend.load(Collection.EVENTS) == []

    event = create_test_event()
    await local_backend.create(Collection.EVENTS, event)

    raw = await storage.get_item('calendar-events')
    assert [item['id'] for item in json.loads(raw)] == [event.id]


@pytest.mark.asyncio
async def test_non_array_value_is_treated_as_corrupted(local_backend, storage):
    await storage.set_item('company-applications', '{"id": "1"}')

    assert await local_backend.load(Collection.APPLICATIONS) == []


@pytest.mark.asyncio
async def test_unreadable_records_are_skipped(local_backend, storage):
    good = create_test_application()
    records = [{'companyName': '', 'position': 'x', 'id': 'bad'},
               {'companyName': good.companyName, 'position': good.position, 'dateApplied': '2024-05-01',
                'status': 'Applied', 'id': good.id}]
    await storage.set_item('company-applications', json.dumps(records))

    loaded = await local_backend.load(Collection.APPLICATIONS)

    assert [app.id for app in loaded] == [good.id]


@pytest.mark.asyncio
async def test_dates_are_stored_as_iso_strings(local_backend, storage):
    event = create_test_event(date=datetime(2024, 5, 3, 9, 30))
    await local_backend.create(Collection.EVENTS, event)

    stored = json.loads(await storage.get_item('calendar-events'))[0]
    assert stored['date'] == '2024-05-03T09:30:00'
    assert stored['step'] == 'Phone Screen'

    loaded = (await local_backend.load(Collection.EVENTS))[0]
    assert loaded == event


@pytest.mark.asyncio
async def test_browser_timestamps_and_legacy_statuses_are_read(local_backend, storage):
    await storage.set_item('company-applications', json.dumps([
        {'id': 1700000000000, 'companyName': 'Acme', 'position': 'SRE',
         'dateApplied': '2024-05-01T00:00:00.000Z', 'status': 'Interview'},
        {'id': '1700000000001', 'companyName': 'Globex', 'position': 'SWE',
         'dateApplied': '2024-05-02', 'status': 'Offer'},
    ]))

    loaded = await local_backend.load(Collection.APPLICATIONS)

    assert [app.id for app in loaded] == ['1700000000000', '1700000000001']
    assert loaded[0].dateApplied == datetime(2024, 5, 1, tzinfo=timezone.utc).astimezone().date()
    assert loaded[0].status == ApplicationStatus.INTERVIEWING
    assert loaded[1].status == ApplicationStatus.OFFER_RECEIVED


@pytest.mark.asyncio
async def test_update_and_delete(local_backend):
    app = create_test_application()
    await local_backend.create(Collection.APPLICATIONS, app)

    app.status = ApplicationStatus.REJECTED
    await local_backend.update(Collection.APPLICATIONS, app, {'status': 'Rejected'})
    assert (await local_backend.load(Collection.APPLICATIONS))[0].status == ApplicationStatus.REJECTED

    assert await local_backend.delete(Collection.APPLICATIONS, app.id) is True
    assert await local_backend.delete(Collection.APPLICATIONS, app.id) is False
    assert await local_backend.load(Collection.APPLICATIONS) == []


@pytest.mark.asyncio
async def test_daily_goal_defaults_and_persists(local_backend, storage):
    assert await local_backend.get_daily_goal() == DEFAULT_DAILY_GOAL

    await local_backend.set_daily_goal(5)
    assert await local_backend.get_daily_goal() == 5
    assert await storage.get_item('leetcode-daily-goal') == '5'

    await storage.set_item('leetcode-daily-goal', 'lots')
    assert await local_backend.get_daily_goal() == DEFAULT_DAILY_GOAL


@pytest.mark.parametrize("raw", ["0", "-2", "three", ""])
def test_parse_daily_goal_rejects_invalid_values(raw):
    with pytest.raises(ValidationFailure):
        parse_daily_goal(raw)


@pytest.mark.asyncio
async def test_action_items_without_ids_decode_to_stable_ids(local_backend, storage):
    await storage.set_item('calendar-events', json.dumps([{
        'id': 'e1', 'company': 'Acme', 'position': 'SWE', 'step': 'Final Round',
        'date': '2024-05-03T09:30:00',
        'actionItems': [{'text': 'Prepare questions'}, {'text': 'Book travel', 'id': ''}],
    }]))

    first = await local_backend.load(Collection.EVENTS)
    second = await local_backend.load(Collection.EVENTS)

    assert [item.id for item in first[0].actionItems] == ['e1-item-0', 'e1-item-1']
    assert first == second
