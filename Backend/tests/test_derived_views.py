from datetime import date, datetime, timezone

from jobtrack_backend.config.global_constants import ApplicationStatus, ProcessStep
from jobtrack_backend.modules.business.views import (
    aggregate_counts, events_for_day, events_in_month, filter_by_search_term, group_by_company,
    pending_action_items, problem_progress
)
from jobtrack_backend.modules.models.entities import ActionItem, CalendarEvent, record_from_dict
from tests.conftest import create_test_application, create_test_event, create_test_problem


def test_group_by_company_preserves_orders():
    apps = [
        create_test_application(companyName='Globex', position='A'),
        create_test_application(companyName='Acme', position='B'),
        create_test_application(companyName='Globex', position='C'),
        create_test_application(companyName='Initech', position='D'),
        create_test_application(companyName='Acme', position='E'),
    ]

    groups = group_by_company(apps)

    assert list(groups) == ['Globex', 'Acme', 'Initech']
    assert [app.position for app in groups['Globex']] == ['A', 'C']
    assert [app.position for app in groups['Acme']] == ['B', 'E']


def test_aggregate_counts():
    statuses = [
        ApplicationStatus.APPLIED,
        ApplicationStatus.INTERVIEWING,
        ApplicationStatus.OFFER_RECEIVED,
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
    ]
    counts = aggregate_counts(create_test_application(status=status) for status in statuses)

    assert (counts.total, counts.interviewing, counts.offers) == (5, 1, 2)


def test_aggregate_counts_includes_every_interview_stage():
    apps = [create_test_application(status=status) for status in (
        ApplicationStatus.PHONE_SCREEN, ApplicationStatus.FINAL_ROUND, ApplicationStatus.ONLINE_ASSESSMENT
    )]

    assert aggregate_counts(apps).interviewing == 2


def test_filter_by_search_term():
    apps = [
        create_test_application(companyName='Acme', position='Data Engineer'),
        create_test_application(companyName='Globex', position='Frontend Developer'),
    ]

    assert [a.companyName for a in filter_by_search_term(apps, 'ENGINEER')] == ['Acme']
    assert [a.companyName for a in filter_by_search_term(apps, 'glob')] == ['Globex']
    assert filter_by_search_term(apps, '   ') == apps
    assert filter_by_search_term(apps, 'nothing') == []


def test_events_for_day_ignores_time_of_day():
    morning = create_test_event(date=datetime(2024, 5, 3, 8, 0))
    evening = create_test_event(date=datetime(2024, 5, 3, 22, 15))
    next_day = create_test_event(date=datetime(2024, 5, 4, 0, 0))

    assert events_for_day([morning, evening, next_day], date(2024, 5, 3)) == [morning, evening]
    assert events_for_day([morning, evening, next_day], datetime(2024, 5, 4, 12, 0)) == [next_day]


def test_events_in_month():
    late = create_test_event(date=datetime(2024, 5, 20, 10, 0))
    early = create_test_event(date=datetime(2024, 5, 2, 10, 0))
    june = create_test_event(date=datetime(2024, 6, 1, 10, 0))

    by_day = events_in_month([late, june, early], 2024, 5)

    assert list(by_day) == [date(2024, 5, 2), date(2024, 5, 20)]
    assert by_day[date(2024, 5, 20)] == [late]


def test_problem_progress():
    problems = [create_test_problem(completed=True) for _ in range(4)] + [create_test_problem()]

    progress = problem_progress(problems, 3)

    assert progress.completed == 4
    assert progress.percent == 100.0
    assert progress.goal_reached is True
    assert problem_progress(problems[:1], 4).percent == 25.0
    assert problem_progress([], 0).goal == 1


def test_pending_action_items_sorted_by_deadline():
    first = create_test_event(step=ProcessStep.ONLINE_ASSESSMENT, actionItems=[
        ActionItem(text='No deadline'),
        ActionItem(text='Done', completed=True, deadline=date(2024, 5, 1)),
        ActionItem(text='Later', deadline=date(2024, 5, 10)),
    ])
    second = create_test_event(actionItems=[ActionItem(text='Sooner', deadline=date(2024, 5, 5))])

    pending = pending_action_items([first, second])

    assert [item.text for _, item in pending] == ['Sooner', 'Later', 'No deadline']
    assert pending[0][0] is second


def test_events_in_month_mixes_browser_and_local_timestamps():
    browser = record_from_dict(CalendarEvent, {
        'id': 'from-browser', 'company': 'Acme', 'position': 'SWE',
        'step': 'Phone Screen', 'date': '2024-05-02T16:00:00.000Z',
    })
    aware = create_test_event(date=datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc))
    local = create_test_event(date=datetime(2024, 5, 20, 9, 0))

    by_day = events_in_month([local, aware, browser], 2024, 5)

    browser_day = datetime(2024, 5, 2, 16, 0, tzinfo=timezone.utc).astimezone().date()
    assert browser.date.tzinfo is None
    assert aware.date.tzinfo is None
    assert by_day[browser_day] == [browser]
    assert by_day[date(2024, 5, 20)] == [local]
