"""
Read-only projections over store snapshots.

Everything here is a pure function of its arguments, cheap enough to call on
every render.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Tuple, Union

from jobtrack_backend.config.global_constants import INTERVIEW_STATUSES, OFFER_STATUSES
from jobtrack_backend.modules.models.entities import ActionItem, CalendarEvent, CompanyApplication, Problem


@dataclass(frozen=True)
class ApplicationCounts:
    total: int
    interviewing: int
    offers: int


@dataclass(frozen=True)
class ProblemProgress:
    completed: int
    goal: int
    percent: float
    goal_reached: bool


def group_by_company(apps: Iterable[CompanyApplication]) -> Dict[str, List[CompanyApplication]]:
    """Group applications by company name.

    Groups appear in the order their company was first seen, and applications
    keep their original order inside a group.
    """
    groups: Dict[str, List[CompanyApplication]] = {}
    for app in apps:
        groups.setdefault(app.companyName, []).append(app)
    return groups


def filter_by_search_term(apps: Iterable[CompanyApplication], term: str) -> List[CompanyApplication]:
    term = (term or '').strip().lower()
    if not term:
        return list(apps)
    return [
        app for app in apps
        if term in app.companyName.lower() or term in app.position.lower()
    ]


def events_for_day(events: Iterable[CalendarEvent], day: Union[date, datetime]) -> List[CalendarEvent]:
    if isinstance(day, datetime):
        day = day.date()
    return [event for event in events if event.date.date() == day]


def events_in_month(events: Iterable[CalendarEvent], year: int, month: int) -> Dict[date, List[CalendarEvent]]:
    """Events of one month keyed by day, days in calendar order"""
    by_day: Dict[date, List[CalendarEvent]] = {}
    for event in sorted(events, key=lambda e: e.date):
        if event.date.year == year and event.date.month == month:
            by_day.setdefault(event.date.date(), []).append(event)
    return by_day


def aggregate_counts(apps: Iterable[CompanyApplication]) -> ApplicationCounts:
    """Totals for the dashboard header.

    Interviewing counts every live interview stage (Phone Screen,
    Interviewing and Final Round), not only the Interviewing status the
    older tracker counted. Offers count Offer Received and Accepted.
    """
    apps = list(apps)
    return ApplicationCounts(
        total=len(apps),
        interviewing=sum(1 for app in apps if app.status in INTERVIEW_STATUSES),
        offers=sum(1 for app in apps if app.status in OFFER_STATUSES),
    )


def problem_progress(problems: Iterable[Problem], daily_goal: int) -> ProblemProgress:
    completed = sum(1 for problem in problems if problem.completed)
    goal = max(daily_goal, 1)
    return ProblemProgress(
        completed=completed,
        goal=goal,
        percent=min(100.0, completed / goal * 100),
        goal_reached=completed >= goal,
    )


def pending_action_items(events: Iterable[CalendarEvent]) -> List[Tuple[CalendarEvent, ActionItem]]:
    """Incomplete action items, soonest deadline first and undated ones last"""
    pending = [
        (event, item)
        for event in events
        for item in event.actionItems
        if not item.completed
    ]
    # sorted() is stable, so items without a deadline keep their event order
    return sorted(pending, key=lambda pair: (pair[1].deadline is None, pair[1].deadline or date.min))
