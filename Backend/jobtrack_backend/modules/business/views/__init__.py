from jobtrack_backend.modules.business.views.derived import (
    ApplicationCounts,
    ProblemProgress,
    aggregate_counts,
    events_for_day,
    events_in_month,
    filter_by_search_term,
    group_by_company,
    pending_action_items,
    problem_progress
)

__all__ = [
    'ApplicationCounts',
    'ProblemProgress',
    'aggregate_counts',
    'events_for_day',
    'events_in_month',
    'filter_by_search_term',
    'group_by_company',
    'pending_action_items',
    'problem_progress'
]
