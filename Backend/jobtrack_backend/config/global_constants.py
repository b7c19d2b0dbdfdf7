"""
Shared constants for JobTrack storage, statuses and the transfer format.
"""

from enum import Enum

# Local storage keys, one per persisted value
STORAGE_KEYS = {
    'applications': 'company-applications',
    'events': 'calendar-events',
    'problems': 'leetcode-problems',
    'daily_goal': 'leetcode-daily-goal',
}

# Export document field for each local storage key
EXPORT_FIELDS = {
    'company-applications': 'companyApplications',
    'calendar-events': 'calendarEvents',
    'leetcode-problems': 'leetcodeProblems',
    'leetcode-daily-goal': 'leetcodeDailyGoal',
}

EXPORT_VERSION = 1
SUPPORTED_EXPORT_VERSIONS = (1,)

DEFAULT_DAILY_GOAL = 3


class Collection(str, Enum):
    APPLICATIONS = 'applications'
    EVENTS = 'events'
    PROBLEMS = 'problems'

    @property
    def storage_key(self) -> str:
        return STORAGE_KEYS[self.value]


# Application status definitions
class ApplicationStatus(str, Enum):
    APPLIED = 'Applied'
    ONLINE_ASSESSMENT = 'Online Assessment'
    PHONE_SCREEN = 'Phone Screen'
    INTERVIEWING = 'Interviewing'
    FINAL_ROUND = 'Final Round'
    OFFER_RECEIVED = 'Offer Received'
    ACCEPTED = 'Accepted'
    REJECTED = 'Rejected'
    WITHDRAWN = 'Withdrawn'

    @classmethod
    def _missing_(cls, value):
        # Values written by older versions of the tracker
        legacy = {
            'Interview': cls.INTERVIEWING,
            'Offer': cls.OFFER_RECEIVED,
        }
        return legacy.get(value)


INTERVIEW_STATUSES = (
    ApplicationStatus.PHONE_SCREEN,
    ApplicationStatus.INTERVIEWING,
    ApplicationStatus.FINAL_ROUND,
)
OFFER_STATUSES = (
    ApplicationStatus.OFFER_RECEIVED,
    ApplicationStatus.ACCEPTED,
)


# Ordered hiring process steps for calendar events
class ProcessStep(str, Enum):
    APPLICATION_SUBMITTED = 'Application Submitted'
    ONLINE_ASSESSMENT = 'Online Assessment'
    PHONE_SCREEN = 'Phone Screen'
    INTERVIEW_ROUND_1 = 'Interview Round 1'
    INTERVIEW_ROUND_2 = 'Interview Round 2'
    FINAL_ROUND = 'Final Round'
    WAITING_FOR_DECISION = 'Waiting for Decision'
    OFFER_RECEIVED = 'Offer Received'
    REJECTED = 'Rejected'


class Difficulty(str, Enum):
    EASY = 'Easy'
    MEDIUM = 'Medium'
    HARD = 'Hard'


VERSION = "0.1.0"
APP_NAME = "JobTrack"
