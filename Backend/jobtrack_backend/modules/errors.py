class JobTrackError(Exception):
    """Base class for all JobTrack errors"""


class UnauthorizedError(JobTrackError):
    """No valid authenticated session"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundOrDeniedError(JobTrackError):
    """Resource is missing or owned by another user"""

    def __init__(self, resource: str = "Resource", entity_id: str = ""):
        self.resource = resource
        self.entity_id = entity_id
        super().__init__(f"{resource} not found or access denied")


class ValidationFailure(JobTrackError, ValueError):
    """Malformed import document or missing required fields"""


class StorageCorruptionError(JobTrackError):
    """A stored value exists but cannot be parsed"""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Stored value under '{key}' is corrupted: {reason}")


class TransientIOError(JobTrackError):
    """Network or storage failure on a remote call"""
