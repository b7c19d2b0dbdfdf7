from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel


class ExportData(BaseModel):
    """Raw JSON text of each local storage key, or None when unset"""
    companyApplications: Optional[str] = None
    calendarEvents: Optional[str] = None
    leetcodeProblems: Optional[str] = None
    leetcodeDailyGoal: Optional[str] = None


class ExportDocument(BaseModel):
    version: int
    timestamp: Optional[str] = None
    data: ExportData


@dataclass
class ImportResult:
    """Outcome of a successful import. Stores only see it after a reload."""
    keys_written: List[str] = field(default_factory=list)
    reload_required: bool = True
