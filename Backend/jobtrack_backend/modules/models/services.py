from typing import List, Optional

from pydantic import BaseModel

from jobtrack_backend.config.global_constants import Difficulty, ProcessStep

# Dates and statuses stay strings here; the entity decoder owns their parsing
# so that browser timestamps and legacy status names are accepted everywhere.


class ProblemCreate(BaseModel):
    name: str
    difficulty: Difficulty = Difficulty.MEDIUM
    completed: bool = False
    url: Optional[str] = None


class ProblemPatch(BaseModel):
    name: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    completed: Optional[bool] = None
    url: Optional[str] = None


class ApplicationCreate(BaseModel):
    companyName: str
    position: str
    dateApplied: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class ApplicationPatch(BaseModel):
    companyName: Optional[str] = None
    position: Optional[str] = None
    dateApplied: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class ActionItemIn(BaseModel):
    text: str
    completed: bool = False
    deadline: Optional[str] = None
    id: Optional[str] = None


class EventCreate(BaseModel):
    company: str
    position: str
    step: ProcessStep
    date: Optional[str] = None
    actionItems: List[ActionItemIn] = []
    link: Optional[str] = None
    notes: Optional[str] = None


class EventPatch(BaseModel):
    company: Optional[str] = None
    position: Optional[str] = None
    step: Optional[ProcessStep] = None
    date: Optional[str] = None
    actionItems: Optional[List[ActionItemIn]] = None
    link: Optional[str] = None
    notes: Optional[str] = None
