from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from jobtrack_backend.config.global_constants import (
    ApplicationStatus, Collection, Difficulty, ProcessStep
)
from jobtrack_backend.modules.errors import ValidationFailure
from jobtrack_backend.modules.utils import decode_dataclass, new_entity_id, to_jsonable, to_local_naive


def _require(value: Optional[str], name: str) -> None:
    if not value or not value.strip():
        raise ValidationFailure(f"Missing required field: {name}")


@dataclass
class CompanyApplication:
    """A job application submitted to a company"""
    companyName: str
    position: str
    dateApplied: date = field(default_factory=date.today)
    status: ApplicationStatus = ApplicationStatus.APPLIED
    notes: Optional[str] = None
    id: str = field(default_factory=new_entity_id)

    def validate(self) -> None:
        _require(self.id, 'id')
        _require(self.companyName, 'companyName')
        _require(self.position, 'position')


@dataclass
class ActionItem:
    """A to-do attached to a calendar event"""
    text: str
    completed: bool = False
    deadline: Optional[date] = None
    id: str = field(default_factory=new_entity_id)


@dataclass
class CalendarEvent:
    """A step of a hiring process scheduled on a given day"""
    company: str
    position: str
    step: ProcessStep
    date: datetime = field(default_factory=datetime.now)
    actionItems: List[ActionItem] = field(default_factory=list)
    link: Optional[str] = None
    notes: Optional[str] = None
    id: str = field(default_factory=new_entity_id)

    def __post_init__(self):
        if isinstance(self.date, datetime):
            self.date = to_local_naive(self.date)

    def validate(self) -> None:
        _require(self.id, 'id')
        _require(self.company, 'company')
        _require(self.position, 'position')
        seen = set()
        for item in self.actionItems:
            _require(item.id, 'actionItems.id')
            if item.id in seen:
                raise ValidationFailure(f"Duplicate action item id: {item.id}")
            seen.add(item.id)


@dataclass
class Problem:
    """A LeetCode practice problem"""
    name: str
    difficulty: Difficulty = Difficulty.MEDIUM
    completed: bool = False
    url: Optional[str] = None
    id: str = field(default_factory=new_entity_id)

    def validate(self) -> None:
        _require(self.id, 'id')
        _require(self.name, 'name')


def day_of(entity) -> Optional[date]:
    """Calendar day an entity is filed under, if it has one"""
    if isinstance(entity, CompanyApplication):
        return entity.dateApplied
    if isinstance(entity, CalendarEvent):
        return entity.date.date()
    return None


def company_of(entity) -> Optional[str]:
    if isinstance(entity, CompanyApplication):
        return entity.companyName
    if isinstance(entity, CalendarEvent):
        return entity.company
    return None


Entity = Union[CompanyApplication, CalendarEvent, Problem]
E = TypeVar('E', CompanyApplication, CalendarEvent, Problem)

ENTITY_TYPES: Dict[Collection, Type] = {
    Collection.APPLICATIONS: CompanyApplication,
    Collection.EVENTS: CalendarEvent,
    Collection.PROBLEMS: Problem,
}


def record_to_dict(entity: Entity) -> Dict[str, Any]:
    """JSON-ready dict with camelCase keys and ISO dates"""
    return to_jsonable(entity)


def _with_action_item_ids(data: Dict[str, Any]) -> Dict[str, Any]:
    """Give id-less action items an id derived from the event, so the same
    stored event always decodes to the same item ids."""
    items = data.get('actionItems')
    if not data.get('id') or not isinstance(items, list):
        return data
    items = [
        {**item, 'id': f"{data['id']}-item-{index}"}
        if isinstance(item, dict) and item.get('id') in (None, '') else item
        for index, item in enumerate(items)
    ]
    return {**data, 'actionItems': items}


def record_from_dict(entity_type: Type[E], data: Dict[str, Any]) -> E:
    """Decode and validate a stored or received record"""
    if not isinstance(data, dict):
        raise ValidationFailure(f"{entity_type.__name__} record must be an object")
    if 'id' in data and data['id'] is not None:
        data = {**data, 'id': str(data['id'])}
    if entity_type is CalendarEvent:
        data = _with_action_item_ids(data)
    entity = decode_dataclass(entity_type, data)
    entity.validate()
    return entity


def records_from_list(entity_type: Type[E], data: Any) -> List[E]:
    if not isinstance(data, list):
        raise ValidationFailure(f"Expected a list of {entity_type.__name__} records")
    return [record_from_dict(entity_type, item) for item in data]
