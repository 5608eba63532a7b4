"""Check-in schemas"""
from typing import List, Optional

from api.schemas.auth import CamelModel


class IncompleteTask(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None


class CheckInCreate(CamelModel):
    """type is 'completed' or 'incomplete'; date defaults to today"""
    type: Optional[str] = None
    incomplete_tasks: Optional[List[IncompleteTask]] = None
    note: Optional[str] = None
    date: Optional[str] = None
