"""
data_models.py — Normalized task model shared by every layout stage.

Raw TaskRecords are validated by the DSL layer; this module turns them into
Task objects with parsed instants and a stable sequence index. Normalization
never fails on bad dates: a two-day placeholder starting today is
substituted and the task is flagged invalid.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Union

from ..dsl.schema import TaskRecord
from .dates import Calendar
from .units import DEFAULT_DATE_FORMAT, INVALID_TASK_DAYS

logger = logging.getLogger(__name__)


class DuplicateTaskIdError(ValueError):
    """Raised when strict id checking finds the same id on two tasks."""


# =============================================================================
# TASK
# =============================================================================

@dataclass
class Task:
    """A task ready for layout."""
    id: str
    name: str
    start_at: datetime                 # Parsed start (placeholder if invalid)
    end_at: datetime                   # Parsed end (placeholder if invalid)
    index: int                         # Sequence index: row and bar lookup key
    start: Optional[str] = None        # Raw start as supplied
    end: Optional[str] = None          # Raw end as supplied
    dependent: Optional[str] = None    # Raw comma-separated dependency ids
    progress: float = 0.0
    invalid: bool = False
    custom_class: Optional[str] = None

    @property
    def dependencies(self) -> List[str]:
        """Dependency ids, split on commas and trimmed, blanks dropped."""
        if not self.dependent:
            return []
        return [dep.strip() for dep in self.dependent.split(",") if dep.strip()]


TaskInput = Union[TaskRecord, Mapping[str, Any]]


# =============================================================================
# NORMALIZATION
# =============================================================================

def normalize_task(
    record: TaskInput,
    index: int,
    calendar: Calendar,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> Task:
    """
    Build a Task from a record.

    Args:
        record: TaskRecord or a plain mapping with the same keys
        index: Sequence index to assign
        calendar: Calendar used for parsing and for "today"
        date_format: Moment-style format of the record's dates

    Returns:
        Task with non-null start_at/end_at
    """
    if not isinstance(record, TaskRecord):
        record = TaskRecord.model_validate(record)

    start_at = calendar.parse(record.start, date_format)
    end_at = calendar.parse(record.end, date_format)
    invalid = start_at is None or end_at is None

    if invalid:
        logger.warning(
            f"Task '{record.id}' has missing or unparseable dates "
            f"(start={record.start!r}, end={record.end!r}); "
            f"using a {INVALID_TASK_DAYS}-day placeholder from today"
        )
        start_at = calendar.today()
        end_at = calendar.add(start_at, INVALID_TASK_DAYS, "days")

    return Task(
        id=record.id,
        name=record.name or record.id,
        start_at=start_at,
        end_at=end_at,
        index=index,
        start=record.start,
        end=record.end,
        dependent=record.dependent,
        progress=record.progress,
        invalid=invalid,
        custom_class=record.custom_class,
    )


def normalize_tasks(
    records: Iterable[TaskInput],
    calendar: Calendar,
    date_format: str = DEFAULT_DATE_FORMAT,
    strict_ids: bool = True,
) -> List[Task]:
    """
    Normalize a task list, assigning indices in input order.

    Duplicate ids raise DuplicateTaskIdError; with strict_ids=False they are
    only logged and lookups resolve to the first match.
    """
    tasks = [
        normalize_task(record, i, calendar, date_format)
        for i, record in enumerate(records)
    ]
    check_unique_ids(tasks, strict=strict_ids)
    return tasks


def check_unique_ids(tasks: Iterable[Task], strict: bool = False) -> List[str]:
    """
    Find ids used by more than one task.

    Returns:
        Duplicate ids in order of first repetition
    """
    seen = set()
    duplicates: List[str] = []
    for task in tasks:
        if task.id in seen and task.id not in duplicates:
            duplicates.append(task.id)
        seen.add(task.id)

    if duplicates:
        message = f"Duplicate task ids: {', '.join(duplicates)}"
        if strict:
            raise DuplicateTaskIdError(message)
        logger.warning(f"{message}; dependencies resolve to the first match")
    return duplicates


def find_task(tasks: Iterable[Task], task_id: str) -> Optional[Task]:
    """First task with an exactly matching id, or None."""
    for task in tasks:
        if task.id == task_id:
            return task
    return None
