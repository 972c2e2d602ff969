"""Spreads generated tasks over the calendar days leading up to a due date.

Scheduling uses proportional buckets: every available day in the window
takes an equal share of the priority-ordered tasks, and whatever rounding
leaves over is handed out one per available day from the start of the
window.
"""
import logging
import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import List, Optional

from .models import DEFAULT_AVAILABILITY, WEEKDAYS

logger = logging.getLogger(__name__)

# Monday first, matching date.weekday()
FALLBACK_MASK = (True, True, True, True, True, False, False)


@dataclass
class PlannedTask:
    name: str
    priority: int = 1
    estimated_minutes: Optional[int] = None
    description: Optional[str] = None
    deliverable_id: Optional[int] = None
    due_date: Optional[date] = None

    def to_dict(self):
        return {
            "deliverableId": self.deliverable_id,
            "name": self.name,
            "description": self.description,
            "dueDate": self.due_date.isoformat() if self.due_date is not None else None,
            "priority": self.priority,
            "estimatedMinutes": self.estimated_minutes,
        }


@dataclass
class TimelineDay:
    date: date
    is_today: bool
    is_tomorrow: bool
    is_available: bool
    tasks: List[PlannedTask] = field(default_factory=list)

    def to_dict(self):
        return {
            "date": self.date.isoformat(),
            "isToday": self.is_today,
            "isTomorrow": self.is_tomorrow,
            "isAvailable": self.is_available,
            "tasks": [task.to_dict() for task in self.tasks],
        }


@dataclass
class Timeline:
    days: List[TimelineDay]
    days_until_due: int
    total_tasks: int

    def tasks(self):
        return [task for day in self.days for task in day.tasks]

    def to_dict(self):
        return {
            "days": [day.to_dict() for day in self.days],
            "daysUntilDue": self.days_until_due,
            "totalTasks": self.total_tasks,
        }


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def availability_mask(availability=None):
    """Seven booleans, Monday first, from an Availability row, a dict or None."""
    if availability is None:
        return tuple(DEFAULT_AVAILABILITY[day] for day in WEEKDAYS)
    if isinstance(availability, dict):
        return tuple(bool(availability.get(day, DEFAULT_AVAILABILITY[day])) for day in WEEKDAYS)
    return tuple(bool(getattr(availability, day)) for day in WEEKDAYS)


def effective_mask(mask):
    mask = tuple(bool(flag) for flag in mask)
    if len(mask) != 7:
        raise ValueError(f"availability mask needs 7 days, got {len(mask)}")
    if not any(mask):
        logger.debug("Empty availability mask, falling back to weekdays")
        return FALLBACK_MASK
    return mask


def days_until(due_date, today):
    return max(1, (due_date - today).days)


def schedule_window(due_date, today):
    """Calendar days tasks may land on: the days after today up to the due date."""
    if due_date <= today:
        return [max(today, due_date)]
    return [today + timedelta(days=offset) for offset in range(1, (due_date - today).days + 1)]


def build_timeline(tasks, due_date, mask, today=None):
    today = _as_date(today) or date.today()
    due_date = _as_date(due_date)
    mask = effective_mask(mask)

    ordered = sorted(tasks, key=lambda task: -(task.priority or 0))
    days_until_due = days_until(due_date, today)
    tomorrow = today + timedelta(days=1)

    days = [
        TimelineDay(
            date=day,
            is_today=day == today,
            is_tomorrow=day == tomorrow,
            is_available=mask[day.weekday()],
        )
        for day in schedule_window(due_date, today)
    ]
    available = [day for day in days if day.is_available]

    if not available and due_date > today and mask[today.weekday()]:
        # weekend deadline seen from a workday: today is the last chance
        days.insert(0, TimelineDay(date=today, is_today=True, is_tomorrow=False, is_available=True))
        available = days[:1]

    if not available:
        # no available day at all, pile everything on the due date
        days[-1].tasks.extend(replace(task, due_date=days[-1].date) for task in ordered)
        return Timeline(days=days, days_until_due=days_until_due, total_tasks=len(ordered))

    per_week = sum(mask)
    quota = math.ceil(len(ordered) / (days_until_due * (per_week / 7))) if ordered else 0

    index = 0
    for day in available:
        take = min(quota, len(ordered) - index)
        day.tasks.extend(replace(task, due_date=day.date) for task in ordered[index:index + take])
        index += take

    cursor = 0
    while index < len(ordered):
        day = available[cursor % len(available)]
        day.tasks.append(replace(ordered[index], due_date=day.date))
        index += 1
        cursor += 1

    logger.debug(
        f"Scheduled {len(ordered)} tasks over {len(available)} available days "
        f"(quota {quota}, due {due_date.isoformat()})"
    )
    return Timeline(days=days, days_until_due=days_until_due, total_tasks=len(ordered))


def distribute(tasks, due_date, mask, today=None):
    """Return copies of ``tasks`` with ``due_date`` set, ordered by that date."""
    return build_timeline(tasks, due_date, mask, today=today).tasks()
