"""Completion roll-ups and calendar grouping for the read path.

Works on anything shaped like the models: deliverables with ``name`` and
``tasks``, tasks with ``completed`` and ``due_date``.
"""
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List


@dataclass
class Progress:
    completed: int
    total: int
    percentage: int

    def to_dict(self):
        return {"completed": self.completed, "total": self.total, "percentage": self.percentage}


@dataclass
class DateGroup:
    date: date
    is_today: bool
    is_tomorrow: bool
    tasks: list = field(default_factory=list)  # (task, deliverable name) pairs

    def to_dict(self):
        tasks = []
        for task, deliverable_name in self.tasks:
            entry = task.to_dict()
            entry["deliverableName"] = deliverable_name
            tasks.append(entry)
        return {
            "date": self.date.isoformat(),
            "isToday": self.is_today,
            "isTomorrow": self.is_tomorrow,
            "tasks": tasks,
        }


def percentage(completed, total):
    if total == 0:
        return 0
    # half up, not Python's banker's rounding
    return int(math.floor(100 * completed / total + 0.5))


def _progress(tasks):
    total = len(tasks)
    completed = sum(1 for task in tasks if task.completed)
    return Progress(completed=completed, total=total, percentage=percentage(completed, total))


def deliverable_progress(deliverable):
    return _progress(list(deliverable.tasks))


def aggregate(deliverables):
    return _progress([task for deliverable in deliverables for task in deliverable.tasks])


def all_tasks_completed(tasks):
    """True when there is at least one task and every task is done."""
    tasks = list(tasks)
    return bool(tasks) and all(task.completed for task in tasks)


def group_by_due_date(deliverables, today=None) -> List[DateGroup]:
    today = today or date.today()
    tomorrow = today + timedelta(days=1)

    groups = {}
    for deliverable in deliverables:
        for task in deliverable.tasks:
            due = task.due_date.date() if isinstance(task.due_date, datetime) else task.due_date
            if due not in groups:
                groups[due] = DateGroup(date=due, is_today=due == today, is_tomorrow=due == tomorrow)
            groups[due].tasks.append((task, deliverable.name))

    return [groups[key] for key in sorted(groups)]
