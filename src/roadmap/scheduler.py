"""Roadmap scheduler: spread ordered tasks across days under a daily budget.

Deterministic, no I/O. Greedy by arrival order:

1. Stable-sort requests by ``order_number``.
2. Walk them keeping ``current_day`` (offset from today) and the hours
   already placed on it.
3. A task whose hours would push a non-empty day over capacity opens the
   next day. An empty day always accepts the next task, so an oversized
   task sits alone on its day and is never split.
4. Deadline = 23:59:59 of ``today + current_day`` in local time.

Tasks are never reordered to pack days more densely: order encodes the
sequence the roadmap must be worked in.
"""

import logging
from collections.abc import Sequence
from datetime import date, datetime, time, timedelta, timezone, tzinfo

from src.models.assignment import Task, TaskRoadmapRequest

logger = logging.getLogger(__name__)

DEFAULT_TASK_HOURS = 1.0
END_OF_DAY = time(23, 59, 59)


def effective_hours(estimated_hours: float | None) -> float:
    """Hours counted against capacity; unset or non-positive means 1.0."""
    if estimated_hours is not None and estimated_hours > 0:
        return float(estimated_hours)
    return DEFAULT_TASK_HOURS


def end_of_day(day: date, tz: tzinfo | None = None) -> datetime:
    """Last second of ``day`` as a UTC instant.

    With ``tz=None`` the day is interpreted in the process's local zone.
    """
    if tz is None:
        local = datetime.combine(day, END_OF_DAY).astimezone()
    else:
        local = datetime.combine(day, END_OF_DAY, tzinfo=tz)
    return local.astimezone(timezone.utc)


def schedule_tasks(
    task_requests: Sequence[TaskRoadmapRequest],
    daily_capacity_hours: float,
    *,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> list[Task]:
    """Turn ordered roadmap steps into tasks with capacity-bounded deadlines.

    Args:
        task_requests: Roadmap steps in any order; ``order_number`` decides.
        daily_capacity_hours: Hours a single day may hold. Must be > 0.
        today: Day 0 of the schedule. Defaults to the current local date.
        tz: Zone the day boundaries are computed in. Defaults to local.

    Raises:
        ValueError: If ``daily_capacity_hours`` is not positive.
    """
    if daily_capacity_hours <= 0:
        msg = f"daily_capacity_hours must be > 0, got {daily_capacity_hours}"
        raise ValueError(msg)

    if today is None:
        today = datetime.now(tz).date() if tz is not None else date.today()

    ordered = sorted(task_requests, key=lambda r: r.order_number)

    tasks: list[Task] = []
    current_day = 0
    current_day_hours = 0.0

    for request in ordered:
        hours = effective_hours(request.estimated_hours)

        if current_day_hours > 0 and current_day_hours + hours > daily_capacity_hours:
            current_day += 1
            current_day_hours = 0.0

        current_day_hours += hours

        tasks.append(Task(
            title=request.title,
            description=request.description,
            reward_points=request.reward_points,
            estimated_hours=hours,
            title_color=request.title_color,
            topic=request.topic,
            order_number=request.order_number,
            deadline=end_of_day(today + timedelta(days=current_day), tz),
        ))

    if tasks:
        logger.info(
            "Scheduled %d tasks across %d days (capacity %.2fh/day)",
            len(tasks), current_day + 1, daily_capacity_hours,
        )
    return tasks
