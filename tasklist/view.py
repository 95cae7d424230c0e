"""Derive the visible task list from the full collection and view criteria.

``derive`` is pure: it never mutates its input and always returns a new
list. Sorting by date puts tasks whose due date is empty or cannot be parsed
last, in their original relative order.
"""

import locale
from collections.abc import Iterable
from datetime import UTC, date, datetime, time

from tasklist.models import ALL_CATEGORIES, SortKey, StatusFilter, Task, ViewCriteria


def parse_due_date(value: str) -> datetime | None:
    """Parse an ISO date or datetime string into a naive UTC datetime.

    Returns None for empty or unparseable values.
    """
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.combine(date.fromisoformat(text), time.min)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(UTC).replace(tzinfo=None)
        except OverflowError:
            return None
    return parsed


def matches(task: Task, criteria: ViewCriteria) -> bool:
    """True if the task passes the search, status and category filters."""
    if criteria.search_text.casefold() not in task.title.casefold():
        return False
    if criteria.status_filter is not StatusFilter.ALL and task.status.value != criteria.status_filter.value:
        return False
    if criteria.category_filter != ALL_CATEGORIES and task.category != criteria.category_filter:
        return False
    return True


def _date_key(task: Task) -> tuple[bool, datetime]:
    parsed = parse_due_date(task.due_date)
    return (parsed is None, parsed or datetime.min)


def _title_key(task: Task) -> tuple[str, str]:
    # strxfrm rejects embedded NULs.
    return (locale.strxfrm(task.title.casefold().replace("\x00", "")), task.title)


def derive(tasks: Iterable[Task], criteria: ViewCriteria) -> list[Task]:
    """Return the filtered, sorted tasks to display."""
    visible = [task for task in tasks if matches(task, criteria)]
    if criteria.sort_key is SortKey.DATE:
        visible.sort(key=_date_key)
    elif criteria.sort_key is SortKey.TITLE:
        visible.sort(key=_title_key)
    return visible
