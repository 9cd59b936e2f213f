"""Pure Kanban column distribution for Craft tasks - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .markup import clean_task_text

CLOSED_STATES = ("done", "canceled")

INBOX = "inbox"
BACKLOG = "backlog"
TODAY = "today"
FUTURE = "future"

STANDARD = "standard"
WEEK = "week"


def _as_date(value) -> date | None:
    """Accept a date, a datetime or an ISO string; anything else is None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class CraftTask:
    """A task from the Craft tasks API."""

    id: str
    markdown: str
    state: str = "todo"
    schedule_date: date | None = None
    deadline_date: date | None = None
    location_type: str | None = None
    location_date: date | None = None

    @property
    def is_inbox(self) -> bool:
        return self.location_type == "inbox"

    @property
    def is_daily_note(self) -> bool:
        return self.location_type == "dailyNote"

    @property
    def is_open(self) -> bool:
        return self.state not in CLOSED_STATES

    @property
    def effective_date(self) -> date | None:
        """The note's date for daily-note tasks, the schedule date for inbox tasks."""
        if self.is_daily_note:
            return self.location_date
        if self.is_inbox:
            return self.schedule_date
        return None

    @property
    def display_text(self) -> str:
        return clean_task_text(self.markdown)

    @classmethod
    def from_api(cls, data: dict) -> "CraftTask":
        """Create CraftTask from a Craft API response item."""
        task_info = data.get("taskInfo") or {}
        location = data.get("location") or {}
        return cls(
            id=data["id"],
            markdown=data.get("markdown", "") or "",
            state=task_info.get("state") or "todo",
            schedule_date=_as_date(task_info.get("scheduleDate")),
            deadline_date=_as_date(task_info.get("deadlineDate")),
            location_type=location.get("type"),
            location_date=_as_date(location.get("date")),
        )


@dataclass(frozen=True)
class Column:
    """A Kanban column: fixed name or ISO date id, title, tasks in input order."""

    id: str
    title: str
    tasks: tuple[CraftTask, ...] = ()
    is_today: bool = False

    @property
    def task_ids(self) -> list[str]:
        return [t.id for t in self.tasks]


@dataclass(frozen=True)
class DistributeOptions:
    """Board mode and, for week mode, the visible 7-day window."""

    mode: str = STANDARD
    window_start: date | None = None
    window_end: date | None = None
    week_starts_on_monday: bool = True


def week_window(as_of: date, week_starts_on_monday: bool = True) -> tuple[date, date]:
    """First and last day of the week containing `as_of`."""
    if week_starts_on_monday:
        offset = as_of.weekday()
    else:
        offset = (as_of.weekday() + 1) % 7
    start = as_of - timedelta(days=offset)
    return start, start + timedelta(days=6)


def day_column_title(day: date, today: date) -> str:
    """Week view column title: "Mon 10", or "Mon 10 (Today)"."""
    title = f"{day.strftime('%a')} {day.day}"
    return f"{title} (Today)" if day == today else title


def filter_open(tasks: list[CraftTask]) -> list[CraftTask]:
    """Drop done and canceled tasks."""
    return [t for t in tasks if t.is_open]


def _standard_bucket(task: CraftTask, today: date) -> str:
    if not (task.is_daily_note or task.is_inbox):
        return INBOX
    effective = task.effective_date
    if effective is None:
        # Undated daily-note task: show it rather than lose it
        return TODAY if task.is_daily_note else INBOX

    if effective == today:
        return TODAY
    if effective < today:
        return BACKLOG
    return FUTURE


def _week_bucket(task: CraftTask, window_start: date, window_end: date) -> str:
    if not (task.is_daily_note or task.is_inbox):
        return INBOX
    effective = task.effective_date
    if effective is None:
        return BACKLOG if task.is_daily_note else INBOX

    if effective < window_start:
        return BACKLOG
    if effective > window_end:
        return FUTURE
    return effective.isoformat()


def distribute(
    tasks: list[CraftTask],
    today: date | str,
    options: DistributeOptions | None = None,
) -> list[Column]:
    """
    Bucket open tasks into Kanban columns.

    Standard mode: inbox, backlog, today, future.
    Week mode: inbox, backlog, one column per day of the window, future.

    Pure function - no I/O. Same inputs always give the same columns.
    """
    options = options or DistributeOptions()
    today = _as_date(today)
    open_tasks = filter_open(tasks)

    if options.mode == WEEK:
        window_start = options.window_start
        if window_start is None:
            window_start, _ = week_window(today, options.week_starts_on_monday)
        window_end = options.window_end or window_start + timedelta(days=6)

        days = [window_start + timedelta(days=i) for i in range(7)]
        buckets: dict[str, list[CraftTask]] = {INBOX: [], BACKLOG: []}
        buckets.update({d.isoformat(): [] for d in days})
        buckets[FUTURE] = []

        for task in open_tasks:
            key = _week_bucket(task, window_start, window_end)
            # Dates past the seventh day of a wider window have no column
            buckets.get(key, buckets[FUTURE]).append(task)

        columns = [
            Column(INBOX, "Inbox", tuple(buckets[INBOX])),
            Column(BACKLOG, "Backlog", tuple(buckets[BACKLOG])),
        ]
        for d in days:
            columns.append(
                Column(
                    d.isoformat(),
                    day_column_title(d, today),
                    tuple(buckets[d.isoformat()]),
                    is_today=d == today,
                )
            )
        columns.append(Column(FUTURE, "Future", tuple(buckets[FUTURE])))
        return columns

    buckets = {INBOX: [], BACKLOG: [], TODAY: [], FUTURE: []}
    for task in open_tasks:
        buckets[_standard_bucket(task, today)].append(task)

    return [
        Column(INBOX, "Inbox", tuple(buckets[INBOX])),
        Column(BACKLOG, "Backlog", tuple(buckets[BACKLOG])),
        Column(TODAY, "Today", tuple(buckets[TODAY]), is_today=True),
        Column(FUTURE, "Future", tuple(buckets[FUTURE])),
    ]


def is_column_id(column_id: str) -> bool:
    """A fixed column name or an ISO date column."""
    if column_id in (INBOX, BACKLOG, TODAY, FUTURE):
        return True
    try:
        date.fromisoformat(column_id)
    except ValueError:
        return False
    return len(column_id) == 10


def find_column(columns: list[Column], task_id: str) -> Column | None:
    """The column currently holding a task."""
    return next((c for c in columns if task_id in c.task_ids), None)


def can_drop(task: CraftTask, column_id: str) -> bool:
    """
    Whether a task may be moved into a column.

    Daily-note tasks and scheduled inbox tasks cannot go back to the inbox:
    the API cannot clear a schedule date.
    """
    if column_id == INBOX and (task.is_daily_note or (task.is_inbox and task.schedule_date)):
        return False
    return True


def target_date_for_column(
    column_id: str,
    today: date | str,
    options: DistributeOptions | None = None,
) -> date | None:
    """
    The date a task gets when dropped into a column.

    today -> today, backlog -> yesterday, a date column -> that date,
    future -> the day after the window (week mode) or tomorrow, inbox -> None.
    """
    options = options or DistributeOptions()
    today = _as_date(today)

    if column_id == INBOX:
        return None
    if column_id == TODAY:
        return today
    if column_id == BACKLOG:
        return today - timedelta(days=1)
    if column_id == FUTURE:
        if options.mode == WEEK:
            window_start = options.window_start
            if window_start is None:
                window_start, _ = week_window(today, options.week_starts_on_monday)
            window_end = options.window_end or window_start + timedelta(days=6)
            return window_end + timedelta(days=1)
        return today + timedelta(days=1)
    return _as_date(column_id)
