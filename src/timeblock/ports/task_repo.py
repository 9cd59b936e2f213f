"""Task repository interface."""

from datetime import date
from typing import Protocol

from timeblock.core.kanban import CraftTask


class TaskRepository(Protocol):
    """Interface for the Craft tasks API."""

    def fetch_all_tasks(self) -> list[CraftTask]:
        """Fetch active, upcoming and inbox tasks, deduplicated by id."""
        ...

    def update_task(self, task_id: str, changes: dict) -> None:
        """Apply a partial update (markdown, taskInfo) to a task."""
        ...

    def create_task(
        self,
        markdown: str,
        location: dict,
        schedule_date: date | None = None,
    ) -> CraftTask:
        """Create a task in the inbox or a daily note."""
        ...

    def delete_tasks(self, task_ids: list[str]) -> None:
        """Delete tasks by id."""
        ...

    def move_daily_note_task(self, task_id: str, target_date: date) -> None:
        """Move a daily-note task to another day's note."""
        ...
