"""Daily note repository interface."""

from datetime import date
from typing import Protocol


class NoteRepository(Protocol):
    """Interface for reading and writing the blocks of a daily note."""

    def fetch_blocks(self, target_date: date) -> dict | list | str:
        """Fetch the raw block tree of a daily note."""
        ...

    def update_block(self, block_id: str, markdown: str) -> None:
        """Replace the markdown of one block."""
        ...

    def insert_block(self, markdown: str, target_date: date) -> list[dict]:
        """Append a block to a daily note. Returns the created blocks."""
        ...

    def delete_blocks(self, block_ids: list[str]) -> None:
        """Delete blocks by id."""
        ...

    def toggle_task(self, task_id: str, done: bool) -> None:
        """Set a task block's state to done or todo."""
        ...
