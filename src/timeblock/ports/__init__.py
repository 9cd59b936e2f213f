"""Ports - interfaces/protocols for external dependencies."""

from .note_repo import NoteRepository
from .task_repo import TaskRepository

__all__ = [
    "NoteRepository",
    "TaskRepository",
]
