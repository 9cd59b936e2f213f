"""Craft API adapter - HTTP client for daily note blocks and tasks."""

import logging
from datetime import date

import requests

from timeblock.config import Config, load_config
from timeblock.core.kanban import CraftTask

logger = logging.getLogger(__name__)

TASK_SCOPES = ("active", "upcoming", "inbox")
REQUEST_TIMEOUT = 30


class CraftAPIError(Exception):
    """Raised when a Craft API request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(CraftAPIError):
    """Raised when the Craft API URL is not configured."""

    pass


def format_date_for_api(target_date: date, today: date | None = None) -> str:
    """Craft addresses today's note as "today", other days by ISO date."""
    today = today or date.today()
    if target_date == today:
        return "today"
    return target_date.isoformat()


def _items(data) -> list:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return data.get("items", []) or []
    return []


class CraftAdapter:
    """
    Craft API adapter.

    Implements NoteRepository and TaskRepository protocols. Talks to the
    per-user Craft API link. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self._session = session or requests.Session()

    @property
    def base_url(self) -> str:
        if not self.config.craft_api_url:
            raise ConfigurationError(
                "Craft API URL not configured. Set CRAFT_API_URL in timeblock.conf"
            )
        return self.config.craft_api_url.rstrip("/")

    def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict | None = None,
        json: dict | None = None,
        action: str = "request",
    ) -> requests.Response:
        """Send a request, raising CraftAPIError on a non-2xx response."""
        try:
            resp = self._session.request(
                method,
                f"{self.base_url}{endpoint}",
                params=params,
                json=json,
                headers={"Accept": "application/json"},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise CraftAPIError(f"Failed to {action}: {e}") from e

        if not resp.ok:
            logger.error(f"Craft {action} failed: {resp.status_code} {resp.text[:200]}")
            raise CraftAPIError(f"Failed to {action}: {resp.status_code}", resp.status_code)
        return resp

    @staticmethod
    def _json(resp: requests.Response):
        if not resp.content:
            return None
        return resp.json()

    # ============== Blocks ==============

    def fetch_blocks(self, target_date: date) -> dict | list | str:
        """Fetch a daily note's blocks, creating the note on first access."""
        date_param = format_date_for_api(target_date)
        try:
            resp = self._request("GET", "/blocks", params={"date": date_param}, action="fetch blocks")
        except CraftAPIError as e:
            if e.status_code != 404:
                raise
            logger.info(f"No daily note for {date_param}, creating one")
            self._create_daily_note(date_param)
            resp = self._request("GET", "/blocks", params={"date": date_param}, action="fetch blocks")
        return self._json(resp) or {}

    def _create_daily_note(self, date_param: str) -> None:
        self._request(
            "POST",
            "/blocks",
            json={
                "blocks": [{"type": "text", "markdown": ""}],
                "position": {"position": "end", "date": date_param},
            },
            action="create daily note",
        )

    def update_block(self, block_id: str, markdown: str) -> None:
        """Replace the markdown of one block."""
        self._request(
            "PUT",
            "/blocks",
            json={"blocks": [{"id": block_id, "markdown": markdown}]},
            action="update block",
        )

    def insert_block(self, markdown: str, target_date: date) -> list[dict]:
        """Append a text block to the end of a daily note."""
        resp = self._request(
            "POST",
            "/blocks",
            json={
                "blocks": [{"type": "text", "markdown": markdown}],
                "position": {"position": "end", "date": format_date_for_api(target_date)},
            },
            action="insert block",
        )
        return _items(self._json(resp))

    def delete_blocks(self, block_ids: list[str]) -> None:
        """Delete blocks by id."""
        self._request("DELETE", "/blocks", json={"blockIds": block_ids}, action="delete blocks")

    def toggle_task(self, task_id: str, done: bool) -> None:
        """Set a task's state to done or todo."""
        self.update_task(task_id, {"taskInfo": {"state": "done" if done else "todo"}})

    # ============== Tasks ==============

    def fetch_tasks(self, scope: str) -> list[CraftTask]:
        """Fetch tasks for one scope (active, upcoming or inbox)."""
        resp = self._request("GET", "/tasks", params={"scope": scope}, action=f"fetch {scope} tasks")
        tasks = []
        for item in _items(self._json(resp)):
            if not isinstance(item, dict) or "id" not in item:
                logger.debug(f"Skipping malformed task item: {item!r}")
                continue
            tasks.append(CraftTask.from_api(item))
        return tasks

    def fetch_all_tasks(self) -> list[CraftTask]:
        """Fetch all scopes and deduplicate by id (later scopes win)."""
        by_id: dict[str, CraftTask] = {}
        for scope in TASK_SCOPES:
            for task in self.fetch_tasks(scope):
                by_id[task.id] = task
        return list(by_id.values())

    def update_task(self, task_id: str, changes: dict) -> None:
        """Apply a partial update to a task."""
        self._request(
            "PUT",
            "/tasks",
            json={"tasksToUpdate": [{"id": task_id, **changes}]},
            action="update task",
        )

    def create_task(
        self,
        markdown: str,
        location: dict,
        schedule_date: date | None = None,
    ) -> CraftTask:
        """Create a task in the inbox or a daily note."""
        task = {"markdown": markdown, "location": location}
        if schedule_date:
            task["taskInfo"] = {"scheduleDate": schedule_date.isoformat()}

        resp = self._request("POST", "/tasks", json={"tasks": [task]}, action="create task")
        items = _items(self._json(resp))
        if not items:
            raise CraftAPIError("Failed to create task: empty response")
        return CraftTask.from_api(items[0])

    def delete_tasks(self, task_ids: list[str]) -> None:
        """Delete tasks by id."""
        self._request("DELETE", "/tasks", json={"idsToDelete": task_ids}, action="delete tasks")

    def move_daily_note_task(self, task_id: str, target_date: date) -> None:
        """Move a daily-note task block to the end of another day's note."""
        self._request(
            "PUT",
            "/blocks/move",
            json={
                "blockIds": [task_id],
                "position": {"position": "end", "date": format_date_for_api(target_date)},
            },
            action="move task",
        )
