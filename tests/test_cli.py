"""Tests for the click CLI."""

import json
from datetime import date, timedelta
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from timeblock.adapters.craft_api import CraftAPIError
from timeblock.cli import main
from timeblock.config import Config
from timeblock.core.kanban import CraftTask

NOTE = {
    "page": {
        "id": "p1",
        "blocks": [
            {"id": "b1", "markdown": "9-10 Gym"},
            {"id": "b2", "markdown": "9:30-10:30 Standup"},
            {"id": "t1", "markdown": "- [ ] Buy milk"},
        ],
    }
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def adapter():
    with patch("timeblock.cli.load_config", return_value=Config(craft_api_url="https://craft.test")), \
            patch("timeblock.cli.CraftAdapter") as mock_cls:
        instance = mock_cls.return_value
        instance.fetch_blocks.return_value = NOTE
        instance.insert_block.return_value = [{"id": "new-1"}]
        yield instance


class TestDay:
    def test_json(self, runner, adapter):
        result = runner.invoke(main, ["day", "--date", "2024-06-10", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [b["id"] for b in data["scheduled"]] == ["b1", "b2"]
        assert [(b["column"], b["total_columns"]) for b in data["scheduled"]] == [(0, 2), (1, 2)]
        assert data["unscheduled"][0]["text"] == "Buy milk"

    def test_agenda(self, runner, adapter):
        result = runner.invoke(main, ["day", "--date", "2024-06-10"])
        assert result.exit_code == 0
        assert "## Mon, 10 Jun" in result.output
        assert "- 9 AM - 10 AM (1/2) Gym [health]" in result.output

    def test_api_error(self, runner, adapter):
        adapter.fetch_blocks.side_effect = CraftAPIError("Failed to fetch blocks: 500", 500)
        result = runner.invoke(main, ["day"])
        assert result.exit_code == 1
        assert "Error: Failed to fetch blocks: 500" in result.output


class TestParse:
    def test_json_file(self, runner, tmp_path):
        path = tmp_path / "note.json"
        path.write_text(json.dumps(NOTE))
        result = runner.invoke(main, ["parse", str(path), "--json"])
        assert result.exit_code == 0
        assert len(json.loads(result.output)["scheduled"]) == 2

    def test_legacy_text_file(self, runner, tmp_path):
        path = tmp_path / "note.txt"
        path.write_text("<content>2-3pm Review</content>\n<content>[ ] Call</content>")
        result = runner.invoke(main, ["parse", str(path)])
        assert result.exit_code == 0
        assert "- 2 PM - 3 PM Review [default]" in result.output
        assert "- [ ] Call" in result.output

    def test_shared_ids_get_distinct_lanes(self, runner, tmp_path):
        path = tmp_path / "note.json"
        path.write_text(json.dumps({"id": "n1", "content": ["9-10am A", "9:30-10:30am B"]}))
        result = runner.invoke(main, ["parse", str(path), "--json"])
        scheduled = json.loads(result.output)["scheduled"]
        assert [(b["column"], b["total_columns"]) for b in scheduled] == [(0, 2), (1, 2)]

    def test_scalar_payload_rejected(self, runner, tmp_path):
        path = tmp_path / "note.json"
        path.write_text("42")
        result = runner.invoke(main, ["parse", str(path)])
        assert result.exit_code == 1


class TestEdits:
    def test_move(self, runner, adapter):
        result = runner.invoke(main, ["move", "b1", "2pm", "3:30pm", "--date", "2024-06-10"])
        assert result.exit_code == 0
        adapter.update_block.assert_called_once_with("b1", "2pm-3:30pm Gym")
        assert "2pm-3:30pm Gym" in result.output

    def test_move_schedules_task(self, runner, adapter):
        result = runner.invoke(main, ["move", "t1", "11", "11:30", "--date", "2024-06-10"])
        assert result.exit_code == 0
        adapter.update_block.assert_called_once_with("t1", "- [ ] 11am-11:30am Buy milk")

    def test_move_unknown_block(self, runner, adapter):
        result = runner.invoke(main, ["move", "nope", "9", "10", "--date", "2024-06-10"])
        assert result.exit_code == 1
        assert "No block with id nope" in result.output

    def test_move_bad_time(self, runner, adapter):
        result = runner.invoke(main, ["move", "b1", "soon", "10"])
        assert result.exit_code == 2

    def test_add(self, runner, adapter):
        result = runner.invoke(main, ["add", "2pm", "3pm", "Deep", "work", "--date", "2024-06-10"])
        assert result.exit_code == 0
        assert "2pm-3pm Deep work [work]" in result.output

    def test_toggle(self, runner, adapter):
        result = runner.invoke(main, ["toggle", "t1", "--date", "2024-06-10"])
        assert result.exit_code == 0
        adapter.toggle_task.assert_called_once_with("t1", True)
        assert "[x] Buy milk" in result.output

    def test_toggle_undo(self, runner, adapter):
        result = runner.invoke(main, ["toggle", "b1", "--undo", "--date", "2024-06-10"])
        adapter.toggle_task.assert_called_once_with("b1", False)
        assert "[ ] Gym" in result.output


class TestBoard:
    def test_board_week_json(self, runner, adapter):
        adapter.fetch_all_tasks.return_value = []
        result = runner.invoke(main, ["board", "--week", "--json"])
        assert result.exit_code == 0
        assert len(json.loads(result.output)) == 10

    def test_board_text(self, runner, adapter):
        adapter.fetch_all_tasks.return_value = []
        result = runner.invoke(main, ["board"])
        assert result.exit_code == 0
        assert "### Inbox (0)" in result.output
        assert "### Future (0)" in result.output


class TestBlockEdits:
    def test_retitle(self, runner, adapter):
        result = runner.invoke(main, ["retitle", "b1", "Morning", "swim", "--date", "2024-06-10"])
        assert result.exit_code == 0
        adapter.update_block.assert_called_once_with("b1", "9-10 Morning swim")
        assert "9-10 Morning swim" in result.output

    def test_retitle_rejects_unscheduled_task(self, runner, adapter):
        result = runner.invoke(main, ["retitle", "t1", "Oat", "milk", "--date", "2024-06-10"])
        assert result.exit_code == 1
        adapter.update_block.assert_not_called()

    def test_delete(self, runner, adapter):
        result = runner.invoke(main, ["delete", "b1", "--date", "2024-06-10"])
        assert result.exit_code == 0
        adapter.delete_blocks.assert_called_once_with(["b1"])
        assert "Deleted: 9-10 Gym" in result.output


@pytest.fixture
def board_tasks(adapter):
    adapter.fetch_all_tasks.return_value = [
        CraftTask(id="i1", markdown="- [ ] Pay rent", location_type="inbox"),
        CraftTask(
            id="n1",
            markdown="- [ ] Call Bob",
            location_type="dailyNote",
            location_date=date.today(),
        ),
    ]
    return adapter


class TestTaskCommands:
    def test_move_inbox_task(self, runner, board_tasks):
        result = runner.invoke(main, ["task", "move", "i1", "future", "--standard"])
        assert result.exit_code == 0
        tomorrow = date.today() + timedelta(days=1)
        board_tasks.update_task.assert_called_once_with(
            "i1", {"taskInfo": {"scheduleDate": tomorrow.isoformat()}}
        )
        assert "Moved: Pay rent -> future" in result.output

    def test_move_daily_note_task_to_date(self, runner, board_tasks):
        result = runner.invoke(main, ["task", "move", "n1", "2024-06-13"])
        assert result.exit_code == 0
        board_tasks.move_daily_note_task.assert_called_once_with("n1", date(2024, 6, 13))

    def test_move_back_to_inbox_refused(self, runner, board_tasks):
        result = runner.invoke(main, ["task", "move", "n1", "inbox"])
        assert result.exit_code == 1
        assert "cannot be moved" in result.output
        board_tasks.move_daily_note_task.assert_not_called()

    def test_move_unknown_column(self, runner, board_tasks):
        result = runner.invoke(main, ["task", "move", "i1", "someday"])
        assert result.exit_code == 2

    def test_move_unknown_task(self, runner, board_tasks):
        result = runner.invoke(main, ["task", "move", "zz", "today"])
        assert result.exit_code == 1
        assert "No open task with id zz" in result.output

    def test_add(self, runner, adapter):
        adapter.create_task.return_value = CraftTask(id="t9", markdown="Call the bank", location_type="inbox")
        result = runner.invoke(main, ["task", "add", "--column", "today", "Call", "the", "bank"])
        assert result.exit_code == 0
        adapter.create_task.assert_called_once_with(
            "Call the bank", {"type": "inbox"}, schedule_date=date.today()
        )
        assert "Added: Call the bank (t9)" in result.output

    def test_add_to_daily_note(self, runner, adapter):
        adapter.create_task.return_value = CraftTask(id="t9", markdown="Stretch")
        result = runner.invoke(main, ["task", "add", "--note", "Stretch"])
        assert result.exit_code == 0
        adapter.create_task.assert_called_once_with(
            "Stretch", {"type": "dailyNote", "date": date.today().isoformat()}
        )

    def test_edit(self, runner, board_tasks):
        result = runner.invoke(main, ["task", "edit", "n1", "Call", "Alice"])
        assert result.exit_code == 0
        board_tasks.update_task.assert_called_once_with("n1", {"markdown": "- [ ] Call Alice"})
        assert "Updated: Call Alice" in result.output

    def test_done(self, runner, board_tasks):
        result = runner.invoke(main, ["task", "done", "n1"])
        assert result.exit_code == 0
        board_tasks.update_task.assert_called_once_with("n1", {"taskInfo": {"state": "done"}})
        assert "Done: Call Bob" in result.output

    def test_reopen_closed_task_by_id(self, runner, board_tasks):
        result = runner.invoke(main, ["task", "done", "old", "--undo"])
        assert result.exit_code == 0
        board_tasks.update_task.assert_called_once_with("old", {"taskInfo": {"state": "todo"}})
        assert "Reopened: old" in result.output

    def test_delete(self, runner, board_tasks):
        result = runner.invoke(main, ["task", "delete", "i1"])
        assert result.exit_code == 0
        board_tasks.delete_tasks.assert_called_once_with(["i1"])
        assert "Deleted: Pay rent" in result.output
