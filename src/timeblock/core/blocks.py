"""Pure timeblock classification and note tree walking - no I/O dependencies."""

import logging
import re
from dataclasses import dataclass, field
from typing import Union

from .markup import strip_bullet, strip_checkbox, strip_highlight, CHECKBOX_PREFIX
from .time_parser import (
    TIME_PATTERN,
    categorize,
    match_task_with_time_range,
    match_time_range,
    match_todo,
)

logger = logging.getLogger(__name__)

TASK_LIST_STYLES = ("task", "todo", "checkbox")

_LEGACY_PAGE_TITLE = re.compile(r"<pageTitle>([^<]+)</pageTitle>")
_LEGACY_CONTENT = re.compile(r"<content>([^<]+)</content>")


@dataclass(frozen=True)
class ScheduledBlock:
    """A line of note text with a start and end time."""

    id: str | None
    start: float
    end: float
    title: str
    category: str
    highlight: str | None
    original_text: str
    is_task: bool = False
    checked: bool = False

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class UnscheduledTask:
    """A checkbox line with no time assigned."""

    id: str | None
    text: str
    checked: bool
    original_text: str


@dataclass
class ParsedBlocks:
    """Result of walking a note: scheduled blocks by start time, tasks in note order."""

    scheduled: list[ScheduledBlock] = field(default_factory=list)
    unscheduled: list[UnscheduledTask] = field(default_factory=list)


@dataclass
class NoteNode:
    """
    One node of a Craft block tree.

    Children can hang off `content` (strings or nodes), `blocks`,
    `subblocks`, `children`, or a single wrapped `page`.
    """

    id: str | None = None
    markdown: str | None = None
    content: Union[str, list["NoteContent"], None] = None
    text: str | None = None
    page_title: str | None = None
    color: str | None = None
    list_style: str | None = None
    task_state: str | None = None
    blocks: list["NoteNode"] = field(default_factory=list)
    subblocks: list["NoteNode"] = field(default_factory=list)
    children: list["NoteNode"] = field(default_factory=list)
    page: "NoteNode | None" = None

    @classmethod
    def from_api(cls, data: dict) -> "NoteNode":
        """Create a NoteNode from a Craft API block. Unknown shapes are dropped."""
        content = data.get("content")
        if isinstance(content, list):
            content = [
                item if isinstance(item, str) else cls.from_api(item)
                for item in content
                if isinstance(item, (str, dict))
            ]
        elif not isinstance(content, str):
            content = None

        task_info = data.get("taskInfo")
        page = data.get("page")

        return cls(
            id=data.get("id") or None,
            markdown=_str_or_none(data.get("markdown")),
            content=content,
            text=_str_or_none(data.get("text")),
            page_title=_str_or_none(data.get("pageTitle")),
            color=_block_color(data),
            list_style=data.get("listStyle"),
            task_state=task_info.get("state") if isinstance(task_info, dict) else None,
            blocks=_nodes(data.get("blocks")),
            subblocks=_nodes(data.get("subblocks")),
            children=_nodes(data.get("children")),
            page=cls.from_api(page) if isinstance(page, dict) else None,
        )


NoteContent = Union[str, NoteNode]


def _str_or_none(value) -> str | None:
    return value if isinstance(value, str) else None


def _nodes(items) -> list[NoteNode]:
    if not isinstance(items, list):
        return []
    return [NoteNode.from_api(item) for item in items if isinstance(item, dict)]


def _block_color(data: dict) -> str | None:
    """Resolve a block color from the several places Craft may put it."""
    color = data.get("color") or data.get("highlight") or data.get("highlightColor")

    if isinstance(color, dict):
        color = color.get("color") or color.get("name")

    if not color and isinstance(data.get("style"), dict):
        style = data["style"]
        color = style.get("color") or style.get("highlight")

    return color if isinstance(color, str) and color else None


def classify(
    raw: str,
    highlight: str | None = None,
    block_id: str | None = None,
    list_style: str | None = None,
    task_state: str | None = None,
) -> ScheduledBlock | UnscheduledTask | None:
    """
    Classify one line of note text.

    Cascade: checkbox+time, bare time, structural task, checkbox only.
    A list-style task node without a time is emitted with the host's task
    state when known, falling back to the lexical checkbox. Returns None for
    prose.
    """
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text:
        return None

    text = strip_bullet(text)
    text, color = strip_highlight(text)
    if color:
        highlight = color
    text = text.strip()

    expr = match_task_with_time_range(text) or match_time_range(text)
    if expr:
        return ScheduledBlock(
            id=block_id,
            start=expr.start,
            end=expr.end,
            title=expr.title,
            category=categorize(expr.title),
            highlight=highlight,
            original_text=raw,
            is_task=expr.is_task,
            checked=expr.checked,
        )

    if list_style in TASK_LIST_STYLES:
        body = strip_checkbox(text).strip()
        if body and not TIME_PATTERN.match(body):
            if task_state:
                checked = task_state == "done"
            else:
                checkbox = CHECKBOX_PREFIX.match(text)
                checked = bool(checkbox) and checkbox.group(1).lower() == "x"
            return UnscheduledTask(id=block_id, text=body, checked=checked, original_text=raw)

    todo = match_todo(text)
    if todo:
        body, checked = todo
        return UnscheduledTask(id=block_id, text=body, checked=checked, original_text=raw)

    logger.debug(f"Skipping unrecognized line: {text[:40]!r}")
    return None


class _Walker:
    """Recursive-descent visitor over NoteNode trees."""

    def __init__(self):
        self.result = ParsedBlocks()

    def emit(self, item: ScheduledBlock | UnscheduledTask | None) -> None:
        if isinstance(item, ScheduledBlock):
            self.result.scheduled.append(item)
        elif isinstance(item, UnscheduledTask):
            self.result.unscheduled.append(item)

    def visit(self, node: NoteNode) -> None:
        if node.markdown:
            self.emit(
                classify(
                    node.markdown,
                    node.color,
                    node.id,
                    list_style=node.list_style,
                    task_state=node.task_state,
                )
            )

        if isinstance(node.content, str):
            self.emit(classify(node.content, node.color, node.id))
        elif node.content:
            for item in node.content:
                if isinstance(item, str):
                    self.emit(classify(item, node.color, node.id))
                else:
                    self.visit(item)

        if node.text:
            self.emit(classify(node.text, None, node.id))
        if node.page_title:
            self.emit(classify(node.page_title, None, node.id))

        # Same content reachable through two relations is visited twice
        for child in node.blocks:
            self.visit(child)
        for child in node.subblocks:
            self.visit(child)
        for child in node.children:
            self.visit(child)
        if node.page:
            self.visit(node.page)

    def visit_legacy(self, payload: str) -> None:
        for match in _LEGACY_PAGE_TITLE.finditer(payload):
            self.emit(classify(match.group(1)))
        for match in _LEGACY_CONTENT.finditer(payload):
            self.emit(classify(match.group(1)))


def parse_blocks(payload: str | list | dict | NoteNode) -> ParsedBlocks:
    """
    Walk a note payload and collect scheduled blocks and unscheduled tasks.

    The payload must be a string (legacy tagged text), a list of blocks, a
    block dict, or a NoteNode. Scheduled blocks come back sorted by start
    time; ties and unscheduled tasks keep discovery order.

    Pure function - no I/O.
    """
    walker = _Walker()

    if isinstance(payload, str):
        walker.visit_legacy(payload)
    elif isinstance(payload, NoteNode):
        walker.visit(payload)
    elif isinstance(payload, list):
        for item in payload:
            if isinstance(item, dict):
                walker.visit(NoteNode.from_api(item))
    elif isinstance(payload.get("page"), dict):
        walker.visit(NoteNode.from_api(payload["page"]))
    elif isinstance(payload.get("blocks"), list):
        for node in _nodes(payload["blocks"]):
            walker.visit(node)
    else:
        walker.visit(NoteNode.from_api(payload))

    result = walker.result
    result.scheduled = sorted(result.scheduled, key=lambda b: b.start)
    return result
