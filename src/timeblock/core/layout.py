"""Pure timeline layout logic - no I/O dependencies."""

from collections import Counter
from dataclasses import dataclass
from datetime import datetime

from .blocks import ScheduledBlock


@dataclass(frozen=True)
class ColumnInfo:
    """Horizontal slot of a block within its overlap group."""

    column: int
    total_columns: int


def block_keys(blocks: list[ScheduledBlock]) -> list[str]:
    """
    Layout key of each block: its id, or its position in the input.

    Ids shared by several blocks (strings in one node's content list, text
    reached twice) fall back to the position so no two blocks collide.
    """
    counts = Counter(b.id for b in blocks if b.id)
    return [
        block.id if block.id and counts[block.id] == 1 else f"block-{index}"
        for index, block in enumerate(blocks)
    ]


def overlaps(a: ScheduledBlock, b: ScheduledBlock) -> bool:
    """Half-open interval overlap: [start, end)."""
    return a.start < b.end and a.end > b.start


def assign_columns(blocks: list[ScheduledBlock]) -> dict[str, ColumnInfo]:
    """
    Assign side-by-side columns to overlapping blocks.

    Greedy single pass in start order: a block joins the first group holding
    any block it overlaps, else opens a new group. Columns follow join order
    and every block in a group shares the group's final size. This can use
    more columns than a minimal colouring would.

    Pure function - no I/O.
    """
    keys = block_keys(blocks)
    indexed = sorted(enumerate(blocks), key=lambda pair: pair[1].start)

    groups: list[list[tuple[int, ScheduledBlock]]] = []
    for index, block in indexed:
        for group in groups:
            if any(overlaps(member, block) for _, member in group):
                group.append((index, block))
                break
        else:
            groups.append([(index, block)])

    layout = {}
    for group in groups:
        for column, (index, block) in enumerate(group):
            layout[keys[index]] = ColumnInfo(column=column, total_columns=len(group))
    return layout


def now_hour(dt: datetime) -> float:
    """Decimal hour of a datetime."""
    return dt.hour + dt.minute / 60


def is_current(block: ScheduledBlock, hour: float) -> bool:
    """Check if a block is running at the given decimal hour."""
    return block.start <= hour < block.end


def visible_blocks(
    blocks: list[ScheduledBlock],
    start_hour: int,
    end_hour: int,
) -> list[ScheduledBlock]:
    """Blocks that intersect the visible part of the day."""
    return [b for b in blocks if b.start < end_hour and b.end > start_hour]
