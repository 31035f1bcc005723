from __future__ import annotations

from typing import Dict, List, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import Segment

MAX_CHART_WIDTH = 80


def _block_widths(slices: Sequence[Segment], max_width: int = MAX_CHART_WIDTH) -> List[int]:
    """
    Column width of each segment. Timelines longer than ``max_width`` units
    are scaled down; every segment keeps at least one column.
    """
    span = slices[-1].end_time - slices[0].start_time
    scale = span / max_width if span > max_width else 1.0
    return [max(1, round(sl.duration / scale)) for sl in slices]


def _fit_label(label: str, width: int) -> str:
    if width < len(label):
        return label[:width]
    left = (width - len(label)) // 2
    return " " * left + label + " " * (width - len(label) - left)


def _time_ruler(slices: Sequence[Segment], widths: Sequence[int], separator: int) -> str:
    ruler = str(slices[0].start_time)
    for sl, width in zip(slices, widths):
        mark = str(sl.end_time)
        ruler += " " * max(1, width + separator - len(mark)) + mark
    return ruler


def render_gantt(slices: Sequence[Segment]) -> str:
    """
    Plain-text Gantt chart: a bar row, a label row and a time ruler.
    """
    if not slices:
        return "(no execution)"

    widths = _block_widths(slices)

    bar = ""
    labels = ""
    for sl, width in zip(slices, widths):
        bar += "|" + ("." if sl.is_idle else "-") * width
        labels += "|" + _fit_label(sl.label, width)
    bar += "|"
    labels += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            bar,
            labels,
            _time_ruler(slices, widths, separator=1),
        ]
    )


def build_rich_gantt(slices: Sequence[Segment]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    widths = _block_widths(slices)

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()

    for sl, width in zip(slices, widths):
        if sl.is_idle:
            timeline.append("." * width, style="dim")
            labels.append(_fit_label(sl.label, width), style="dim")
            continue

        timeline.append(" " * width, style=f"on {pid_color(sl.pid)}")
        labels.append(_fit_label(sl.label, width), style="bold")

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, _time_ruler(slices, widths, separator=0)
