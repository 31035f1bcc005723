from __future__ import annotations

from typing import Iterable, List

from .models import IDLE, Process, Segment


class TimelineBuilder:
    """
    Accumulates a contiguous Gantt timeline while a policy advances the clock.

    The clock starts at the earliest arrival (0 for an empty workload), so the
    first segment always begins there.
    """

    def __init__(self, processes: Iterable[Process]):
        arrivals = [p.arrival_time for p in processes]
        self.time: int = min(arrivals) if arrivals else 0
        self.segments: List[Segment] = []

    def idle_until(self, arrival_time: int) -> int:
        """
        Advance the clock to ``arrival_time``, recording the gap as IDLE.

        No-op when the clock is already there. A gap directly following
        another IDLE segment extends it rather than adding a second one.
        """
        if self.time >= arrival_time:
            return self.time

        if self.segments and self.segments[-1].is_idle:
            start = self.segments.pop().start_time
        else:
            start = self.time

        self.segments.append(Segment(pid=IDLE, start_time=start, end_time=arrival_time))
        self.time = arrival_time
        return self.time

    def run(self, pid: int, duration: int) -> int:
        """Append a slice of ``duration`` units for ``pid`` and advance the clock."""
        start = self.time
        self.time = start + duration
        self.segments.append(Segment(pid=pid, start_time=start, end_time=self.time))
        return self.time
