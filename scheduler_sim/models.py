from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

# Owner of a segment in which no process runs.
IDLE = None


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0  # lower value = more urgent


@dataclass(frozen=True)
class Segment:
    """
    One contiguous slice of the Gantt timeline, ``[start_time, end_time)``.

    ``pid`` is ``IDLE`` when the CPU had nothing ready to run.
    """

    pid: Optional[int]
    start_time: int
    end_time: int

    @property
    def is_idle(self) -> bool:
        return self.pid is IDLE

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def label(self) -> str:
        return "IDLE" if self.is_idle else f"P{self.pid}"


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int
    start_time: int
    completion_time: int
    turnaround_time: int
    waiting_time: int
    response_time: int


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[Segment] = field(default_factory=list)
    avg_waiting: float = 0.0
    avg_turnaround: float = 0.0
    avg_response: float = 0.0
    system: Optional[SystemMetrics] = None


@dataclass(frozen=True)
class ComparisonRow:
    algorithm: str
    avg_waiting: float
    avg_turnaround: float


@dataclass
class Comparison:
    """
    Policies ranked by average waiting time, lowest first.
    """

    quantum: int
    rows: List[ComparisonRow] = field(default_factory=list)

    @property
    def best(self) -> Optional[ComparisonRow]:
        return self.rows[0] if self.rows else None
