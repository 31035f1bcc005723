"""
Scheduler simulation package.

Deterministic simulation of classic CPU scheduling policies (FCFS, SJF,
Priority, Round Robin) with Gantt timelines, per-process metrics and a
policy comparison, plus a command-line front end.
"""

from .algorithms import ALGORITHMS, run_algorithm
from .compare import compare_algorithms
from .models import IDLE, Process, ScheduleResult, Segment

__all__ = [
    "ALGORITHMS",
    "IDLE",
    "Process",
    "ScheduleResult",
    "Segment",
    "compare_algorithms",
    "run_algorithm",
]
