from __future__ import annotations

import logging
from typing import List, Sequence

from .algorithms import DEFAULT_QUANTUM, schedule_fcfs, schedule_priority, schedule_rr, schedule_sjf
from .models import Comparison, ComparisonRow, Process, ScheduleResult

logger = logging.getLogger(__name__)


def compare_algorithms(processes: Sequence[Process], quantum: int = DEFAULT_QUANTUM) -> Comparison:
    """
    Run FCFS, SJF, Priority and Round Robin on the same workload and rank
    them by average waiting time.

    The sort is stable, so exact ties keep the FCFS, SJF, Priority, RR order.
    """
    results: List[ScheduleResult] = [
        schedule_fcfs(processes),
        schedule_sjf(processes),
        schedule_priority(processes),
        schedule_rr(processes, quantum=quantum),
    ]

    rows = sorted(
        (ComparisonRow(r.algorithm, r.avg_waiting, r.avg_turnaround) for r in results),
        key=lambda row: row.avg_waiting,
    )
    comparison = Comparison(quantum=results[-1].quantum, rows=rows)
    logger.debug("Best by average waiting time: %s", comparison.best.algorithm)
    return comparison
