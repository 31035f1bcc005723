from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Sequence, Tuple

from .metrics import build_result
from .models import Process, ScheduleResult
from .timeline import TimelineBuilder

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2


def _arrival_order(p: Process) -> Tuple[int, int]:
    return (p.arrival_time, p.pid)


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Equal arrivals run in PID order.
    """
    builder = TimelineBuilder(processes)

    for p in sorted(processes, key=_arrival_order):
        builder.idle_until(p.arrival_time)
        builder.run(p.pid, p.burst_time)

    logger.debug("FCFS finished at t=%s with %d segments", builder.time, len(builder.segments))
    return build_result("FCFS", processes, builder.segments)


def _schedule_non_preemptive(
    name: str,
    processes: Sequence[Process],
    selection_key: Callable[[Process], tuple],
) -> ScheduleResult:
    """
    Shared loop for SJF and Priority.

    The ready set is rebuilt from scratch after every completion so that
    arrivals revealed during the last burst compete on equal terms.
    """
    builder = TimelineBuilder(processes)
    completed_pids: set[int] = set()

    while len(completed_pids) < len(processes):
        ready = [p for p in processes if p.arrival_time <= builder.time and p.pid not in completed_pids]

        if not ready:
            builder.idle_until(min(p.arrival_time for p in processes if p.pid not in completed_pids))
            continue

        p = min(ready, key=selection_key)
        builder.run(p.pid, p.burst_time)
        completed_pids.add(p.pid)

    logger.debug("%s finished at t=%s with %d segments", name, builder.time, len(builder.segments))
    return build_result(name, processes, builder.segments)


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    Among arrived, unfinished processes choose the smallest burst time;
    ties go to the earlier arrival, then the lower PID.
    """
    return _schedule_non_preemptive(
        "SJF (Non-Preemptive)",
        processes,
        lambda p: (p.burst_time, p.arrival_time, p.pid),
    )


def schedule_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Among ready
    processes, choose the one with the smallest priority; break ties
    by earlier arrival time, then PID.
    """
    return _schedule_non_preemptive(
        "Priority (Non-Preemptive)",
        processes,
        lambda p: (p.priority, p.arrival_time, p.pid),
    )


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = DEFAULT_QUANTUM) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive during a slice join the ready queue ahead of the
    process that was just preempted. A missing quantum means DEFAULT_QUANTUM;
    a non-positive one is clamped to 1.
    """
    if quantum is None:
        quantum = DEFAULT_QUANTUM
    elif quantum <= 0:
        logger.warning("Round Robin quantum %r is not positive; using 1", quantum)
        quantum = 1

    arrivals: List[Process] = sorted(processes, key=_arrival_order)
    remaining: Dict[int, int] = {p.pid: p.burst_time for p in processes}
    ready: Deque[int] = deque()
    builder = TimelineBuilder(processes)
    cursor = 0
    finished = 0

    def enqueue_arrivals(up_to: int) -> None:
        nonlocal cursor
        while cursor < len(arrivals) and arrivals[cursor].arrival_time <= up_to:
            ready.append(arrivals[cursor].pid)
            cursor += 1

    enqueue_arrivals(builder.time)

    while finished < len(arrivals):
        if not ready:
            builder.idle_until(arrivals[cursor].arrival_time)
            enqueue_arrivals(builder.time)
            continue

        pid = ready.popleft()
        run_time = min(quantum, remaining[pid])
        builder.run(pid, run_time)
        remaining[pid] -= run_time

        enqueue_arrivals(builder.time)

        if remaining[pid] == 0:
            finished += 1
        else:
            ready.append(pid)

    name = f"Round Robin (q={quantum})"
    logger.debug("%s finished at t=%s with %d segments", name, builder.time, len(builder.segments))
    return build_result(name, processes, builder.segments, quantum=quantum)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "rr": schedule_rr,
}


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum)
