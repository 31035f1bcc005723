from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from .models import Process, ProcessMetrics, ScheduleResult, Segment, SystemMetrics

logger = logging.getLogger(__name__)


def compute_process_metrics(processes: Sequence[Process], timeline: Sequence[Segment]) -> List[ProcessMetrics]:
    """
    Derive per-process metrics from a finished timeline, ordered by PID.

    A process may own several non-adjacent segments (Round Robin), so its
    completion is the latest end and its first start the earliest start
    among all of them.
    """
    completion: Dict[int, int] = {}
    first_start: Dict[int, int] = {}
    for seg in timeline:
        if seg.is_idle:
            continue
        completion[seg.pid] = max(completion.get(seg.pid, seg.end_time), seg.end_time)
        first_start[seg.pid] = min(first_start.get(seg.pid, seg.start_time), seg.start_time)

    metrics: List[ProcessMetrics] = []
    for p in sorted(processes, key=lambda x: x.pid):
        completion_time = completion.get(p.pid, 0)
        start_time = first_start.get(p.pid, p.arrival_time)
        turnaround_time = completion_time - p.arrival_time
        waiting_time = turnaround_time - p.burst_time

        # Only reachable when the input bypassed validation.
        if turnaround_time < 0 or waiting_time < 0:
            logger.warning(
                "Clamping negative metrics for P%s (turnaround=%s, waiting=%s)",
                p.pid,
                turnaround_time,
                waiting_time,
            )
            turnaround_time = max(0, turnaround_time)
            waiting_time = max(0, waiting_time)

        metrics.append(
            ProcessMetrics(
                pid=p.pid,
                arrival_time=p.arrival_time,
                burst_time=p.burst_time,
                priority=p.priority,
                start_time=start_time,
                completion_time=completion_time,
                turnaround_time=turnaround_time,
                waiting_time=waiting_time,
                response_time=max(0, start_time - p.arrival_time),
            )
        )

    return metrics


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }


def compute_system_metrics(timeline: Sequence[Segment], process_count: int) -> SystemMetrics:
    """
    Compute throughput and CPU utilization over the span of the timeline.
    """
    if not timeline:
        return SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)

    makespan = timeline[-1].end_time - timeline[0].start_time
    cpu_busy_time = sum(seg.duration for seg in timeline if not seg.is_idle)

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=process_count / makespan if makespan > 0 else 0.0,
        cpu_utilization=cpu_busy_time / makespan if makespan > 0 else 0.0,
    )


def build_result(
    algorithm: str,
    processes: Sequence[Process],
    timeline: List[Segment],
    quantum: Optional[int] = None,
) -> ScheduleResult:
    metrics = compute_process_metrics(processes, timeline)
    summary = summarize_process_metrics(metrics)
    return ScheduleResult(
        algorithm=algorithm,
        quantum=quantum,
        processes=metrics,
        timeline=timeline,
        avg_waiting=summary["avg_waiting"],
        avg_turnaround=summary["avg_turnaround"],
        avg_response=summary["avg_response"],
        system=compute_system_metrics(timeline, len(processes)),
    )
