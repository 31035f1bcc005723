import logging

import pytest

from scheduler_sim.algorithms import (
    run_algorithm,
    schedule_fcfs,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
)
from scheduler_sim.models import IDLE, Process
from scheduler_sim.workload_io import demo_workload


def _procs():
    return [
        Process(1, arrival_time=0, burst_time=5, priority=2),
        Process(2, arrival_time=1, burst_time=3, priority=1),
        Process(3, arrival_time=2, burst_time=8, priority=3),
    ]


def _segments(result):
    return [(s.pid, s.start_time, s.end_time) for s in result.timeline]


def _completions(result):
    return {p.pid: p.completion_time for p in result.processes}


def test_fcfs_order():
    res = schedule_fcfs(_procs())
    assert _segments(res) == [(1, 0, 5), (2, 5, 8), (3, 8, 16)]
    assert _completions(res) == {1: 5, 2: 8, 3: 16}
    assert [p.waiting_time for p in res.processes] == [0, 4, 6]
    assert res.avg_waiting == pytest.approx(10 / 3)
    assert res.algorithm == "FCFS"
    assert res.quantum is None


def test_fcfs_equal_arrivals_run_in_pid_order():
    procs = [
        Process(2, arrival_time=0, burst_time=3),
        Process(1, arrival_time=0, burst_time=2),
    ]
    res = schedule_fcfs(procs)
    assert _segments(res) == [(1, 0, 2), (2, 2, 5)]


def test_fcfs_idle_gap_and_late_start():
    procs = [
        Process(1, arrival_time=2, burst_time=3),
        Process(2, arrival_time=10, burst_time=2),
    ]
    res = schedule_fcfs(procs)
    # Timeline starts at the first arrival, not at zero.
    assert _segments(res) == [(1, 2, 5), (IDLE, 5, 10), (2, 10, 12)]
    assert res.timeline[1].label == "IDLE"
    assert [p.waiting_time for p in res.processes] == [0, 0]


def test_sjf_picks_shortest_ready_job():
    procs = [
        Process(1, arrival_time=0, burst_time=7),
        Process(2, arrival_time=2, burst_time=4),
        Process(3, arrival_time=4, burst_time=1),
        Process(4, arrival_time=5, burst_time=4),
    ]
    res = schedule_sjf(procs)
    # P1 is not interrupted; P3 (burst 1) goes next, then P2 beats P4 on arrival.
    assert _segments(res) == [(1, 0, 7), (3, 7, 8), (2, 8, 12), (4, 12, 16)]
    assert res.algorithm == "SJF (Non-Preemptive)"


def test_sjf_order():
    res = schedule_sjf(_procs())
    assert [s.pid for s in res.timeline] == [1, 2, 3]


def test_sjf_tie_on_burst_and_arrival_goes_to_lower_pid():
    procs = [
        Process(3, arrival_time=0, burst_time=2),
        Process(1, arrival_time=1, burst_time=5),
        Process(2, arrival_time=1, burst_time=5),
    ]
    res = schedule_sjf(procs)
    assert [s.pid for s in res.timeline] == [3, 1, 2]


def test_sjf_idle_fill_is_followed_by_a_process():
    procs = [
        Process(1, arrival_time=0, burst_time=2),
        Process(2, arrival_time=6, burst_time=3),
        Process(3, arrival_time=7, burst_time=1),
    ]
    res = schedule_sjf(procs)
    assert _segments(res) == [(1, 0, 2), (IDLE, 2, 6), (2, 6, 9), (3, 9, 10)]


def test_priority_static():
    res = schedule_priority(_procs())
    # P1 starts alone at 0; afterwards P2 has the highest priority (1).
    assert [s.pid for s in res.timeline] == [1, 2, 3]


def test_priority_demo_workload():
    res = schedule_priority(demo_workload())
    assert _segments(res) == [(1, 0, 7), (2, 7, 11), (4, 11, 15), (3, 15, 16), (5, 16, 22)]
    assert res.avg_waiting == pytest.approx(6.4)
    assert res.avg_turnaround == pytest.approx(10.8)
    assert res.algorithm == "Priority (Non-Preemptive)"


def test_priority_negative_values_are_more_urgent():
    procs = [
        Process(1, arrival_time=0, burst_time=1, priority=0),
        Process(2, arrival_time=0, burst_time=1, priority=-5),
    ]
    res = schedule_priority(procs)
    assert [s.pid for s in res.timeline] == [2, 1]


def test_priority_tie_on_priority_and_arrival_goes_to_lower_pid():
    procs = [
        Process(3, arrival_time=0, burst_time=1, priority=0),
        Process(2, arrival_time=1, burst_time=2, priority=5),
        Process(1, arrival_time=1, burst_time=2, priority=5),
    ]
    res = schedule_priority(procs)
    assert [s.pid for s in res.timeline] == [3, 1, 2]


def test_priority_tie_on_priority_goes_to_earlier_arrival():
    procs = [
        Process(1, arrival_time=0, burst_time=4, priority=0),
        Process(2, arrival_time=3, burst_time=1, priority=2),
        Process(3, arrival_time=2, burst_time=1, priority=2),
    ]
    res = schedule_priority(procs)
    assert [s.pid for s in res.timeline] == [1, 3, 2]


def test_rr_new_arrivals_queue_ahead_of_preempted_process():
    procs = [
        Process(1, arrival_time=0, burst_time=5),
        Process(2, arrival_time=1, burst_time=3),
    ]
    res = schedule_rr(procs, quantum=2)
    assert _segments(res) == [(1, 0, 2), (2, 2, 4), (1, 4, 6), (2, 6, 7), (1, 7, 8)]
    assert sum(s.duration for s in res.timeline if s.pid == 1) == 5
    assert _completions(res) == {1: 8, 2: 7}
    assert res.algorithm == "Round Robin (q=2)"
    assert res.quantum == 2


def test_rr_demo_workload():
    res = schedule_rr(demo_workload(), quantum=2)
    assert _completions(res) == {1: 20, 2: 9, 3: 7, 4: 17, 5: 22}
    assert res.avg_waiting == pytest.approx(7.2)
    assert res.avg_turnaround == pytest.approx(11.6)


def test_rr_does_not_coalesce_contiguous_slices():
    procs = [
        Process(1, arrival_time=2, burst_time=3),
        Process(2, arrival_time=10, burst_time=2),
    ]
    res = schedule_rr(procs, quantum=2)
    assert _segments(res) == [(1, 2, 4), (1, 4, 5), (IDLE, 5, 10), (2, 10, 12)]


def test_rr_equal_arrivals_enqueue_in_pid_order():
    procs = [
        Process(2, arrival_time=0, burst_time=2),
        Process(1, arrival_time=0, burst_time=2),
    ]
    res = schedule_rr(procs, quantum=1)
    assert [s.pid for s in res.timeline] == [1, 2, 1, 2]


def test_rr_missing_quantum_uses_default(caplog):
    with caplog.at_level(logging.WARNING, logger="scheduler_sim.algorithms"):
        res = schedule_rr(_procs(), quantum=None)

    assert res.quantum == 2
    assert res.algorithm == "Round Robin (q=2)"
    assert not caplog.records


@pytest.mark.parametrize("quantum", [0, -3])
def test_rr_clamps_non_positive_quantum(quantum, caplog):
    with caplog.at_level(logging.WARNING, logger="scheduler_sim.algorithms"):
        res = schedule_rr(_procs(), quantum=quantum)

    assert res.quantum == 1
    assert res.algorithm == "Round Robin (q=1)"
    assert all(s.duration == 1 for s in res.timeline)
    assert any("quantum" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize("name", ["fcfs", "sjf", "priority", "rr"])
def test_empty_workload(name):
    res = run_algorithm(name, [], quantum=2)
    assert res.timeline == []
    assert res.processes == []
    assert res.avg_waiting == 0.0
    assert res.avg_turnaround == 0.0


@pytest.mark.parametrize("name", ["fcfs", "sjf", "priority", "rr"])
def test_repeated_runs_are_identical(name):
    procs = demo_workload()
    first = run_algorithm(name, procs, quantum=3)
    second = run_algorithm(name, procs, quantum=3)
    assert first == second
    assert procs == demo_workload()


def test_run_algorithm_rr_defaults_quantum():
    res = run_algorithm("RR", _procs())
    assert res.quantum == 2


def test_run_algorithm_unknown_name():
    with pytest.raises(ValueError):
        run_algorithm("srtf", _procs())
