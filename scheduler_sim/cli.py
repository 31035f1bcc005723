from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt
from rich.table import Table

from .algorithms import ALGORITHMS, DEFAULT_QUANTUM, run_algorithm
from .compare import compare_algorithms
from .gantt import build_rich_gantt
from .models import Comparison, Process, ScheduleResult
from .workload_io import (
    MAX_PROCESSES,
    MAX_TIME,
    WorkloadError,
    demo_workload,
    load_workload,
    validate_processes,
    validate_quantum,
)

logger = logging.getLogger(__name__)

EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scheduler-sim",
        description="CPU scheduling simulator (FCFS, SJF, Priority, Round Robin).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run one scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=list(ALGORITHMS),
        help="Algorithm to use.",
    )
    _add_workload_arguments(run_parser)
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (ignored by the others, default: {DEFAULT_QUANTUM}).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run all algorithms on the same workload and rank them by average waiting time.",
    )
    _add_workload_arguments(compare_parser)
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for round-robin (default: {DEFAULT_QUANTUM}).",
    )

    menu_parser = subparsers.add_parser(
        "menu",
        help="Interactive menu to enter processes and run algorithms.",
    )
    menu_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Default quantum offered at the round-robin prompt (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def _add_workload_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--workload", "-w", help="Path to JSON or CSV workload file.")
    source.add_argument("--demo", action="store_true", help="Use the built-in five-process demo workload.")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _print_processes(processes: Sequence[Process], console: Console) -> None:
    table = Table(title="Processes (lower priority value = higher priority)", box=box.SIMPLE_HEAVY)
    for h in ("PID", "Arrival", "Burst", "Priority"):
        table.add_column(h, justify="center" if h == "PID" else "right")

    for p in processes:
        table.add_row(f"P{p.pid}", str(p.arrival_time), str(p.burst_time), str(p.priority))

    console.print(table)


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            f"P{p.pid}",
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.start_time),
            str(p.completion_time),
            str(p.turnaround_time),
            str(p.waiting_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{result.avg_waiting:.2f}")
    sys_table.add_row("Avg turnaround", f"{result.avg_turnaround:.2f}")
    sys_table.add_row("Avg response", f"{result.avg_response:.2f}")
    if result.system:
        sys_table.add_row("Throughput (proc/time)", f"{result.system.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{result.system.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _print_comparison(comparison: Comparison, console: Console) -> None:
    table = Table(title="Algorithm comparison (lower is better)", box=box.SIMPLE_HEAVY)
    table.add_column("Rank", justify="right")
    table.add_column("Algorithm")
    table.add_column("Avg waiting", justify="right")
    table.add_column("Avg turnaround", justify="right")

    for rank, row in enumerate(comparison.rows, start=1):
        table.add_row(str(rank), row.algorithm, f"{row.avg_waiting:.3f}", f"{row.avg_turnaround:.3f}")

    console.print(table)
    if comparison.best is not None:
        console.print(f"Best by average waiting time: [bold green]{comparison.best.algorithm}[/bold green]")


def _read_int(console: Console, prompt: str, lo: int, hi: int, default: Optional[int] = None) -> int:
    while True:
        if default is None:
            value = IntPrompt.ask(prompt, console=console)
        else:
            value = IntPrompt.ask(prompt, console=console, default=default)
        if lo <= value <= hi:
            return value
        console.print(f"[red]Enter a value in \\[{lo}, {hi}].[/red]")


def _enter_processes(console: Console) -> List[Process]:
    n = _read_int(console, f"Number of processes (1..{MAX_PROCESSES})", 1, MAX_PROCESSES)
    processes: List[Process] = []

    for pid in range(1, n + 1):
        console.print(f"\n[bold]--- Process P{pid} ---[/bold]")
        arrival = _read_int(console, "Arrival time (>=0)", 0, MAX_TIME)
        burst = _read_int(console, "Burst time (>0)", 1, MAX_TIME)
        priority = _read_int(console, "Priority (smaller = higher)", -MAX_TIME, MAX_TIME)
        processes.append(Process(pid, arrival_time=arrival, burst_time=burst, priority=priority))

    validate_processes(processes)
    return processes


def _interactive_menu(console: Console, default_quantum: int) -> None:
    processes: List[Process] = []
    options = [
        ("Enter / replace processes", None),
        ("Show current processes", None),
        ("Run FCFS", "fcfs"),
        ("Run SJF (Non-Preemptive)", "sjf"),
        ("Run Round Robin", "rr"),
        ("Run Priority (Non-Preemptive)", "priority"),
        ("Compare all (with RR quantum)", None),
    ]

    console.print("\n[bold cyan]CPU Scheduling Algorithm Simulator[/bold cyan]")
    if Confirm.ask("Load a demo dataset to get started?", console=console, default=True):
        processes = demo_workload()
        _print_processes(processes, console)

    while True:
        console.print("\n[bold]Menu:[/bold]")
        for idx, (label, _) in enumerate(options, start=1):
            console.print(f"  [yellow]{idx}[/yellow]. {label}")
        console.print("  [yellow]0[/yellow]. Exit")

        choice = _read_int(console, "Choose an option", 0, len(options))
        if choice == 0:
            console.print("Goodbye!")
            return

        if choice == 1:
            processes = _enter_processes(console)
            console.print("[green]Process list updated.[/green]")
            continue

        if not processes:
            console.print("[yellow]No processes loaded.[/yellow]")
            continue

        if choice == 2:
            _print_processes(processes, console)
            continue

        quantum = None
        if choice in {5, 7}:
            quantum = _read_int(console, "Time quantum (>0)", 1, MAX_TIME, default=default_quantum)

        if choice == 7:
            _print_comparison(compare_algorithms(processes, quantum=quantum), console)
            continue

        _print_result(run_algorithm(options[choice - 1][1], processes, quantum=quantum), console)


def _load_processes(args: argparse.Namespace) -> List[Process]:
    if args.demo:
        return demo_workload()
    return load_workload(Path(args.workload))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    console = Console()

    try:
        if args.command == "run":
            processes = _load_processes(args)
            quantum = validate_quantum(args.quantum) if args.algorithm == "rr" else None
            _print_result(run_algorithm(args.algorithm, processes, quantum=quantum), console)
            return 0

        if args.command == "compare":
            processes = _load_processes(args)
            _print_comparison(compare_algorithms(processes, quantum=validate_quantum(args.quantum)), console)
            return 0

        if args.command == "menu":
            _interactive_menu(console, validate_quantum(args.quantum))
            return 0
    except (WorkloadError, OSError) as exc:
        logger.debug("Rejected input", exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return EXIT_INVALID_INPUT

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
