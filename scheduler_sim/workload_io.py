from __future__ import annotations

import csv
import json
import logging
import re
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from .models import Process

logger = logging.getLogger(__name__)

MAX_PROCESSES = 100
MAX_TIME = 1_000_000

_INT_PATTERN = re.compile(r"[+-]?\d+")


class WorkloadError(ValueError):
    """Raised when a workload or quantum fails validation."""


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a validated list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise WorkloadError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    validate_processes(processes)
    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise WorkloadError(f"Invalid JSON in {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise WorkloadError(f"{path} is not valid UTF-8: {exc}") from exc

    if not isinstance(raw, list):
        raise WorkloadError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry, index) for index, entry in enumerate(raw, start=1)]


def _load_csv(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        try:
            return [_process_from_mapping(row, index) for index, row in enumerate(reader, start=1)]
        except UnicodeDecodeError as exc:
            raise WorkloadError(f"{path} is not valid UTF-8: {exc}") from exc


def _process_from_mapping(mapping, index: int) -> Process:
    """
    Build a Process from one record. A missing ``pid`` defaults to the
    record's 1-based position in the file; a missing priority to 0.
    """
    if not isinstance(mapping, Mapping):
        raise WorkloadError(f"Invalid process entry: {mapping!r}")

    try:
        pid = _optional_int(mapping.get("pid"))
        arrival_time = _parse_int(mapping["arrival_time"])
        burst_time = _parse_int(mapping["burst_time"])
        priority = _optional_int(mapping.get("priority"))
    except (KeyError, TypeError, ValueError) as exc:
        raise WorkloadError(f"Invalid process entry: {mapping!r}") from exc

    return Process(
        pid=index if pid is None else pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=0 if priority is None else priority,
    )


def _parse_int(value) -> int:
    """
    Accept JSON integers and CSV strings of digits only; floats and booleans
    are rejected rather than truncated.
    """
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_PATTERN.fullmatch(value.strip()):
        return int(value)
    raise ValueError(f"expected an integer, got {value!r}")


def _optional_int(value) -> Optional[int]:
    return _parse_int(value) if value not in (None, "") else None


def validate_processes(processes: Iterable[Process]) -> None:
    """
    Reject workloads the engines are not meant to see: wrong process count,
    duplicate or non-positive PIDs, negative arrivals, non-positive bursts.
    """
    processes = list(processes)
    if not 1 <= len(processes) <= MAX_PROCESSES:
        raise WorkloadError(f"Workload must contain between 1 and {MAX_PROCESSES} processes, got {len(processes)}")

    seen: set[int] = set()
    for p in processes:
        if p.pid <= 0:
            raise WorkloadError(f"PID must be a positive integer, got {p.pid}")
        if p.pid in seen:
            raise WorkloadError(f"Duplicate PID {p.pid}")
        seen.add(p.pid)

        if not 0 <= p.arrival_time <= MAX_TIME:
            raise WorkloadError(f"P{p.pid}: arrival time must be in [0, {MAX_TIME}], got {p.arrival_time}")
        if not 1 <= p.burst_time <= MAX_TIME:
            raise WorkloadError(f"P{p.pid}: burst time must be in [1, {MAX_TIME}], got {p.burst_time}")


def validate_quantum(quantum: int) -> int:
    if not 1 <= quantum <= MAX_TIME:
        raise WorkloadError(f"Time quantum must be in [1, {MAX_TIME}], got {quantum}")
    return quantum


def demo_workload() -> List[Process]:
    """
    A small mixed workload with staggered arrivals.
    """
    return [
        Process(1, arrival_time=0, burst_time=7, priority=3),
        Process(2, arrival_time=2, burst_time=4, priority=1),
        Process(3, arrival_time=4, burst_time=1, priority=4),
        Process(4, arrival_time=5, burst_time=4, priority=2),
        Process(5, arrival_time=6, burst_time=6, priority=5),
    ]
