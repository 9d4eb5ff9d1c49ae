"""Thread-safe metrics, a queue of snapshots and a background file writer."""

from __future__ import annotations

import os
import threading
from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime
from pathlib import Path
from typing import Sequence

Snapshot = list[tuple[str, str]]


class Metric(ABC):
    """Common interface of all metrics."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier of the metric."""

    @abstractmethod
    def value_as_string(self) -> str:
        """Current value rendered as text."""

    @abstractmethod
    def reset(self) -> None:
        """Return the value to its initial state."""


class Gauge(Metric):
    """Holds the latest floating-point reading."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._value = 0.0
        self._lock = threading.Lock()

    def update(self, value: float) -> None:
        with self._lock:
            self._value = float(value)

    @property
    def name(self) -> str:
        return self._name

    def value_as_string(self) -> str:
        with self._lock:
            return f"{self._value:.2f}"

    def reset(self) -> None:
        with self._lock:
            self._value = 0.0


class Counter(Metric):
    """Accumulates an integer count."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._value = 0
        self._lock = threading.Lock()

    def increment(self, value: int = 1) -> None:
        with self._lock:
            self._value += int(value)

    @property
    def name(self) -> str:
        return self._name

    def value_as_string(self) -> str:
        with self._lock:
            return str(self._value)

    def reset(self) -> None:
        with self._lock:
            self._value = 0


class MetricsQueue:
    """FIFO of metric snapshots shared between threads, with a stop signal."""

    def __init__(self) -> None:
        self._items: deque[Snapshot] = deque()
        self._cond = threading.Condition()
        self._stopped = False

    def push(self, data: Sequence[tuple[str, str]]) -> None:
        with self._cond:
            self._items.append(list(data))
            self._cond.notify()

    def try_pop(self) -> Snapshot | None:
        """Return the oldest snapshot, or None if the queue is empty."""
        with self._cond:
            return self._items.popleft() if self._items else None

    def wait_and_pop(self) -> Snapshot | None:
        """Block until a snapshot is available; None once stopped and drained."""
        with self._cond:
            self._cond.wait_for(lambda: self._items or self._stopped)
            return self._items.popleft() if self._items else None

    def stop(self) -> None:
        with self._cond:
            self._stopped = True
            self._cond.notify_all()


def _timestamp() -> str:
    now = datetime.now()
    return f"{now.strftime('%Y-%m-%d %H:%M:%S')}.{now.microsecond // 1000:03d}"


class MetricsWriter:
    """Appends queued snapshots to a file from a background thread."""

    def __init__(self, filename: str | os.PathLike[str]) -> None:
        self.filename = Path(filename)
        self._file = self.filename.open("a", encoding="utf-8")
        self._queue = MetricsQueue()
        self._closed = False
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def write(self, metrics: Sequence[tuple[str, str]]) -> None:
        """Queue one snapshot of (name, value) pairs for writing."""
        self._queue.push(metrics)

    def _run(self) -> None:
        try:
            while (metrics := self._queue.wait_and_pop()) is not None:
                if not metrics:
                    continue
                fields = "".join(f' "{name}" {value}' for name, value in metrics)
                self._file.write(f"{_timestamp()}{fields}\n")
                self._file.flush()
        finally:
            self._file.close()

    def close(self) -> None:
        """Write out everything queued, then stop the writer thread."""
        if self._closed:
            return
        self._closed = True
        self._queue.stop()
        self._thread.join()

    def __enter__(self) -> MetricsWriter:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class MetricsCollector:
    """Snapshots registered metrics, resets them and hands them to a writer."""

    def __init__(self, filename: str | os.PathLike[str]) -> None:
        self._metrics: list[Metric] = []
        self._lock = threading.Lock()
        self._writer = MetricsWriter(filename)

    def add_metric(self, metric: Metric) -> None:
        with self._lock:
            self._metrics.append(metric)

    def collect_and_write(self) -> None:
        with self._lock:
            snapshot = []
            for metric in self._metrics:
                snapshot.append((metric.name, metric.value_as_string()))
                metric.reset()
        self._writer.write(snapshot)

    def close(self) -> None:
        self._writer.close()

    def __enter__(self) -> MetricsCollector:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()