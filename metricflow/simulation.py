"""Simulated load generators that feed metrics into a collector."""

from __future__ import annotations

import argparse
import random
import sys
import threading
import time
from collections.abc import Sequence
from typing import Protocol

from metricflow.logger import get_logger
from metricflow.metrics import Counter, Gauge, MetricsCollector

DEFAULT_OUTPUT = "metrics_output.txt"
DEFAULT_DURATION = 6
EXAMPLE_DURATION = 5


class _Updatable(Protocol):
    def update(self, value: float) -> None: ...


class _Incrementable(Protocol):
    def increment(self, value: int = 1) -> None: ...


def simulate_gauge(
    metric: _Updatable,
    label: str,
    high: float,
    duration: int,
    interval: float = 1.0,
    rng: random.Random | None = None,
) -> None:
    """Set ``metric`` to a random reading in [0, high] once per interval."""
    rng = rng or random.Random()
    logger = get_logger()
    for _ in range(duration):
        try:
            reading = rng.uniform(0.0, high)
            metric.update(reading)
            logger.log_info(f"{label} simulated: {reading:.6f}")
            time.sleep(interval)
        except Exception as exc:  # keep simulating after a failed step
            logger.log_error(f"Error simulating {label}: {exc}")


def simulate_counter(
    metric: _Incrementable,
    label: str,
    high: int,
    duration: int,
    interval: float = 1.0,
    rng: random.Random | None = None,
) -> None:
    """Add a random count in [0, high] to ``metric`` once per interval."""
    rng = rng or random.Random()
    logger = get_logger()
    for _ in range(duration):
        try:
            count = rng.randint(0, high)
            metric.increment(count)
            logger.log_info(f"{label} simulated: {count}")
            time.sleep(interval)
        except Exception as exc:  # keep simulating after a failed step
            logger.log_error(f"Error simulating {label}: {exc}")


def _collect(
    collector: MetricsCollector,
    workers: list[threading.Thread],
    duration: int,
    interval: float,
    announce: bool,
) -> None:
    for worker in workers:
        worker.start()
    for second in range(1, duration + 1):
        collector.collect_and_write()
        if announce:
            print(f"Metrics collected and written at second {second}")
        time.sleep(interval)
    for worker in workers:
        worker.join()
    collector.collect_and_write()


def _child_rngs(rng: random.Random | None, count: int) -> list[random.Random]:
    parent = rng or random.Random()
    return [random.Random(parent.random()) for _ in range(count)]


def run(
    output: str = DEFAULT_OUTPUT,
    duration: int = DEFAULT_DURATION,
    interval: float = 1.0,
    rng: random.Random | None = None,
) -> int:
    """Simulate CPU, memory, HTTP and error metrics; return an exit status."""
    logger = get_logger()
    try:
        with MetricsCollector(output) as collector:
            logger.log_info(f"MetricsCollector initialized with file: {output}")

            cpu = Gauge("CPU_usage")
            memory = Gauge("Memory_usage_GB")
            http = Counter("HTTP_requests_RPS")
            errors = Counter("Server_errors")
            for metric in (cpu, memory, http, errors):
                collector.add_metric(metric)
            logger.log_info("All metrics added to collector")

            cpu_rng, memory_rng, http_rng, errors_rng = _child_rngs(rng, 4)
            workers = [
                threading.Thread(
                    target=simulate_gauge,
                    args=(cpu, "CPU usage", 8.0, duration, interval, cpu_rng),
                ),
                threading.Thread(
                    target=simulate_gauge,
                    args=(memory, "Memory usage", 16.0, duration, interval, memory_rng),
                ),
                threading.Thread(
                    target=simulate_counter,
                    args=(http, "HTTP requests", 150, duration, interval, http_rng),
                ),
                threading.Thread(
                    target=simulate_counter,
                    args=(errors, "Server errors", 5, duration, interval, errors_rng),
                ),
            ]
            _collect(collector, workers, duration, interval, announce=True)
            logger.log_info("Final metrics collection completed")
        print(f"Metrics collection completed, output written to {output}")
        return 0
    except Exception as exc:
        logger.log_error(f"Main execution failed: {exc}")
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def run_example(
    output: str = DEFAULT_OUTPUT,
    duration: int = EXAMPLE_DURATION,
    interval: float = 1.0,
    rng: random.Random | None = None,
) -> None:
    """Smaller demonstration with one CPU gauge and one request counter."""
    with MetricsCollector(output) as collector:
        cpu = Gauge("CPU")
        http = Counter("HTTP_requests_RPS")
        collector.add_metric(cpu)
        collector.add_metric(http)

        cpu_rng, http_rng = _child_rngs(rng, 2)
        workers = [
            threading.Thread(
                target=simulate_gauge,
                args=(cpu, "CPU usage", 4.0, duration, interval, cpu_rng),
            ),
            threading.Thread(
                target=simulate_counter,
                args=(http, "HTTP requests", 100, duration, interval, http_rng),
            ),
        ]
        _collect(collector, workers, duration, interval, announce=False)
    get_logger().log_info(f"Example completed, metrics written to {output}")


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        prog="metricflow", description="Simulate load and record metrics to a file."
    )
    parser.add_argument("--example", action="store_true", help="run the small example")
    parser.add_argument("--output", default=DEFAULT_OUTPUT, help="metrics output file")
    parser.add_argument("--duration", type=int, default=None, help="seconds to simulate")
    parser.add_argument("--interval", type=float, default=1.0, help="seconds per step")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    args = parser.parse_args(argv)

    rng = random.Random(args.seed) if args.seed is not None else None
    if args.example:
        duration = EXAMPLE_DURATION if args.duration is None else args.duration
        run_example(args.output, duration, args.interval, rng)
        return 0
    duration = DEFAULT_DURATION if args.duration is None else args.duration
    return run(args.output, duration, args.interval, rng)


if __name__ == "__main__":
    sys.exit(main())