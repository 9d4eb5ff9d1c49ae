# metricflow

A small metrics library with a load simulator built on it.

- `metricflow.metrics` has the thread-safe `Gauge` and `Counter` metrics, a
  `MetricsQueue` of snapshots, a `MetricsWriter` that appends snapshots to a
  file from a background thread, and a `MetricsCollector` that ties them
  together.
- `metricflow.logger` has a `Logger` that appends `[INFO]` and `[ERROR]`
  lines to a file.
- `metricflow.simulation` runs worker threads that feed random values into
  metrics. It is also the `metricflow` command.

It has no dependencies outside the standard library. It needs Python 3.10 or
later.

## Installation

```
pip install .
```

## Metrics

```python
from metricflow.metrics import Counter, Gauge, MetricsCollector

cpu = Gauge("CPU_usage")
requests = Counter("HTTP_requests_RPS")

with MetricsCollector("metrics_output.txt") as collector:
    collector.add_metric(cpu)
    collector.add_metric(requests)

    cpu.update(3.14159)
    requests.increment(42)
    collector.collect_and_write()
```

- `Gauge.update(value)` stores the latest floating-point reading.
  `value_as_string()` renders it with two decimal places, for example `"3.14"`.
- `Counter.increment(value=1)` adds to an integer count. `value_as_string()`
  renders it as an integer.
- Both have a `name` property and `reset()`, which sets the value back to
  zero. Both derive from the abstract `Metric`.

`MetricsCollector.collect_and_write()` reads the name and value of every
registered metric in the order the metrics were added. It resets each metric
and queues the snapshot for the writer. The writer appends one line per
snapshot to the output file. Existing content is kept. The line starts with a
local timestamp with millisecond precision, and each metric follows as its
quoted name and its value:

```
2024-01-01 12:00:00.123 "CPU_usage" 3.14 "HTTP_requests_RPS" 42
```

The writer does not write empty snapshots, so a collector with no metrics
produces no lines. The output file is opened when the collector (or
`MetricsWriter`) is created, so an unusable path raises `OSError` at that
point. `close()`, or leaving the `with` block, writes out everything still
queued and then stops the background thread. Calling `close()` more than once
is harmless.

`MetricsWriter` can be used on its own. `write(metrics)` takes any sequence
of `(name, value)` string pairs. `MetricsQueue` is the thread-safe FIFO the
writer is built on, and offers `push`, `try_pop`, `wait_and_pop` and `stop`.

## Logging

`metricflow.logger.get_logger()` returns one shared `Logger` for the whole
process. It writes to `metrics.log` in the current directory. To write to a
different file, create your own `Logger(filename)`. `log_info(message)` and
`log_error(message)` append lines of this form:

```
2024-01-01 12:00:00 [INFO] message
```

If the log file cannot be opened, the message is dropped silently.

## Command line

```
metricflow
```

This starts four worker threads. Once per step they set a CPU gauge to a
random value in [0, 8], set a memory gauge to a random value in [0, 16],
add between 0 and 150 HTTP requests, and add between 0 and 5 server errors.
Each step is also logged to `metrics.log`. The collector writes a snapshot
once per step and prints `Metrics collected and written at second N`. After
the workers finish it writes one final snapshot. The exit status is 0 on
success. On failure it is 1, and the error is printed to standard error and
logged.

Options:

- `--output FILE`: metrics output file (default `metrics_output.txt`)
- `--duration N`: number of steps (default 6, or 5 with `--example`)
- `--interval SECONDS`: length of each step (default 1.0)
- `--seed N`: seed the random values so that runs can be repeated
- `--example`: run a smaller, quieter demonstration with one `CPU` gauge in
  [0, 4] and one request counter in [0, 100]

The same runs are available from Python as `metricflow.simulation.run(...)`
and `metricflow.simulation.run_example(...)`. `simulate_gauge` and
`simulate_counter` drive a single metric.

## What it does not do

The package records metrics only by appending lines to a local file. It does
not serve or export them over a network, and it does not read or query files
it has written. The command does not measure the machine it runs on. Every
value it records is randomly generated.