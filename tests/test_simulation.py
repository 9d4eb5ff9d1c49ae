import random
import re
from pathlib import Path

import pytest

from metricflow.metrics import Counter, Gauge
from metricflow.simulation import (
    main,
    run,
    run_example,
    simulate_counter,
    simulate_gauge,
)

LINE_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3}( \"[^\"]+\" \S+)+$")
PAIR_RE = re.compile(r'"([^"]+)" (\S+)')


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _log_lines(workdir: Path) -> list[str]:
    return (workdir / "metrics.log").read_text(encoding="utf-8").splitlines()


def _records(path: Path) -> list[list[tuple[str, str]]]:
    lines = path.read_text(encoding="utf-8").splitlines()
    for line in lines:
        assert LINE_RE.match(line), line
    return [PAIR_RE.findall(line) for line in lines]


class _Broken:
    def update(self, value):
        raise RuntimeError("boom")

    def increment(self, value=1):
        raise RuntimeError("boom")


class _FlakyGauge(Gauge):
    """A gauge whose first update fails."""

    def __init__(self, name):
        super().__init__(name)
        self.calls = 0

    def update(self, value):
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("boom")
        super().update(value)


def test_simulate_gauge_stays_in_range_and_logs(workdir):
    gauge = Gauge("g")
    simulate_gauge(gauge, "CPU usage", 8.0, 5, 0, random.Random(1))
    assert 0.0 <= float(gauge.value_as_string()) <= 8.0
    info = [line for line in _log_lines(workdir) if "[INFO] CPU usage simulated:" in line]
    assert len(info) == 5


def test_simulate_counter_total_matches_logged_counts(workdir):
    counter = Counter("c")
    simulate_counter(counter, "HTTP requests", 150, 7, 0, random.Random(3))
    logged = [
        int(line.rsplit(" ", 1)[1])
        for line in _log_lines(workdir)
        if "[INFO] HTTP requests simulated:" in line
    ]
    assert len(logged) == 7
    assert all(0 <= n <= 150 for n in logged)
    assert int(counter.value_as_string()) == sum(logged)


def test_simulate_counter_with_zero_high_adds_nothing(workdir):
    counter = Counter("c")
    simulate_counter(counter, "Server errors", 0, 4, 0, random.Random(0))
    assert counter.value_as_string() == "0"


def test_simulate_same_seed_is_reproducible(workdir):
    first, second = Counter("a"), Counter("b")
    simulate_counter(first, "x", 100, 5, 0, random.Random(42))
    simulate_counter(second, "x", 100, 5, 0, random.Random(42))
    assert first.value_as_string() == second.value_as_string()


def test_simulate_errors_are_logged_not_raised(workdir):
    flaky = _FlakyGauge("g")
    simulate_gauge(flaky, "CPU usage", 8.0, 3, 0, random.Random(0))
    assert flaky.calls == 3
    assert 0.0 < float(flaky.value_as_string()) <= 8.0
    simulate_counter(_Broken(), "Server errors", 5, 2, 0, random.Random(0))
    errors = [line for line in _log_lines(workdir) if "[ERROR]" in line]
    assert len(errors) == 3
    assert all("boom" in line for line in errors)


def test_run_writes_snapshots(workdir, capsys):
    output = workdir / "out.txt"
    assert run(str(output), 3, 0, random.Random(0)) == 0
    records = _records(output)
    assert len(records) == 4
    names = ["CPU_usage", "Memory_usage_GB", "HTTP_requests_RPS", "Server_errors"]
    for record in records:
        assert [name for name, _ in record] == names
        values = dict(record)
        assert 0.0 <= float(values["CPU_usage"]) <= 8.0
        assert 0.0 <= float(values["Memory_usage_GB"]) <= 16.0
    assert sum(int(dict(r)["HTTP_requests_RPS"]) for r in records) <= 150 * 3
    assert sum(int(dict(r)["Server_errors"]) for r in records) <= 5 * 3
    out = capsys.readouterr().out
    assert "Metrics collected and written at second 3" in out
    assert f"Metrics collection completed, output written to {output}" in out


def test_run_reports_failure(workdir, capsys):
    output = workdir / "missing" / "out.txt"
    assert run(str(output), 1, 0) == 1
    assert "Error:" in capsys.readouterr().err
    assert any("[ERROR] Main execution failed" in line for line in _log_lines(workdir))


def test_run_example_writes_snapshots(workdir):
    output = workdir / "example.txt"
    run_example(str(output), 2, 0, random.Random(5))
    records = _records(output)
    assert len(records) == 3
    for record in records:
        assert [name for name, _ in record] == ["CPU", "HTTP_requests_RPS"]
        assert 0.0 <= float(dict(record)["CPU"]) <= 4.0
    assert any("Example completed" in line for line in _log_lines(workdir))


def test_run_example_missing_directory_raises(workdir):
    with pytest.raises(OSError):
        run_example(str(workdir / "nope" / "out.txt"), 1, 0)


def test_main_default_mode(workdir):
    output = workdir / "cli.txt"
    status = main(["--output", str(output), "--duration", "1", "--interval", "0", "--seed", "7"])
    assert status == 0
    assert len(_records(output)) == 2


def test_main_example_mode(workdir):
    output = workdir / "cli_example.txt"
    status = main(["--example", "--output", str(output), "--duration", "1", "--interval", "0"])
    assert status == 0
    records = _records(output)
    assert [name for name, _ in records[0]] == ["CPU", "HTTP_requests_RPS"]