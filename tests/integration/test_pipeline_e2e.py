"""
End-to-end tests of the deletion pipeline.

Real worker threads, dispatcher, monitor and CSV sink run against an
in-memory backend; only the object store is faked.
"""

import csv
import time
from pathlib import Path

import pytest

from application.orchestrator import BulkDeleteOrchestrator
from infrastructure.config import RunConfig
from infrastructure.storage import CsvFailureSink
from domain.exceptions import InputFileError
from shared.metrics import MetricsCollector


def make_config(tmp_path, input_path, **overrides):
    values = dict(
        input_path=Path(input_path),
        endpoint="http://localhost:9000",
        output_path=tmp_path / "failed.csv",
        workers=3,
        progress_pivot=1,
        batch_size=0,
        prefix="urn:oid:",
        idle_interval=0.1,
        ramp_up_delay=0,
    )
    values.update(overrides)
    return RunConfig(**values)


def run(config, backend):
    sink = CsvFailureSink(config.output_path)
    summary = BulkDeleteOrchestrator(config, backend, sink).run()
    return summary, sink


def read_rows(path):
    with open(path, newline='') as f:
        return list(csv.reader(f))


def test_single_mode_all_succeed(tmp_path, write_input, sample_lines, backend):
    config = make_config(tmp_path, write_input(sample_lines))

    summary, sink = run(config, backend)

    assert len(backend.single_calls) == 3
    assert backend.batch_calls == []
    assert summary.deleted == 3
    assert summary.failed == 0
    assert sink.closed
    assert read_rows(config.output_path) == []


def test_batch_mode_groups_jobs(tmp_path, write_input, sample_lines, backend):
    config = make_config(tmp_path, write_input(sample_lines), batch_size=2)

    summary, _ = run(config, backend)

    assert backend.single_calls == []
    assert sorted(backend.batch_calls) == [
        ("bA", ["urn:oid:p1", "urn:oid:p2"]),
        ("bA", ["urn:oid:p3"]),
    ]
    assert summary.deleted == 3


def test_single_failure_lands_in_sink(tmp_path, write_input, sample_lines, make_backend):
    backend = make_backend(fail_keys={"urn:oid:p2"})
    config = make_config(tmp_path, write_input(sample_lines))

    summary, _ = run(config, backend)

    assert summary.deleted == 2
    assert summary.failed == 1
    assert read_rows(config.output_path) == [["bA", "id2", "urn:oid:p2", "n2"]]


def test_failure_file_replays_with_empty_prefix(tmp_path, write_input, sample_lines, make_backend):
    first = make_config(tmp_path, write_input(sample_lines))
    run(first, make_backend(fail_keys={"urn:oid:p2"}))

    backend = make_backend()
    replay = make_config(
        tmp_path, first.output_path, prefix="", output_path=tmp_path / "failed-again.csv"
    )
    summary, _ = run(replay, backend)

    assert backend.single_calls == [("bA", "urn:oid:p2")]
    assert summary.deleted == 1
    assert read_rows(replay.output_path) == []


def test_batch_failure_lands_in_sink(tmp_path, write_input, sample_lines, make_backend):
    backend = make_backend(fail_batches=True)
    config = make_config(tmp_path, write_input(sample_lines), batch_size=2)

    summary, _ = run(config, backend)

    assert summary.deleted == 0
    assert summary.failed == 3
    assert sorted(read_rows(config.output_path)) == [
        ["bA", "id1", "urn:oid:p1", "n1"],
        ["bA", "id2", "urn:oid:p2", "n2"],
        ["bA", "id3", "urn:oid:p3", "n3"],
    ]


def test_malformed_lines_are_skipped(tmp_path, write_input, backend):
    lines = ["bA,id1,p1,n1", "not enough", "bA,id2", "bA,id3,p3,n3,extra"]
    config = make_config(tmp_path, write_input(lines))

    summary, _ = run(config, backend)

    assert summary.deleted == 2
    assert summary.skipped == 2


def test_many_jobs_counted_exactly(tmp_path, write_input, backend):
    lines = [f"bucket,id{i},p{i},n{i}" for i in range(500)]
    config = make_config(tmp_path, write_input(lines), workers=8, progress_pivot=100)

    summary, _ = run(config, backend)

    assert summary.deleted == 500
    assert len(set(key for _, key in backend.single_calls)) == 500


def test_slow_request_does_not_end_run_early(tmp_path, write_input, make_backend):
    class SlowBackend(make_backend):
        def delete_object(self, bucket, key):
            if key.endswith("p2"):
                time.sleep(0.5)
            return super().delete_object(bucket, key)

    backend = SlowBackend()
    config = make_config(tmp_path, write_input(["bA,id1,p1,n1", "bA,id2,p2,n2"]), idle_interval=0.1)

    summary, _ = run(config, backend)

    assert summary.deleted == 2


def test_missing_input_file_closes_sink(tmp_path, backend):
    config = make_config(tmp_path, tmp_path / "missing.csv")
    sink = CsvFailureSink(config.output_path)

    with pytest.raises(InputFileError):
        BulkDeleteOrchestrator(config, backend, sink).run()

    assert sink.closed
    assert backend.single_calls == []


def test_lines_can_be_injected(tmp_path, sample_lines, backend):
    config = make_config(tmp_path, tmp_path / "unused.csv")
    sink = CsvFailureSink(config.output_path)
    metrics = MetricsCollector()

    summary = BulkDeleteOrchestrator(config, backend, sink, metrics=metrics, lines=sample_lines).run()

    assert summary.deleted == 3
    assert metrics.get_counter('deleted') == 3
