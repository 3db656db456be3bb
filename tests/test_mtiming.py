import os
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from distlab.mrapps import mtiming
from distlab.mrrpc import KeyValue


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_nparallel_counts_only_this_worker(workdir):
    with patch("time.sleep") as sleep:
        assert mtiming.nparallel("map") == 1
    sleep.assert_called_once_with(1)


def test_nparallel_removes_its_marker(workdir):
    with patch("time.sleep"):
        count = mtiming.nparallel("map")
    assert count == 1
    assert list(workdir.iterdir()) == []


def test_nparallel_ignores_other_phases_and_junk(workdir):
    (workdir / f"mr-worker-reduce-{os.getpid()}").write_text("x")
    (workdir / "mr-worker-map-abc").write_text("x")
    (workdir / "unrelated").write_text("x")
    with patch("time.sleep"):
        assert mtiming.nparallel("map") == 1
    remaining = sorted(p.name for p in workdir.iterdir())
    assert remaining == sorted([f"mr-worker-reduce-{os.getpid()}", "mr-worker-map-abc", "unrelated"])


def test_map_reports_time_and_parallelism(workdir):
    before = time.time()
    with patch("time.sleep"):
        result = mtiming.map_fn("input.txt", "contents")
    pid = os.getpid()
    assert [kv.key for kv in result] == [f"times-{pid}", f"parallel-{pid}"]
    assert abs(float(result[0].value) - before) < 5
    assert result[1] == KeyValue(f"parallel-{pid}", "1")
    assert not any(Path(".").iterdir())


def test_reduce_sorts_without_mutating():
    values = ["3.5", "1.0", "2.2"]
    assert mtiming.reduce_fn("times-1", values) == "1.0 2.2 3.5"
    assert values == ["3.5", "1.0", "2.2"]