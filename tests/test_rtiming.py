import os
from unittest.mock import patch

import pytest

from distlab.mrapps import rtiming
from distlab.mrrpc import KeyValue


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_map_emits_ten_keys_of_one():
    result = rtiming.map_fn("any.txt", "ignored")
    assert [kv.key for kv in result] == list("abcdefghij")
    assert all(kv == KeyValue(kv.key, "1") for kv in result)


def test_map_ignores_input():
    assert rtiming.map_fn("x", "y") == rtiming.map_fn("other", "content")


def test_reduce_reports_parallelism(workdir):
    with patch("time.sleep") as sleep:
        assert rtiming.reduce_fn("a", ["1", "1"]) == "1"
    sleep.assert_called_once_with(1)
    assert list(workdir.iterdir()) == []


def test_reduce_ignores_map_phase_markers(workdir):
    (workdir / f"mr-worker-map-{os.getpid()}").write_text("x")
    with patch("time.sleep"):
        assert rtiming.reduce_fn("b", ["1"]) == "1"
    assert [p.name for p in workdir.iterdir()] == [f"mr-worker-map-{os.getpid()}"]


def test_nparallel_with_reduce_phase(workdir):
    with patch("time.sleep"):
        assert rtiming.nparallel("reduce") == 1