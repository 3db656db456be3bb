from unittest.mock import patch

from distlab.mrapps.early_exit import map_fn, reduce_fn
from distlab.mrrpc import KeyValue


def test_map_emits_filename_once():
    assert map_fn("pg-grimm.txt", "lots of words here") == [KeyValue("pg-grimm.txt", "1")]


def test_reduce_sleeps_for_slow_keys():
    with patch("time.sleep") as sleep:
        result = reduce_fn("pg-tom_sawyer.txt", ["1", "1"])
    sleep.assert_called_once_with(3)
    assert result == "2"


def test_reduce_sleeps_for_sherlock():
    with patch("time.sleep") as sleep:
        result = reduce_fn("pg-sherlock_holmes.txt", ["1"])
    sleep.assert_called_once_with(3)
    assert result == "1"


def test_reduce_fast_for_other_keys():
    with patch("time.sleep") as sleep:
        result = reduce_fn("pg-frankenstein.txt", ["1"])
    sleep.assert_not_called()
    assert result == "1"