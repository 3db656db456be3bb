from distlab.mrapps import crash, nocrash
from distlab.mrrpc import KeyValue


def test_map_keys_and_fixed_values():
    kvs = nocrash.map_fn("in.txt", "hello")
    assert [kv.key for kv in kvs] == ["a", "b", "c", "d"]
    assert kvs[0] == KeyValue("a", "in.txt")
    assert kvs[3] == KeyValue("d", "xyzzy")


def test_map_lengths():
    kvs = nocrash.map_fn("in.txt", "hello")
    assert kvs[1].value == "6"
    assert kvs[2].value == "5"


def test_reduce_sorts_and_joins():
    values = ["pg-b", "pg-a"]
    assert nocrash.reduce_fn("a", values) == "pg-a pg-b"
    assert values == ["pg-b", "pg-a"]


def test_reduce_empty():
    assert nocrash.reduce_fn("a", []) == ""


def test_matches_crash_reduce_format():
    values = ["3", "1", "2"]
    assert nocrash.reduce_fn("k", values).split(" ") == sorted(values)
    assert len(nocrash.map_fn("x", "y")) == 4
    assert crash.reduce_fn.__name__ == nocrash.reduce_fn.__name__