from distlab.mrapps.wc import map_fn, reduce_fn
from distlab.mrrpc import KeyValue


def test_map_splits_on_non_letters():
    kvs = map_fn("ignored.txt", "Hello, world! hello")
    assert kvs == [KeyValue("Hello", "1"), KeyValue("world", "1"), KeyValue("hello", "1")]


def test_map_treats_digits_and_underscores_as_separators():
    kvs = map_fn("f", "abc123def_ghi")
    assert [kv.key for kv in kvs] == ["abc", "def", "ghi"]


def test_map_keeps_unicode_letters():
    kvs = map_fn("f", "naïve café—日本")
    assert [kv.key for kv in kvs] == ["naïve", "café", "日本"]


def test_map_empty_and_letterless():
    assert map_fn("f", "") == []
    assert map_fn("f", "123 !!! ...") == []


def test_map_ignores_filename():
    assert map_fn("a.txt", "x y") == map_fn("b.txt", "x y")


def test_every_value_is_one():
    kvs = map_fn("f", "the quick brown fox jumps over the lazy dog")
    assert {kv.value for kv in kvs} == {"1"}
    assert len(kvs) == 9


def test_reduce_counts_values():
    assert reduce_fn("the", ["1", "1", "1"]) == "3"
    assert reduce_fn("dog", ["1"]) == "1"