from distlab.mrapps.indexer import map_fn, reduce_fn
from distlab.mrrpc import KeyValue


def test_map_emits_each_word_once():
    kvs = map_fn("doc1", "the cat and the hat")
    keys = [kv.key for kv in kvs]
    assert sorted(keys) == sorted({"the", "cat", "and", "hat"})
    assert len(keys) == len(set(keys))


def test_map_values_are_document_name():
    kvs = map_fn("pg-tom.txt", "one two, three")
    assert all(kv.value == "pg-tom.txt" for kv in kvs)
    assert KeyValue("two", "pg-tom.txt") in kvs


def test_map_without_words():
    assert map_fn("doc", "42 - 17") == []


def test_reduce_sorts_documents():
    assert reduce_fn("cat", ["d2", "d1"]) == "2 d1,d2"


def test_reduce_does_not_modify_input():
    values = ["z", "a", "m"]
    result = reduce_fn("w", values)
    assert values == ["z", "a", "m"]
    assert result.endswith("a,m,z")