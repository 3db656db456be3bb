import dataclasses
import io

from distlab.labgob import LabDecoder, LabEncoder
from distlab.mrrpc import (
    ExampleArgs,
    ExampleReply,
    KeyValue,
    RpcArgs,
    RpcReply,
    coordinator_sock,
)


def _roundtrip(value):
    buf = io.BytesIO()
    LabEncoder(buf).encode(value)
    return LabDecoder(io.BytesIO(buf.getvalue())).decode()


def test_coordinator_sock_shape():
    prefix = "/var/tmp/824-mr-"
    sock = coordinator_sock()
    assert sock.startswith(prefix)
    assert sock[len(prefix):].isdigit()
    assert coordinator_sock() == sock


def test_request_defaults_mean_asking_for_work():
    assert RpcArgs().task_name == ""
    reply = RpcReply()
    assert reply.task_name == ""
    assert (reply.n_reduce, reply.phase, reply.index) == (0, 0, 0)


def test_reply_as_dict():
    reply = RpcReply(task_name="pg-1.txt", n_reduce=10, phase=1, index=4)
    assert dataclasses.asdict(reply) == {
        "task_name": "pg-1.txt",
        "n_reduce": 10,
        "phase": 1,
        "index": 4,
    }


def test_messages_survive_encoding():
    for message in [
        ExampleArgs(x=99),
        ExampleReply(y=100),
        RpcArgs(task_name="reduce_3"),
        RpcReply(task_name="pg-2.txt", n_reduce=10, phase=1, index=7),
        KeyValue("word", "1"),
    ]:
        assert _roundtrip(message) == message


def test_key_value_is_hashable_and_immutable():
    kv = KeyValue("a", "b")
    assert {kv: 1}[KeyValue("a", "b")] == 1
    try:
        kv.key = "c"
    except dataclasses.FrozenInstanceError:
        pass
    assert kv.key == "a"