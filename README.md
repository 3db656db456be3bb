# distlab

Building blocks for experimenting with distributed systems in Python.

## What is in the package

- **Linearizability checking** (`distlab.model`, `distlab.checker`).
  - Describe a system as a `Model`. A model has an `init` function and a `step(state, input, output)` function. The step function returns `(legal, new_state)`.
  - A model may also set `partition`, `partition_event`, `equal`, `describe_operation` and `describe_state`. When they are not set, the defaults are `no_partition`, `no_partition_event`, `shallow_equal`, `default_describe_operation` and `default_describe_state`.
  - A history is a list of `Operation(input, call, output, ret, client_id)` records. It can also be a list of `Event(kind, value, id, client_id)` records, where `kind` is an `EventKind`.
  - Check a history with `check_operations` or `check_events`, which return a bool. The `_timeout` variants return a `CheckResult`: `OK`, `ILLEGAL`, or `UNKNOWN` when the time limit ran out. The limit is given in seconds or as a `timedelta`; 0 means no limit. The `_verbose` variants also return a `LinearizationInfo`, which holds the longest partial linearizations found for each partition.
  - `distlab.bitset.Bitset` is the fixed-size bit set the checker uses to track linearized operations.
- **A key/value model** (`distlab.kvmodel`).
  - `KV_MODEL` partitions a history by key, with the keys in sorted order. It then checks the get/put/append operations on each key separately.
  - Inputs are `KvInput(op, key, value)`, where `op` is a `KvOp`. Outputs are `KvOutput(value)`.
  - The parts of the model are also available as functions: `kv_partition`, `kv_init`, `kv_step` and `kv_describe_operation`.
- **A checked encoder** (`distlab.labgob`).
  - `LabEncoder` writes values to a binary stream and `LabDecoder` reads them back. Values are written as length-prefixed, type-tagged JSON.
  - Supported values are `None`, bools, numbers, strings, bytes, lists, tuples, sets, dicts, enums and dataclasses.
  - Dataclass fields whose names start with an underscore are never transmitted. The encoder reports them as errors.
  - `LabDecoder.decode(into)` takes an optional `into`, which may be a type or an existing object. If it is an existing dataclass, list or dict, the decoded value is filled into it in place. If that target already holds non-default values, the decoder prints a warning.
  - `register` and `register_name` declare types. `error_count` reports how many problems have been found so far. `LabGobError` is raised for malformed streams.
- **MapReduce messages** (`distlab.mrrpc`).
  - `KeyValue` is a key/value pair produced by a map function.
  - The request and reply records are `RpcArgs`, `RpcReply`, `ExampleArgs` and `ExampleReply`.
  - `coordinator_sock()` returns a per-user socket path.
- **Sequential MapReduce** (`distlab.sequential`).
  - `run_sequential(mapf, reducef, filenames, output_path)` maps every input file and reduces each distinct key. It writes `"<key> <result>"` lines in key order.
- **Sample applications** (`distlab.mrapps`): `wc`, `indexer`, `crash`, `nocrash`, `early_exit`, `jobcount`, `mtiming` and `rtiming`.
  - Each one provides `map_fn` and `reduce_fn`.
  - `distlab.plugins.load_plugin(name)` returns the pair for a name such as `"wc"`. It also accepts a path such as `"apps/wc.so"`, of which only the file stem is used.
  - `available_plugins()` lists the names.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

Run a MapReduce job sequentially. Results go to `mr-out-0` in the current directory:

```
distlab-mrsequential wc pg-1.txt pg-2.txt
```

The command exits with status 1 in these cases:
- it is given fewer than two arguments;
- the application name is unknown;
- an input file cannot be read.

## Examples

Checking a key/value history:

```python
from distlab.checker import check_operations
from distlab.kvmodel import KV_MODEL, KvInput, KvOp, KvOutput
from distlab.model import Operation

history = [
    Operation(input=KvInput(KvOp.PUT, "x", "1"), call=0, output=KvOutput(), ret=10, client_id=0),
    Operation(input=KvInput(KvOp.GET, "x"), call=5, output=KvOutput("1"), ret=15, client_id=1),
]
assert check_operations(KV_MODEL, history)
```

Encoding and decoding:

```python
import io
from dataclasses import dataclass

from distlab.labgob import LabDecoder, LabEncoder, register

@dataclass
class Reply:
    Value: str = ""

register(Reply)
buffer = io.BytesIO()
LabEncoder(buffer).encode(Reply("hello"))
buffer.seek(0)
reply = LabDecoder(buffer).decode(Reply())
assert reply.Value == "hello"
```

## What the package does not do

- MapReduce jobs run only in a single process, through `run_sequential` or `distlab-mrsequential`.
- There is no process that hands out tasks, and no worker process that runs them. `distlab.mrrpc` defines only the message records and the socket path such processes would share.
- There is no simulated RPC network for testing replicated services.