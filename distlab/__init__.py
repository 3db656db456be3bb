"""Tools for distributed-systems experiments: linearizability checking, a checked encoder and sequential MapReduce."""

__version__ = "0.1.0"