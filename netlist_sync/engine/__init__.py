"""Engine components orchestrating fetch → parse → aggregate → write."""

from .aggregator import PrefixSet
from .fetcher import FetchResult, Fetcher
from .parser import NetworkPrefix, parse_prefix, parse_prefixes
from .writer import AtomicWriter, StdoutWriter, WriteOutcome, serialize

__all__ = [
    "AtomicWriter",
    "FetchResult",
    "Fetcher",
    "NetworkPrefix",
    "PrefixSet",
    "StdoutWriter",
    "WriteOutcome",
    "parse_prefix",
    "parse_prefixes",
    "serialize",
]
