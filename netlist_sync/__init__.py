"""Keep a local file of network prefixes in sync with remote lists."""

__version__ = "0.1.0"
