"""Git smart-protocol building blocks: hashes, pkt-lines, packs and request parsing."""

__version__ = "0.1.0"