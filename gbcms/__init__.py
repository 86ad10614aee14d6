"""Building blocks for a GB/T 28181 video platform: SDP, MANSCDP messages, registries and Redis helpers."""

__version__ = "0.1.0"