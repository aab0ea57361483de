"""
sink/
-----
Mutable visualization state.  Public API:

    from sink import Sink, SinkSnapshot
"""

from sink.sink import Sink, SinkSnapshot, parse_custom_array

__all__ = [
    "Sink",
    "SinkSnapshot",
    "parse_custom_array",
]
