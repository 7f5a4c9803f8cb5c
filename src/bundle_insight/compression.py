"""Compressed-size measurement for artifact content.

gzip sizes come from zlib at maximum level with a gzip container
(``wbits=31``); brotli sizes come from the ``brotli`` bindings at maximum
quality.
"""

import zlib
from typing import Callable, Dict, Iterable, Union

import brotli

Content = Union[str, bytes]


def _to_bytes(content: Content) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8")
    return content


def gzip_size(content: Content) -> int:
    """Byte length of the gzip-compressed content."""
    compressor = zlib.compressobj(level=9, wbits=31)
    data = compressor.compress(_to_bytes(content)) + compressor.flush()
    return len(data)


def brotli_size(content: Content) -> int:
    """Byte length of the brotli-compressed content."""
    return len(brotli.compress(_to_bytes(content), quality=11))


COMPRESSORS: Dict[str, Callable[[Content], int]] = {
    "gzip": gzip_size,
    "brotli": brotli_size,
}


def measure(content: Content, algorithms: Iterable[str] = ("gzip", "brotli")) -> Dict[str, int]:
    """Compressed sizes for each requested algorithm.

    Raises:
        KeyError: If an algorithm has no registered compressor.
    """
    return {name: COMPRESSORS[name](content) for name in algorithms}
