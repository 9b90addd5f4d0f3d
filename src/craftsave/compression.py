from __future__ import annotations

import asyncio
import gzip
import logging
import zlib

from .errors import MalformedPayloadError

logger = logging.getLogger(__name__)

GZIP = "gzip"
DEFLATE_RAW = "deflate-raw"

_RAW_WBITS = -zlib.MAX_WBITS


def compress_buffer(data: bytes, fmt: str, compress: bool = True) -> bytes:
    """Run ``data`` through a gzip or raw-deflate transform.

    The whole input is fed and the whole output drained in one call; there is
    no chunked interface. Decompression failures raise MalformedPayloadError.
    """
    logger.debug("%s %s: %d bytes in", fmt, "compress" if compress else "decompress", len(data))
    if fmt == GZIP:
        if compress:
            # mtime=0 keeps the output a pure function of the input
            return gzip.compress(data, mtime=0)
        try:
            return gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as exc:
            raise MalformedPayloadError(f"Invalid gzip stream: {exc}") from exc

    if fmt == DEFLATE_RAW:
        if compress:
            compressor = zlib.compressobj(wbits=_RAW_WBITS)
            return compressor.compress(data) + compressor.flush()
        decompressor = zlib.decompressobj(wbits=_RAW_WBITS)
        try:
            out = decompressor.decompress(data) + decompressor.flush()
        except zlib.error as exc:
            raise MalformedPayloadError(f"Invalid deflate stream: {exc}") from exc
        if not decompressor.eof:
            raise MalformedPayloadError("Truncated deflate stream")
        return out

    raise ValueError(f"Unknown compression format: {fmt}")



async def compress_buffer_async(data: bytes, fmt: str, compress: bool = True) -> bytes:
    """Run :func:`compress_buffer` in a worker thread."""
    return await asyncio.to_thread(compress_buffer, data, fmt, compress)
