"""
Transport layer of an HC1 string: prefix, Base45 and zlib.
"""

import logging
import zlib
from typing import Optional

import base45

from . import config
from .errors import DecompressionError, InvalidBase45Error, MissingPrefixError

logger = logging.getLogger(__name__)


def strip_prefix(text: str) -> str:
    """Check for the ``HC1:`` marker and return the trimmed Base45 body."""
    if not text.startswith(config.HC1_PREFIX):
        received = text[:10] if len(text) > 10 else text
        logger.warning(f"[hcert] Missing {config.HC1_PREFIX} prefix, received {received!r}")
        raise MissingPrefixError(received)

    return text[len(config.HC1_PREFIX):].strip()


def b45_decode(text: str) -> bytes:
    try:
        data = base45.b45decode(text)
    except (ValueError, KeyError, TypeError) as e:
        logger.warning(f"[hcert] Base45 decode failed: {e}")
        raise InvalidBase45Error(str(e)) from e

    logger.debug(f"[hcert] Base45 decoded bytes={len(data)} preview={data[:20]!r}")
    return data


def decompress(data: bytes, max_size: Optional[int] = None) -> bytes:
    """
    Inflate a zlib stream, refusing to produce more than ``max_size`` bytes.

    A truncated stream is an error, not a partial result.
    """
    if max_size is None:
        max_size = config.MAX_DECOMPRESSED_BYTES

    inflater = zlib.decompressobj()
    try:
        # one byte of headroom tells "exactly max_size" apart from "more"
        out = inflater.decompress(data, max_size + 1)
    except zlib.error as e:
        logger.warning(f"[hcert] zlib decompress failed: {e}")
        raise DecompressionError(f"invalid zlib stream: {e}") from e

    if len(out) > max_size:
        logger.warning(f"[hcert] zlib output exceeds {max_size} bytes")
        raise DecompressionError(f"decompressed payload exceeds {max_size} bytes")

    if not inflater.eof:
        logger.warning("[hcert] zlib stream is truncated")
        raise DecompressionError("truncated zlib stream")

    logger.debug(f"[hcert] zlib decompressed bytes={len(out)} preview={out[:20]!r}")
    return out


def decode_transport(text: str) -> bytes:
    """Turn an ``HC1:`` string into the raw CBOR bytes of the COSE message."""
    return decompress(b45_decode(strip_prefix(text)))
