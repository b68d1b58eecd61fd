"""
Error taxonomy for HC1 certificate decoding.

Every failure raised by the decoder is a GreenPassError subclass. The
``kind`` attribute is the stable identifier used by the HTTP service in its
``{"error": kind, "details": message}`` responses.
"""

from typing import Any, Dict


class GreenPassError(Exception):
    """Base class for every decode failure."""

    kind = "decode_error"


class MissingPrefixError(GreenPassError):
    kind = "invalid_format"

    def __init__(self, received: str = ""):
        self.received = received
        super().__init__("missing initial HC string from input")


class InvalidBase45Error(GreenPassError):
    kind = "base45_decode_failed"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"invalid base45 in input: {reason}")


class GreenPassIOError(GreenPassError):
    kind = "io_error"


class DecompressionError(GreenPassIOError):
    kind = "zlib_decompress_failed"


class MalformedCBORError(GreenPassError):
    kind = "malformed_cbor"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"failed to parse a payload as CBOR: {reason}")


class MalformedCWTError(GreenPassError):
    kind = "cose_decode_failed"

    def __init__(self, length: Any = None):
        self.length = length
        super().__init__("the root structure for the certificate is malformed")


class InvalidFormatError(GreenPassError):
    kind = "invalid_format_for_key"

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"invalid format for `{key}`")


class MissingKeyError(GreenPassError):
    kind = "missing_key"

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"missing key in document: {key}")


class MalformedStringMapError(GreenPassError):
    kind = "malformed_string_map"

    def __init__(self, key: Any = None):
        self.key = key
        super().__init__("found unexpected non-string keys in map")


class MalformedDateError(GreenPassError):
    kind = "malformed_date"

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"malformed date: {raw}")


class SpuriousDataError(GreenPassError):
    kind = "spurious_data"

    def __init__(self, leftover: Dict[str, Any]):
        self.leftover = dict(leftover)
        super().__init__(f"spurious leftover data detected: {self.leftover!r}")
