"""
Decoder for EU Digital COVID Certificates (HC1 QR code payloads).

No signature validation is performed.
"""

from .config import __version__
from .decoder import parse
from .errors import (
    DecompressionError,
    GreenPassError,
    GreenPassIOError,
    InvalidBase45Error,
    InvalidFormatError,
    MalformedCBORError,
    MalformedCWTError,
    MalformedDateError,
    MalformedStringMapError,
    MissingKeyError,
    MissingPrefixError,
    SpuriousDataError,
)
from .models import (
    NAAT,
    RAT,
    CertInfo,
    GreenPass,
    HealthCert,
    Recovery,
    Signature,
    Test,
    TestName,
    Vaccine,
)

__all__ = [
    "__version__",
    "parse",
    "CertInfo",
    "GreenPass",
    "HealthCert",
    "NAAT",
    "RAT",
    "Recovery",
    "Signature",
    "Test",
    "TestName",
    "Vaccine",
    "DecompressionError",
    "GreenPassError",
    "GreenPassIOError",
    "InvalidBase45Error",
    "InvalidFormatError",
    "MalformedCBORError",
    "MalformedCWTError",
    "MalformedDateError",
    "MalformedStringMapError",
    "MissingKeyError",
    "MissingPrefixError",
    "SpuriousDataError",
]
