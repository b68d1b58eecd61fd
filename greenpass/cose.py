"""
COSE_Sign1 envelope and CWT claims decoding.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Dict, Optional, Tuple

import cbor2

from .errors import (
    InvalidFormatError,
    MalformedCBORError,
    MalformedCWTError,
    MissingKeyError,
)
from .models import Signature

logger = logging.getLogger(__name__)

# COSE header labels
HEADER_ALG = 1
HEADER_KID = 4

# CWT claim keys
CLAIM_ISS = 1
CLAIM_EXP = 4
CLAIM_IAT = 6
CLAIM_HCERT = -260


@dataclass(frozen=True)
class CoseSign1:
    protected: Dict[Any, Any]
    protected_bstr: bytes
    unprotected: Dict[Any, Any]
    payload_bstr: bytes
    signature: bytes


def unwrap_cbor_tags(data: Any) -> Any:
    """Recursively unwrap CBOR tags until we get to the actual data."""
    while isinstance(data, cbor2.CBORTag):
        logger.debug(f"Unwrapping CBOR Tag {data.tag}")
        data = data.value
    return data


def cbor_loads(data: bytes) -> Any:
    """Decode exactly one CBOR item; bytes after it are an error."""
    fp = BytesIO(data)
    try:
        # read_size=1 keeps fp.tell() at the end of the decoded item
        value = cbor2.CBORDecoder(fp, read_size=1).decode()
    except (cbor2.CBORDecodeError, ValueError, TypeError, EOFError) as e:
        logger.warning(f"[hcert] CBOR decode failed: {e}")
        raise MalformedCBORError(str(e)) from e

    trailing = len(data) - fp.tell()
    if trailing:
        logger.warning(f"[hcert] {trailing} trailing bytes after CBOR item")
        raise MalformedCBORError(f"{trailing} trailing bytes after CBOR item")

    return unwrap_cbor_tags(value)


def decode_cose_sign1(data: bytes) -> CoseSign1:
    """Decode a COSE_Sign1 structure."""
    cbor_data = cbor_loads(data)

    # tagged arrays and maps may come back as tuple and frozendict
    if not isinstance(cbor_data, (list, tuple)) or len(cbor_data) != 4:
        length = len(cbor_data) if isinstance(cbor_data, (list, tuple)) else None
        logger.warning(f"[hcert] Invalid COSE_Sign1 structure: expected 4-element list, got {type(cbor_data).__name__} with {length} elements")
        raise MalformedCWTError(length)

    protected_bstr, unprotected_map, payload_bstr, signature_bstr = cbor_data

    if not isinstance(protected_bstr, bytes):
        raise InvalidFormatError("protected header")
    if not isinstance(unprotected_map, Mapping):
        raise InvalidFormatError("unprotected header")
    if not isinstance(payload_bstr, bytes):
        raise InvalidFormatError("root cert")
    if not isinstance(signature_bstr, bytes):
        raise InvalidFormatError("signature")

    protected_headers = {}
    if protected_bstr:
        protected_headers = cbor_loads(protected_bstr)
        if not isinstance(protected_headers, Mapping):
            raise InvalidFormatError("protected header")

    return CoseSign1(
        protected=dict(protected_headers),
        protected_bstr=protected_bstr,
        unprotected=dict(unprotected_map),
        payload_bstr=payload_bstr,
        signature=signature_bstr,
    )


def find_header(cose: CoseSign1, label: int, unprotected_first: bool) -> Tuple[Optional[Any], Optional[str]]:
    """Look up a header label in both buckets. Returns (value, bucket name)."""
    buckets = [("protected", cose.protected), ("unprotected", cose.unprotected)]
    if unprotected_first:
        buckets.reverse()

    for name, hdrs in buckets:
        if label in hdrs:
            return hdrs[label], name
    return None, None


def extract_signature(cose: CoseSign1) -> Signature:
    """
    Pull kid, algorithm and signature bytes out of the envelope.

    Issuers put the kid in either bucket; most observed certificates use the
    unprotected one, so it is searched first.
    """
    kid, kid_loc = find_header(cose, HEADER_KID, unprotected_first=True)
    if kid is None:
        raise MissingKeyError("key identifier")
    if not isinstance(kid, bytes):
        raise InvalidFormatError("key identifier")
    logger.debug(f"[hcert] KID found in {kid_loc} header: {kid.hex()}")

    alg, _ = find_header(cose, HEADER_ALG, unprotected_first=False)
    if alg is None:
        raise MissingKeyError("signature algorithm")
    if not isinstance(alg, int) or isinstance(alg, bool):
        raise InvalidFormatError("signature algorithm")

    return Signature(kid=kid, algorithm=alg, signature=cose.signature)


def decode_claims(cose: CoseSign1) -> Dict[int, Any]:
    """Decode the CWT payload into its integer-keyed claims map."""
    claims = cbor_loads(cose.payload_bstr)

    if not isinstance(claims, Mapping):
        raise MalformedCBORError(f"expected a claims map, got {type(claims).__name__}")
    for k in claims:
        if not isinstance(k, int) or isinstance(k, bool):
            raise MalformedCBORError(f"non-integer claim key {k!r}")

    logger.debug(f"[hcert] CWT claims: keys={sorted(claims)}")
    return dict(claims)
