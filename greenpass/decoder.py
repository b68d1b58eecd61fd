"""
Decode an HC1 string into a HealthCert.

    HC1 text -> Base45 -> zlib -> COSE_Sign1 -> CWT claims -> HealthCert

No signature validation is performed: the kid, algorithm and signature are
carried on ``HealthCert.signature`` for a caller that wants to check them.
"""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from . import cose
from .errors import InvalidFormatError, MissingKeyError
from .extract import (
    StrMap,
    ensure_consumed,
    extract_array,
    extract_date,
    extract_int,
    extract_isodatetime,
    extract_optional,
    extract_string,
    extract_string_map,
    to_strmap,
)
from .models import (
    NAAT,
    RAT,
    CertInfo,
    GreenPass,
    HealthCert,
    Recovery,
    Test,
    TestName,
    Vaccine,
)
from .transport import decode_transport

logger = logging.getLogger(__name__)


def decode_recovery(values: StrMap) -> Recovery:
    rec = Recovery(
        cert_id=extract_string(values, "ci"),
        country=extract_string(values, "co"),
        diagnosed=extract_date(values, "fr"),
        disease=extract_string(values, "tg"),
        issuer=extract_string(values, "is"),
        valid_from=extract_date(values, "df"),
        valid_until=extract_date(values, "du"),
    )
    ensure_consumed(values)
    return rec


def decode_test_name(values: StrMap) -> TestName:
    name = extract_optional(extract_string, values, "nm")
    if name is not None:
        return NAAT(name=name)

    device_id = extract_optional(extract_string, values, "ma")
    if device_id is not None:
        return RAT(device_id=device_id)

    raise MissingKeyError("ma or nm in test")


def decode_test(values: StrMap) -> Test:
    cert_id = extract_string(values, "ci")
    collect_ts = extract_isodatetime(values, "sc")
    country = extract_string(values, "co")
    disease = extract_string(values, "tg")
    issuer = extract_string(values, "is")
    name = decode_test_name(values)
    result = extract_string(values, "tr")
    test_type = extract_string(values, "tt")
    testing_centre = extract_string(values, "tc")

    ensure_consumed(values)

    return Test(
        cert_id=cert_id,
        collect_ts=collect_ts,
        country=country,
        disease=disease,
        issuer=issuer,
        name=name,
        result=result,
        test_type=test_type,
        testing_centre=testing_centre,
    )


def extract_dose(values: StrMap, k: str) -> int:
    n = extract_int(values, k)
    if n < 0:
        raise InvalidFormatError(k)
    return n


def decode_vaccine(values: StrMap) -> Vaccine:
    vac = Vaccine(
        cert_id=extract_string(values, "ci"),
        country=extract_string(values, "co"),
        date=extract_date(values, "dt"),
        disease=extract_string(values, "tg"),
        dose_number=extract_dose(values, "dn"),
        dose_total=extract_dose(values, "sd"),
        issuer=extract_string(values, "is"),
        market_auth=extract_string(values, "ma"),
        product=extract_string(values, "mp"),
        prophylaxis_kind=extract_string(values, "vp"),
    )
    ensure_consumed(values)
    return vac


# Priority order of the mutually exclusive entry arrays.
ENTRY_ARRAYS = (
    ("r", "recovery entry", decode_recovery),
    ("t", "test entry", decode_test),
    ("v", "vaccine entry", decode_vaccine),
)


def decode_entries(values: StrMap) -> List[CertInfo]:
    """Take the first of the r, t or v arrays that is an array. Siblings are left in place."""
    for key, desc, decode in ENTRY_ARRAYS:
        raw_entries = extract_optional(extract_array, values, key)
        if raw_entries is None:
            continue
        logger.debug(f"[hcert] Decoding {len(raw_entries)} {desc}(s)")
        return [decode(to_strmap(desc, v)) for v in raw_entries]

    raise MissingKeyError("r, t or v (the actual data)")


def decode_green_pass(values: StrMap) -> GreenPass:
    date_of_birth = extract_string(values, "dob")
    ver = extract_string(values, "ver")
    entries = decode_entries(values)

    nam = extract_string_map(values, "nam")
    surname = extract_string(nam, "fn")
    givenname = extract_string(nam, "gn")
    std_surname = extract_string(nam, "fnt")
    std_givenname = extract_string(nam, "gnt")
    ensure_consumed(nam)

    ensure_consumed(values)

    return GreenPass(
        date_of_birth=date_of_birth,
        surname=surname,
        givenname=givenname,
        std_surname=std_surname,
        std_givenname=std_givenname,
        ver=ver,
        entries=entries,
    )


def _pop_claim(claims: Dict[int, Any], key: int, desc: str, check: Callable[[Any], bool]) -> Any:
    if key not in claims:
        raise MissingKeyError(desc)
    value = claims.pop(key)
    if not check(value):
        raise InvalidFormatError(desc)
    return value


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _timestamp(claims: Dict[int, Any], key: int, desc: str) -> datetime:
    ts = _pop_claim(claims, key, desc, _is_int)
    try:
        return datetime.fromtimestamp(ts, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        raise InvalidFormatError(desc) from None


def decode_health_cert(envelope: cose.CoseSign1) -> HealthCert:
    """Build a HealthCert from an already decoded COSE_Sign1 envelope."""
    signature = cose.extract_signature(envelope)
    claims = cose.decode_claims(envelope)

    issuer = None
    if cose.CLAIM_ISS in claims:
        issuer = _pop_claim(claims, cose.CLAIM_ISS, "issuing country", lambda v: isinstance(v, str))

    expires = _timestamp(claims, cose.CLAIM_EXP, "expiration timestamp")
    created = _timestamp(claims, cose.CLAIM_IAT, "issue timestamp")

    hcert = _pop_claim(claims, cose.CLAIM_HCERT, "hcert", lambda v: isinstance(v, Mapping))
    # The keys of the hcert claim select a schema version and are not interpreted.
    passes = [decode_green_pass(to_strmap("hcert", v)) for v in hcert.values()]

    logger.info(f"[hcert] Decoded certificate issuer={issuer} passes={len(passes)}")

    return HealthCert(
        issuer=issuer,
        created=created,
        expires=expires,
        passes=passes,
        signature=signature,
    )


def parse(data: str) -> HealthCert:
    """
    Parse a Base45 CBOR Web Token containing an EU Health Certificate.

    Raises a GreenPassError subclass at the first divergence from the
    expected schema; no partial result is ever returned.
    """
    return decode_health_cert(cose.decode_cose_sign1(decode_transport(data)))
