"""
Typed model of a decoded EU Digital COVID Certificate.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Union


@dataclass(frozen=True)
class Signature:
    """COSE signature metadata. Extracted, not verified."""

    kid: bytes
    algorithm: int
    signature: bytes


@dataclass(frozen=True)
class Recovery:
    """Attests the full recovery from a given disease."""

    cert_id: str         # ci
    country: str         # co
    diagnosed: date      # fr
    disease: str         # tg
    issuer: str          # is
    valid_from: date     # df
    valid_until: date    # du


@dataclass(frozen=True)
class NAAT:
    """Nucleic acid amplification test, with the name of the test."""

    name: str            # nm


@dataclass(frozen=True)
class RAT:
    """Rapid antigen test, with the device identifier from the JRC database."""

    device_id: str       # ma


TestName = Union[NAAT, RAT]


@dataclass(frozen=True)
class Test:
    """Attests that a test for a given disease has been conducted."""

    __test__ = False

    cert_id: str         # ci
    collect_ts: datetime  # sc
    country: str         # co
    disease: str         # tg
    issuer: str          # is
    name: TestName       # nm | ma
    result: str          # tr
    test_type: str       # tt
    testing_centre: str  # tc


@dataclass(frozen=True)
class Vaccine:
    """Attests that an individual has been vaccinated for a given disease."""

    cert_id: str         # ci
    country: str         # co
    date: date           # dt
    disease: str         # tg
    dose_number: int     # dn
    dose_total: int      # sd
    issuer: str          # is
    market_auth: str     # ma
    product: str         # mp
    prophylaxis_kind: str  # vp


CertInfo = Union[Recovery, Test, Vaccine]


@dataclass(frozen=True)
class GreenPass:
    """One person's certificate and its recovery, test or vaccination entries."""

    date_of_birth: str   # dob, not guaranteed to be a full date
    surname: str         # nam/fn
    givenname: str       # nam/gn
    std_surname: str     # nam/fnt
    std_givenname: str   # nam/gnt
    ver: str             # ver
    entries: List[CertInfo] = field(default_factory=list)  # r | t | v


@dataclass(frozen=True)
class HealthCert:
    """The whole decoded certificate bundle."""

    issuer: Optional[str]
    created: datetime
    expires: datetime
    passes: List[GreenPass]
    signature: Signature
