"""
Command line inspector for EU Digital COVID Certificates.

Reads a Base45 QR code payload from a file (or stdin with ``-``) and prints
the decoded certificate. Does not validate signatures.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional, TextIO

from . import config, valuesets
from .decoder import parse
from .errors import GreenPassError, GreenPassIOError
from .models import NAAT, GreenPass, HealthCert, Recovery, Test, Vaccine
from .serialize import health_cert_to_dict

logger = logging.getLogger(__name__)

PAD4 = " " * 4
PAD8 = " " * 8


def _annotated(code: str, description: Optional[str]) -> str:
    return f"{code} ({description})" if description else code


def dump_recovery(r: Recovery, out: TextIO) -> None:
    print(f"{PAD4}Recovery attestation:", file=out)
    print(f"{PAD8}Cert ID: {r.cert_id}", file=out)
    print(f"{PAD8}Disease: {_annotated(r.disease, valuesets.describe_disease(r.disease))}", file=out)
    print(f"{PAD8}Issuer: {r.issuer}", file=out)
    print(f"{PAD8}Country: {r.country}", file=out)
    print(f"{PAD8}Tested positive: {r.diagnosed.isoformat()}", file=out)
    print(f"{PAD8}Valid from: {r.valid_from.isoformat()}", file=out)
    print(f"{PAD8}Valid until: {r.valid_until.isoformat()}", file=out)


def dump_test(t: Test, out: TextIO) -> None:
    if isinstance(t.name, NAAT):
        tn_str = f"Nucleic Acid Amplification Test ({t.name.name})"
    else:
        tn_str = f"Rapid Antigen Test (device: {t.name.device_id})"

    print(f"{PAD4}Testing attestation:", file=out)
    print(f"{PAD8}Cert ID: {t.cert_id}", file=out)
    print(f"{PAD8}Disease: {_annotated(t.disease, valuesets.describe_disease(t.disease))}", file=out)
    print(f"{PAD8}Result code: {_annotated(t.result, valuesets.describe_test_result(t.result))}", file=out)
    print(f"{PAD8}Samples collected at: {t.collect_ts.isoformat()}", file=out)
    print(f"{PAD8}Test type: {tn_str}, ID: {_annotated(t.test_type, valuesets.describe_test_type(t.test_type))}", file=out)
    print(f"{PAD8}Conducted by: {t.testing_centre}", file=out)
    print(f"{PAD8}Issuer: {t.issuer}", file=out)
    print(f"{PAD8}Country: {t.country}", file=out)


def dump_vaccination(v: Vaccine, out: TextIO) -> None:
    print(f"{PAD4}Vaccination data:", file=out)
    print(f"{PAD8}Cert ID: {v.cert_id}", file=out)
    print(f"{PAD8}Disease: {_annotated(v.disease, valuesets.describe_disease(v.disease))}", file=out)
    print(f"{PAD8}Issuer: {v.issuer}", file=out)
    print(f"{PAD8}Country: {v.country}", file=out)
    print(f"{PAD8}Vaccination date: {v.date.isoformat()}", file=out)
    print(f"{PAD8}Doses administered: {v.dose_number}/{v.dose_total}", file=out)
    print(f"{PAD8}Product ID: {_annotated(v.product, valuesets.describe_product(v.product))}", file=out)
    print(f"{PAD8}Market Authorization ID: {_annotated(v.market_auth, valuesets.describe_manufacturer(v.market_auth))}", file=out)
    print(f"{PAD8}Vaccine/Prophylaxis ID: {_annotated(v.prophylaxis_kind, valuesets.describe_prophylaxis(v.prophylaxis_kind))}", file=out)


def dump_greenpass(gp: GreenPass, out: TextIO) -> None:
    print(f"{PAD4}Cert version {gp.ver}", file=out)
    print(f"{PAD4}Emitted to: {gp.givenname} {gp.surname}", file=out)
    print(f"{PAD4}Standardized Name: {gp.std_givenname} {gp.std_surname}", file=out)
    print(f"{PAD4}Date of birth: {gp.date_of_birth}\n", file=out)

    for entry in gp.entries:
        if isinstance(entry, Recovery):
            dump_recovery(entry, out)
        elif isinstance(entry, Test):
            dump_test(entry, out)
        else:
            dump_vaccination(entry, out)


def dump_hc(hc: HealthCert, out: TextIO) -> None:
    print("EU Digital COVID Certificate\n", file=out)

    if hc.issuer is not None:
        print(f"Issued by: {hc.issuer}", file=out)

    print(f"Created at: {hc.created.isoformat()}", file=out)
    print(f"Expires at: {hc.expires.isoformat()}", file=out)
    print(f"Key ID: {hc.signature.kid.hex()} (algorithm {hc.signature.algorithm}, not verified)\n", file=out)

    for i, gp in enumerate(hc.passes):
        print(f"Pass#{i}:", file=out)
        dump_greenpass(gp, out)


def read_input(path: str) -> bytes:
    try:
        if path == "-":
            return sys.stdin.buffer.read()
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise GreenPassIOError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="greenpass",
        description="Utility to quickly inspect EU Digital COVID Certificates. Does not validate signatures.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="File containing a Base45 QR code payload. Omit or specify `-` to read from stdin",
    )
    parser.add_argument("--json", action="store_true", help="Print the decoded certificate as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log each decoding stage")
    parser.add_argument("--version", action="version", version=f"%(prog)s {config.__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config.configure_logging("DEBUG" if args.verbose else "ERROR")

    try:
        buf = read_input(args.file)
        logger.debug(f"[cli] Read {len(buf)} bytes from {args.file}")
        if not buf:
            return 0

        try:
            text = buf.decode("utf-8")
        except UnicodeDecodeError as e:
            raise GreenPassIOError(f"input is not valid UTF-8: {e}") from e

        hc = parse(text)
    except GreenPassError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(health_cert_to_dict(hc), indent=2, ensure_ascii=False))
    else:
        dump_hc(hc, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
