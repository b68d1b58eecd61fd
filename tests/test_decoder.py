"""
Tests for the entity decoders, driven through synthetic certificates.
"""

from datetime import date, datetime, timezone

import pytest

from builders import (
    KID,
    SIGNATURE,
    claims,
    green_pass,
    lab_test_entry,
    make_hc1,
    recovery_entry,
    vaccine_entry,
)
from greenpass import parse
from greenpass.decoder import decode_green_pass, decode_test_name
from greenpass.errors import (
    InvalidFormatError,
    MalformedDateError,
    MalformedStringMapError,
    MissingKeyError,
    SpuriousDataError,
)
from greenpass.models import NAAT, RAT, Recovery, Test, Vaccine


class TestHealthCert:
    """Test the envelope-level fields."""

    def test_vaccine_certificate(self, vaccine_hc1):
        hc = parse(vaccine_hc1)
        assert hc.issuer == "AT"
        assert hc.created == datetime(2021, 7, 2, 21, 24, 42, tzinfo=timezone.utc)
        assert hc.expires == datetime(2022, 7, 2, 21, 24, 42, tzinfo=timezone.utc)
        assert hc.signature.kid == KID
        assert hc.signature.algorithm == -7
        assert hc.signature.signature == SIGNATURE

        (gp,) = hc.passes
        assert gp.surname == "Musterfrau-Gößinger"
        assert gp.std_surname == "MUSTERFRAU<GOESSINGER"
        assert gp.givenname == "Gabriele"
        assert gp.std_givenname == "GABRIELE"
        assert gp.date_of_birth == "1998-02-26"
        assert gp.ver == "1.2.1"
        assert gp.entries == [
            Vaccine(
                cert_id="URN:UVCI:01:AT:10807843F94AEE0EE5093FBC254BD813#B",
                country="AT",
                date=date(2021, 2, 18),
                disease="840539006",
                dose_number=1,
                dose_total=2,
                issuer="Ministry of Health, Austria",
                market_auth="ORG-100030215",
                product="EU/1/20/1528",
                prophylaxis_kind="1119349007",
            )
        ]

    def test_decoding_is_deterministic(self, vaccine_hc1):
        assert parse(vaccine_hc1) == parse(vaccine_hc1)

    def test_issuer_is_optional(self):
        hc = parse(make_hc1(claims(issuer=None)))
        assert hc.issuer is None

    def test_issuer_must_be_text(self):
        with pytest.raises(InvalidFormatError):
            parse(make_hc1(claims(issuer=40)))

    @pytest.mark.parametrize("key,desc", [(4, "expiration timestamp"), (6, "issue timestamp"), (-260, "hcert")])
    def test_missing_mandatory_claim(self, key, desc):
        payload = claims()
        del payload[key]
        with pytest.raises(MissingKeyError) as exc:
            parse(make_hc1(payload))
        assert exc.value.key == desc

    def test_timestamp_must_be_integer(self):
        payload = claims()
        payload[4] = "2022-07-02"
        with pytest.raises(InvalidFormatError):
            parse(make_hc1(payload))

    def test_hcert_claim_must_be_map(self):
        payload = claims()
        payload[-260] = [green_pass()]
        with pytest.raises(InvalidFormatError) as exc:
            parse(make_hc1(payload))
        assert exc.value.key == "hcert"

    def test_unknown_claims_are_ignored(self):
        payload = claims()
        payload[5] = 1625261082
        assert parse(make_hc1(payload)).issuer == "AT"

    def test_hcert_version_keys_not_interpreted(self):
        hc = parse(make_hc1(claims({"v2": green_pass(), 7: green_pass([recovery_entry()], key="r")})))
        assert len(hc.passes) == 2

    def test_kid_location_independence(self):
        protected = parse(make_hc1(protected={1: -7, 4: KID}))
        unprotected = parse(make_hc1(protected={1: -7}, unprotected={4: b"other-kid"}))
        assert unprotected.signature.kid == b"other-kid"
        assert unprotected.passes == protected.passes
        assert unprotected.created == protected.created
        assert unprotected.expires == protected.expires


class TestEntrySelection:
    """Test the r / t / v exclusive choice."""

    def test_recovery(self, recovery_hc1):
        (gp,) = parse(recovery_hc1).passes
        assert gp.entries == [
            Recovery(
                cert_id="URN:UVCI:01:AT:858CC18CFCF5965EF82F60E493349AA5#K",
                country="AT",
                diagnosed=date(2021, 2, 20),
                disease="840539006",
                issuer="Ministry of Health, Austria",
                valid_from=date(2021, 4, 4),
                valid_until=date(2021, 10, 4),
            )
        ]

    def test_entries_are_homogeneous(self):
        gp = decode_green_pass(green_pass([vaccine_entry(dn=1), vaccine_entry(dn=2)], key="v"))
        assert len(gp.entries) == 2
        assert all(isinstance(e, Vaccine) for e in gp.entries)

    def test_missing_all_arrays(self):
        with pytest.raises(MissingKeyError) as exc:
            decode_green_pass(green_pass(key=None))
        assert exc.value.key == "r, t or v (the actual data)"

    def test_recovery_wins_over_vaccine(self):
        # the vaccine array is never consulted, so it is left over
        gp = green_pass([recovery_entry()], key="r", v=[vaccine_entry()])
        with pytest.raises(SpuriousDataError) as exc:
            decode_green_pass(gp)
        assert list(exc.value.leftover) == ["v"]

    def test_array_with_wrong_type_is_skipped(self):
        with pytest.raises(MissingKeyError) as exc:
            decode_green_pass(green_pass(key=None, r="not an array"))
        assert exc.value.key == "r, t or v (the actual data)"

    def test_wrong_typed_recovery_falls_through_to_vaccine(self):
        gp = decode_green_pass(green_pass([vaccine_entry()], key="v", r="garbage"))
        assert len(gp.entries) == 1
        assert isinstance(gp.entries[0], Vaccine)

    def test_wrong_typed_test_array_falls_through_to_vaccine(self):
        gp = decode_green_pass(green_pass([vaccine_entry()], key="v", t={"not": "an array"}))
        assert isinstance(gp.entries[0], Vaccine)

    def test_entry_must_be_map(self):
        with pytest.raises(InvalidFormatError) as exc:
            decode_green_pass(green_pass(["x"], key="t"))
        assert exc.value.key == "test entry"

    def test_entry_with_non_text_key(self):
        entry = vaccine_entry()
        entry[1] = "x"
        with pytest.raises(MalformedStringMapError):
            decode_green_pass(green_pass([entry], key="v"))


class TestTestName:
    """Test the NAAT / RAT selection."""

    def test_naat(self, pcr_hc1):
        (entry,) = parse(pcr_hc1).passes[0].entries
        assert isinstance(entry, Test)
        assert entry.name == NAAT(name="Roche LightCycler qPCR")
        assert entry.collect_ts == datetime(2021, 2, 20, 4, 34, 56, tzinfo=timezone.utc)

    def test_rat(self):
        entry = lab_test_entry(tt="LP217198-3", ma="1232")
        del entry["nm"]
        gp = decode_green_pass(green_pass([entry], key="t"))
        assert gp.entries[0].name == RAT(device_id="1232")

    def test_nm_checked_before_ma(self):
        values = {"nm": "PCR", "ma": "1232"}
        assert decode_test_name(values) == NAAT(name="PCR")
        assert values == {"ma": "1232"}

    def test_wrong_typed_nm_falls_through_to_ma(self):
        values = {"nm": 5, "ma": "1232"}
        assert decode_test_name(values) == RAT(device_id="1232")
        assert values == {}

    def test_neither(self):
        with pytest.raises(MissingKeyError) as exc:
            decode_test_name({})
        assert exc.value.key == "ma or nm in test"

    def test_both_present_leaves_device_id_over(self):
        entry = lab_test_entry(ma="1232")
        with pytest.raises(SpuriousDataError) as exc:
            decode_green_pass(green_pass([entry], key="t"))
        assert exc.value.leftover == {"ma": "1232"}

    def test_timestamp_formats(self):
        plain = decode_green_pass(green_pass([lab_test_entry(sc="2021-02-20T05:34:56+0100")], key="t"))
        fancy = decode_green_pass(green_pass([lab_test_entry(sc="2021-02-20T05:34:56.000+01:00")], key="t"))
        assert plain.entries[0].collect_ts == fancy.entries[0].collect_ts

    def test_bad_timestamp(self):
        with pytest.raises(MalformedDateError) as exc:
            decode_green_pass(green_pass([lab_test_entry(sc="20/02/2021")], key="t"))
        assert exc.value.raw == "20/02/2021"


class TestVaccine:
    """Test vaccination field handling."""

    def test_dose_order_not_enforced(self):
        gp = decode_green_pass(green_pass([vaccine_entry(dn=3, sd=2)]))
        assert (gp.entries[0].dose_number, gp.entries[0].dose_total) == (3, 2)

    def test_negative_dose(self):
        with pytest.raises(InvalidFormatError) as exc:
            decode_green_pass(green_pass([vaccine_entry(dn=-1)]))
        assert exc.value.key == "dn"

    def test_dose_must_be_integer(self):
        with pytest.raises(InvalidFormatError):
            decode_green_pass(green_pass([vaccine_entry(sd="2")]))

    def test_bad_date(self):
        with pytest.raises(MalformedDateError):
            decode_green_pass(green_pass([vaccine_entry(dt="2021-02")]))

    def test_first_failure_reported(self):
        entry = vaccine_entry()
        del entry["ci"]
        del entry["vp"]
        with pytest.raises(MissingKeyError) as exc:
            decode_green_pass(green_pass([entry]))
        assert exc.value.key == "ci"


def _with_extra_key(where):
    gp = green_pass([vaccine_entry()])
    if where == "pass":
        gp["xx"] = 1
    elif where == "nam":
        gp["nam"]["xx"] = 1
    else:
        gp["v"][0]["xx"] = 1
    return gp


class TestFullConsumption:
    """An extra key anywhere must fail with leftover data and nothing else."""

    @pytest.mark.parametrize("where", ["pass", "nam", "entry"])
    def test_extra_key(self, where):
        with pytest.raises(SpuriousDataError) as exc:
            parse(make_hc1(claims({1: _with_extra_key(where)})))
        assert exc.value.leftover == {"xx": 1}

    @pytest.mark.parametrize("entry,key", [
        (recovery_entry(xx=1), "r"),
        (lab_test_entry(xx=1), "t"),
        (vaccine_entry(xx=1), "v"),
    ])
    def test_extra_key_per_entry_kind(self, entry, key):
        with pytest.raises(SpuriousDataError):
            decode_green_pass(green_pass([entry], key=key))

    def test_missing_name_field(self):
        gp = green_pass()
        del gp["nam"]["gnt"]
        with pytest.raises(MissingKeyError) as exc:
            decode_green_pass(gp)
        assert exc.value.key == "gnt"
