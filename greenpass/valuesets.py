"""
Value sets for the Digital COVID Certificates.

Source: https://ec.europa.eu/health/system/files/2022-01/digital-green-value-sets_en.pdf
Static lookup data only; the decoder never consults these tables.
"""

from typing import Dict, NamedTuple, Optional

# 2.1 Disease or agent targeted
DISEASE_AGENT_TARGETED: Dict[str, str] = {
    "840539006": "COVID-19",
}


class Prophylaxis(NamedTuple):
    display: str
    system: str
    system_version: str


# 2.2 COVID-19 vaccine or prophylaxis
VACCINE_PROPHYLAXIS: Dict[str, Prophylaxis] = {
    "1119305005": Prophylaxis("SARS-CoV-2 antigen vaccine", "SNOMED CT", "2021-01-31"),
    "1119349007": Prophylaxis("SARS-CoV-2 mRNA vaccine", "SNOMED CT", "2021-01-31"),
    "J07BX03": Prophylaxis("covid-19 vaccines", "Anatomical Therapeutic Chemical Classification System", "2021-01"),
}

CENTRALLY_AUTHORIZED = "centrally-authorized"
IN_ROLLING_REVIEW = "in-rolling-review"
NOT_AUTHORIZED = "not-authorized"


class MedicinalProduct(NamedTuple):
    display: str
    status: str
    # value set version that introduced the code, None for EU register entries
    since: Optional[str]


# 2.3 Vaccine medicinal product
VACCINE_MEDICINAL_PRODUCT: Dict[str, MedicinalProduct] = {
    "EU/1/20/1528": MedicinalProduct("Comirnaty", CENTRALLY_AUTHORIZED, None),
    "EU/1/20/1507": MedicinalProduct("Spikevax", CENTRALLY_AUTHORIZED, None),
    "EU/1/21/1529": MedicinalProduct("Vaxzevria", CENTRALLY_AUTHORIZED, None),
    "EU/1/20/1525": MedicinalProduct("COVID-19 Vaccine Janssen", CENTRALLY_AUTHORIZED, None),
    "EU/1/21/1618": MedicinalProduct("Nuvaxovid", CENTRALLY_AUTHORIZED, None),
    "CVnCoV": MedicinalProduct("CVnCoV", IN_ROLLING_REVIEW, "1.0"),
    "NVX-CoV2373": MedicinalProduct("NVX-CoV2373", IN_ROLLING_REVIEW, "1.0"),
    "Sputnik-V": MedicinalProduct("Sputnik V", IN_ROLLING_REVIEW, "1.0"),
    "Convidecia": MedicinalProduct("Convidecia", NOT_AUTHORIZED, "1.0"),
    "EpiVacCorona": MedicinalProduct("EpiVacCorona", NOT_AUTHORIZED, "1.0"),
    "BBIBP-CorV": MedicinalProduct("BBIBP-CorV", NOT_AUTHORIZED, "1.0"),
    "Inactivated-SARS-CoV-2-Vero-Cell": MedicinalProduct("Inactivated SARS-CoV-2 (Vero Cell)", NOT_AUTHORIZED, "1.0"),
    "CoronaVac": MedicinalProduct("CoronaVac", NOT_AUTHORIZED, "1.0"),
    "Covaxin": MedicinalProduct("Covaxin (also known as BBV152 A, B, C)", NOT_AUTHORIZED, "1.0"),
    "Covishield": MedicinalProduct("Covishield (ChAdOx1_nCoV-19)", NOT_AUTHORIZED, "1.2"),
    "Covid-19-recombinant": MedicinalProduct("Covid-19 (recombinant)", NOT_AUTHORIZED, "1.3"),
    "R-COVI": MedicinalProduct("R-COVI", NOT_AUTHORIZED, "1.3"),
    "CoviVac": MedicinalProduct("CoviVac", NOT_AUTHORIZED, "1.4"),
    "Sputnik-Light": MedicinalProduct("Sputnik Light", NOT_AUTHORIZED, "1.4"),
    "Hayat-Vax": MedicinalProduct("Hayat-Vax", NOT_AUTHORIZED, "1.4"),
    "Abdala": MedicinalProduct("Abdala", NOT_AUTHORIZED, "1.5"),
    "WIBP-CorV": MedicinalProduct("WIBP-CorV", NOT_AUTHORIZED, "1.5"),
    "MVC-COV1901": MedicinalProduct("MVC COVID-19 vaccine", NOT_AUTHORIZED, "1.6"),
}


class Manufacturer(NamedTuple):
    display: str
    # listed in the EMA Organisation Management System
    in_oms: bool
    since: Optional[str]


# 2.4 COVID-19 vaccine marketing authorization holder or manufacturer
VACCINE_MANUFACTURER: Dict[str, Manufacturer] = {
    "ORG-100001699": Manufacturer("AstraZeneca AB", True, None),
    "ORG-100030215": Manufacturer("Biontech Manufacturing GmbH", True, None),
    "ORG-100001417": Manufacturer("Janssen-Cilag International", True, None),
    "ORG-100031184": Manufacturer("Moderna Biotech Spain S.L.", True, None),
    "ORG-100006270": Manufacturer("Curevac AG", True, None),
    "ORG-100013793": Manufacturer("CanSino Biologics", True, None),
    "ORG-100020693": Manufacturer("China Sinopharm International Corp. - Beijing location", True, None),
    "ORG-100010771": Manufacturer("Sinopharm Weiqida Europe Pharmaceutical s.r.o. - Prague location", True, None),
    "ORG-100024420": Manufacturer("Sinopharm Zhijun (Shenzhen) Pharmaceutical Co. Ltd. - Shenzhen location", True, None),
    "ORG-100032020": Manufacturer("Novavax CZ a.s.", True, None),
    "ORG-100001981": Manufacturer("Serum Institute Of India Private Limited", True, None),
    "ORG-100007893": Manufacturer("R-Pharm CJSC", True, None),
    "ORG-100023050": Manufacturer("Gulf Pharmaceutical Industries", True, None),
    "ORG-100033914": Manufacturer("Medigen Vaccine Biologics Corporation", True, None),
    "Gamaleya-Research-Institute": Manufacturer("Gamaleya Research Institute", False, "1.0"),
    "Vector-Institute": Manufacturer("Vector Institute", False, "1.0"),
    "Sinovac-Biotech": Manufacturer("Sinovac Biotech", False, "1.0"),
    "Bharat-Biotech": Manufacturer("Bharat Biotech", False, "1.0"),
    "Fiocruz": Manufacturer("Fiocruz", False, "1.3"),
    "Chumakov-Federal-Scientific-Center": Manufacturer(
        "Chumakov Federal Scientific Center for Research and Development of Immune-and-Biological Products", False, "1.4"
    ),
    "CIGB": Manufacturer("Center for Genetic Engineering and Biotechnology (CIGB)", False, "1.5"),
    "Sinopharm-WIBP": Manufacturer("Sinopharm - Wuhan Institute of Biological Products", False, "1.5"),
}

# 2.9 Test result
TEST_RESULT: Dict[str, str] = {
    "260415000": "Not detected",
    "260373001": "Detected",
}

# 2.7 Type of test
TEST_TYPE: Dict[str, str] = {
    "LP6464-4": "Nucleic acid amplification with probe detection",
    "LP217198-3": "Rapid immunoassay",
}


def describe_disease(code: str) -> Optional[str]:
    return DISEASE_AGENT_TARGETED.get(code)


def describe_prophylaxis(code: str) -> Optional[str]:
    entry = VACCINE_PROPHYLAXIS.get(code)
    return entry.display if entry else None


def describe_product(code: str) -> Optional[str]:
    entry = VACCINE_MEDICINAL_PRODUCT.get(code)
    return entry.display if entry else None


def describe_manufacturer(code: str) -> Optional[str]:
    entry = VACCINE_MANUFACTURER.get(code)
    return entry.display if entry else None


def describe_test_result(code: str) -> Optional[str]:
    return TEST_RESULT.get(code)


def describe_test_type(code: str) -> Optional[str]:
    return TEST_TYPE.get(code)
