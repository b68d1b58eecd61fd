"""
JSON-safe rendering of decoded certificates.
"""

import base64
import dataclasses
from datetime import date, datetime
from typing import Any, Dict

from .models import HealthCert

# CertInfo and TestName variants are tagged so the union survives JSON
VARIANT_TAGS = {
    "Recovery": "recovery",
    "Test": "test",
    "Vaccine": "vaccine",
    "NAAT": "naat",
    "RAT": "rat",
}


def bytes_to_json_safe(obj: Any) -> Any:
    """Convert bytes to base64url, dates to ISO 8601, dataclasses to dicts."""
    if isinstance(obj, bytes):
        return {'_b64': base64.urlsafe_b64encode(obj).decode('ascii').rstrip('=')}
    elif isinstance(obj, (datetime, date)):
        return obj.isoformat()
    elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        out = {}
        tag = VARIANT_TAGS.get(type(obj).__name__)
        if tag:
            out['type'] = tag
        for f in dataclasses.fields(obj):
            out[f.name] = bytes_to_json_safe(getattr(obj, f.name))
        return out
    elif isinstance(obj, dict):
        return {k: bytes_to_json_safe(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [bytes_to_json_safe(item) for item in obj]
    return obj


def health_cert_to_dict(hc: HealthCert) -> Dict[str, Any]:
    out = bytes_to_json_safe(hc)
    out['signature']['kid_hex'] = hc.signature.kid.hex()
    return out
