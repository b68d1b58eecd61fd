#!/usr/bin/env python3
"""
EU Digital COVID Certificate Decoder Service
Implements a REST API that decodes HC1 QR code payloads into typed certificates.
Signatures are extracted but not verified.
"""

import argparse
import logging
import platform
import re
import sys
import unicodedata
from importlib.metadata import PackageNotFoundError, version
from typing import Dict, List, Tuple

from flask import Flask, jsonify, request
from flask_cors import CORS

from . import config
from .cose import decode_cose_sign1
from .decoder import decode_health_cert
from .errors import GreenPassError
from .serialize import health_cert_to_dict
from .transport import b45_decode, decompress, strip_prefix

config.configure_logging()
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

# -------- Utility functions --------

def get_library_versions() -> Dict[str, str]:
    """Get versions of key libraries."""
    versions = {}
    for dist in ("flask", "flask-cors", "cbor2", "base45"):
        try:
            versions[dist] = version(dist)
        except PackageNotFoundError:
            versions[dist] = 'unknown'
    return versions

# Zero-width and no-break characters that QR scanner apps tend to inject.
SCANNER_ARTIFACTS = ('\u00A0', '\u200B', '\u200C', '\u200D', '\uFEFF', '\u2060')

LINE_BREAKS_RE = re.compile(r'[\r\n\t]+')

def normalize_text(text: str) -> Tuple[str, List[Dict]]:
    """Return the scanned text without scanner artifacts, plus a report of what was dropped."""
    text = unicodedata.normalize('NFKC', text)
    found = [c for c in SCANNER_ARTIFACTS if c in text]
    for c in found:
        text = text.replace(c, '')

    report = [{'char': f'U+{ord(c):04X}', 'name': unicodedata.name(c, 'UNKNOWN')} for c in found]
    return LINE_BREAKS_RE.sub('', text), report

def error_response(e: GreenPassError, status: int = 400):
    body = {'error': e.kind, 'details': str(e)}
    received = getattr(e, 'received', None)
    if received is not None:
        body['received_prefix'] = received
    return jsonify(body), status

# -------- API Endpoints --------

@app.route('/status', methods=['GET'])
@app.route('/health', methods=['GET'])
def status():
    """Service status endpoint."""
    return jsonify({
        'service': config.SERVICE_NAME,
        'version': config.SERVICE_VERSION,
        'ready': True,
        'python': sys.version.split()[0],
        'platform': platform.platform(),
        'libraries': get_library_versions()
    })

@app.route('/decode/hcert', methods=['POST'])
def decode_hcert():
    """Decode an HC1 string into a typed certificate."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'qr_data' not in data:
        return jsonify({'error': 'missing_qr_data', 'details': 'qr_data field required'}), 400

    qr_data = data['qr_data']
    if not isinstance(qr_data, str):
        return jsonify({'error': 'invalid_qr_data', 'details': 'qr_data must be a string'}), 400
    logger.info(f"[hcert] Raw input length={len(qr_data)}")

    qr_data, removed_chars = normalize_text(qr_data)

    if qr_data.startswith('<!DOCTYPE html') or qr_data.startswith('<html'):
        return jsonify({
            'error': 'html_received_instead_of_hc1',
            'details': 'Server received HTML, not an HC1 string. Check API_BASE/port or proxy.',
        }), 400

    try:
        compressed_data = b45_decode(strip_prefix(qr_data))
        cbor_data = decompress(compressed_data)
        envelope = decode_cose_sign1(cbor_data)
        hc = decode_health_cert(envelope)
    except GreenPassError as e:
        logger.warning(f"[hcert] Decode failed ({e.kind}): {e}")
        return error_response(e)

    response = {
        'diagnostics': {
            'base45_decoded_len': len(compressed_data),
            'zlib_decompressed_len': len(cbor_data),
        },
        'hcert': health_cert_to_dict(hc),
    }

    if removed_chars:
        response['normalization_note'] = f"Removed {len(removed_chars)} hidden characters"
        response['removed_chars'] = removed_chars

    return jsonify(response)

# -------- Documentation Endpoints --------

# OpenAPI specification
OPENAPI_SPEC = {
    "openapi": "3.0.3",
    "info": {
        "title": "EU Digital COVID Certificate Decoder API",
        "version": config.SERVICE_VERSION,
        "description": "Decodes EU DCC HC1 strings into typed recovery, test and vaccination certificates. Signatures are not verified."
    },
    "servers": [{"url": "/"}],
    "paths": {
        "/status": {
            "get": {
                "summary": "Service status",
                "tags": ["Health"],
                "responses": {
                    "200": {
                        "description": "Service info",
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Status"}}}
                    }
                }
            }
        },
        "/health": {
            "get": {
                "summary": "Health check",
                "tags": ["Health"],
                "responses": {
                    "200": {
                        "description": "Service health",
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Status"}}}
                    }
                }
            }
        },
        "/decode/hcert": {
            "post": {
                "summary": "Decode HC1 (HCERT) string",
                "tags": ["Decoding"],
                "requestBody": {
                    "required": True,
                    "content": {
                        "application/json": {
                            "schema": {
                                "type": "object",
                                "properties": {"qr_data": {"type": "string", "example": "HC1:..."}},
                                "required": ["qr_data"]
                            }
                        }
                    }
                },
                "responses": {
                    "200": {
                        "description": "Decoded certificate",
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/DecodeHcertResponse"}}}
                    },
                    "400": {
                        "description": "Invalid HC1 / decode error",
                        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Error"}}}
                    }
                }
            }
        }
    },
    "components": {
        "schemas": {
            "Status": {
                "type": "object",
                "properties": {
                    "service": {"type": "string"},
                    "version": {"type": "string"},
                    "ready": {"type": "boolean"},
                    "python": {"type": "string"},
                    "platform": {"type": "string"},
                    "libraries": {"type": "object", "additionalProperties": {"type": "string"}}
                }
            },
            "DecodeHcertResponse": {
                "type": "object",
                "properties": {
                    "diagnostics": {
                        "type": "object",
                        "properties": {
                            "base45_decoded_len": {"type": "integer"},
                            "zlib_decompressed_len": {"type": "integer"}
                        }
                    },
                    "hcert": {
                        "type": "object",
                        "properties": {
                            "issuer": {"type": "string", "nullable": True},
                            "created": {"type": "string", "format": "date-time"},
                            "expires": {"type": "string", "format": "date-time"},
                            "passes": {"type": "array", "items": {"type": "object"}},
                            "signature": {"type": "object"}
                        }
                    }
                }
            },
            "Error": {
                "type": "object",
                "properties": {
                    "error": {"type": "string"},
                    "details": {"type": "string"}
                }
            }
        }
    },
    "tags": [
        {"name": "Health", "description": "Service health and status"},
        {"name": "Decoding", "description": "HC1 decoding operations"}
    ]
}

@app.route("/openapi.json")
def openapi():
    """Serve OpenAPI specification."""
    spec = dict(OPENAPI_SPEC)
    spec["servers"] = [{"url": request.host_url.rstrip("/")}]
    return jsonify(spec)

DOCS_PAGE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8"/>
    <title>greenpass decode service</title>
    <link rel="stylesheet" href="https://unpkg.com/swagger-ui-dist/swagger-ui.css">
  </head>
  <body>
    <div id="greenpass-api"></div>
    <script src="https://unpkg.com/swagger-ui-dist/swagger-ui-bundle.js"></script>
    <script>
      SwaggerUIBundle({{url: "{openapi_url}", dom_id: "#greenpass-api", docExpansion: "full"}});
    </script>
  </body>
</html>
"""

@app.route("/docs")
def docs():
    """Interactive API reference for the decode service."""
    return DOCS_PAGE.format(openapi_url=f"{request.host_url.rstrip('/')}/openapi.json")

@app.errorhandler(404)
def not_found(e):
    return jsonify({'error': 'not_found', 'details': f'no route for {request.method} {request.path}'}), 404

@app.errorhandler(500)
def internal_error(e):
    logger.exception(f"[http] Unhandled error on {request.method} {request.path}")
    return jsonify({'error': 'internal_error', 'details': 'unexpected failure while decoding'}), 500

def main():
    parser = argparse.ArgumentParser(description='EU Digital COVID Certificate Decoder Service')
    parser.add_argument('--host', default='0.0.0.0', help='Host to bind to')
    parser.add_argument('--port', type=int, default=8080, help='Port to bind to')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    args = parser.parse_args()

    app.run(host=args.host, port=args.port, debug=args.debug)

if __name__ == '__main__':
    main()
