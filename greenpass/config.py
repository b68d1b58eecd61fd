"""Runtime configuration, read from the environment."""

import logging
import os

__version__ = "0.1.0"

SERVICE_NAME = "EU Digital COVID Certificate Decoder"
SERVICE_VERSION = os.getenv("SERVICE_VERSION", __version__)

LOG_LEVEL = os.getenv("GREENPASS_LOG_LEVEL", "INFO").upper()

# Upper bound for the zlib-inflated COSE message. Real certificates are a
# few hundred bytes.
MAX_DECOMPRESSED_BYTES = int(os.getenv("GREENPASS_MAX_DECOMPRESSED_BYTES", str(1024 * 1024)))

HC1_PREFIX = "HC1:"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging for the entry points."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
