# monitoring/__init__.py
"""
Monitoring package exposing the Prometheus metrics of the mint system.
"""
import logging

from prometheus_client import start_http_server

from .metrics import (
    ARTIFACT_RENDER_TIME,
    ARTIFACT_UPLOAD_BYTES,
    CONFIRMATION_POLLS,
    LEDGER_READ_FAILURES,
    MINT_ATTEMPTS,
    MINT_PIPELINES_IN_FLIGHT,
    MINT_STAGE_LATENCY,
    TRANSLATIONS,
    TRANSLATION_TEXT_LENGTH,
)

logger = logging.getLogger(__name__)


def start_metrics_server(port: int) -> None:
    """Expose the default registry over HTTP"""
    start_http_server(port)
    logger.info(f"Metrics exposed on port {port}")


__all__ = [
    "ARTIFACT_RENDER_TIME",
    "ARTIFACT_UPLOAD_BYTES",
    "CONFIRMATION_POLLS",
    "LEDGER_READ_FAILURES",
    "MINT_ATTEMPTS",
    "MINT_PIPELINES_IN_FLIGHT",
    "MINT_STAGE_LATENCY",
    "TRANSLATIONS",
    "TRANSLATION_TEXT_LENGTH",
    "start_metrics_server",
]
