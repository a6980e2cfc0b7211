# monitoring/metrics.py
"""
Central metrics definitions for the Emoji Mint system.
This file defines all metrics used across the system to ensure consistency.
"""

from prometheus_client import Counter, Histogram, Gauge
import logging

logger = logging.getLogger(__name__)

# Translation metrics
TRANSLATIONS = Counter(
    'emoji_translations_total',
    'Total number of text-to-symbol translations',
    ['dictionary']
)

TRANSLATION_TEXT_LENGTH = Histogram(
    'emoji_translation_text_length_chars',
    'Length of translated input text in characters',
    ['dictionary'],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000]
)

# Artifact metrics
ARTIFACT_RENDER_TIME = Histogram(
    'artifact_render_time_seconds',
    'Time to render the preview image in seconds',
    ['theme'],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0]
)

ARTIFACT_UPLOAD_BYTES = Histogram(
    'artifact_upload_bytes',
    'Bytes sent to content-addressed storage per artifact',
    ['backend'],
    buckets=[1024, 10240, 51200, 102400, 512000, 1048576, 5242880]
)

# Mint pipeline metrics
MINT_ATTEMPTS = Counter(
    'mint_attempts_total',
    'Total number of mint attempts by outcome and stage',
    ['outcome', 'stage']  # outcome: success, failed, rejected
)

MINT_STAGE_LATENCY = Histogram(
    'mint_stage_latency_seconds',
    'Duration of each mint pipeline stage in seconds',
    ['stage'],
    buckets=[0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0]
)

MINT_PIPELINES_IN_FLIGHT = Gauge(
    'mint_pipelines_in_flight',
    'Number of mint pipelines currently uploading or minting'
)

CONFIRMATION_POLLS = Counter(
    'mint_confirmation_polls_total',
    'Receipt polls issued while waiting for confirmation',
    ['result']  # confirmed, pending, error
)

# Ledger read metrics
LEDGER_READ_FAILURES = Counter(
    'ledger_read_failures_total',
    'Read-only ledger queries that failed',
    ['field']
)
