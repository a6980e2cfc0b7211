# utils/logging_config.py
import logging
import logging.config
import os
import re
from pathlib import Path
import sys

# Subsystems that get their own log file under <log_dir>/<section>/
LOG_SECTIONS = ('coordinator', 'vocabulary', 'encoder', 'artifact', 'connector', 'utils')


def _log_system_info(logger: logging.Logger):
    """Log standardized system information"""
    logger.info("=" * 60)
    logger.info("SYSTEM INFO")
    logger.info("=" * 60)
    logger.info(f"Python version: {sys.version.split()[0]}")
    logger.info(f"Platform: {sys.platform}")
    logger.info(f"Working directory: {os.getcwd()}")
    logger.info("=" * 60)


class SensitiveDataFilter(logging.Filter):
    """Mask common sensitive values in log messages."""
    SENSITIVE_KEYS = (
        'authorization', 'x-api-key', 'api_key', 'apikey', 'api_token',
        'access_token', 'secret', 'password', 'private_key', 'mnemonic', 'seed_phrase'
    )
    MASK = '***'
    _PATTERN = re.compile(
        r"(?P<key>%s)(?P<sep>\s*(?:=>|=|:)\s*)(?P<value>(?:bearer\s+)?[^\s,;]+)"
        % "|".join(re.escape(k) for k in SENSITIVE_KEYS),
        re.IGNORECASE,
    )

    def filter(self, record: logging.LogRecord) -> bool:
        msg = str(record.getMessage())
        masked = self._PATTERN.sub(lambda m: f"{m.group('key')}{m.group('sep')}{self.MASK}", msg)
        if masked != msg:
            record.msg = masked
            record.args = None
        return True


def _section_handler(log_dir: str, section: str) -> dict:
    return {
        'class': 'logging.handlers.RotatingFileHandler',
        'level': 'DEBUG' if section == 'coordinator' else 'INFO',
        'formatter': 'detailed',
        'filters': ['sensitive'],
        'filename': f'{log_dir}/{section}/{section}.log',
        'maxBytes': 10485760,
        'backupCount': 5,
        'encoding': 'utf-8',
    }


def setup_logging(log_dir: str = "logs", log_level: str = "INFO"):
    """Setup comprehensive logging configuration"""
    # Create log directory and standard sections
    for section in LOG_SECTIONS:
        Path(log_dir, section).mkdir(parents=True, exist_ok=True)

    handlers = {
        'console': {
            'class': 'logging.StreamHandler',
            'level': log_level,
            'formatter': 'standard',
            'filters': ['sensitive'],
            'stream': sys.stdout
        },
        # Root/system files
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'level': 'DEBUG',
            'formatter': 'detailed',
            'filters': ['sensitive'],
            'filename': f'{log_dir}/emoji_mint.log',
            'maxBytes': 10485760,
            'backupCount': 5,
            'encoding': 'utf-8',
        },
        'error_file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'level': 'ERROR',
            'formatter': 'detailed',
            'filters': ['sensitive'],
            'filename': f'{log_dir}/errors.log',
            'maxBytes': 10485760,
            'backupCount': 5,
            'encoding': 'utf-8',
        },
    }
    loggers = {}
    for section in LOG_SECTIONS:
        handlers[f'file_{section}'] = _section_handler(log_dir, section)
        loggers[section] = {
            'level': 'DEBUG' if section == 'coordinator' else 'INFO',
            'handlers': ['console', f'file_{section}', 'error_file'],
            'propagate': False
        }

    LOGGING_CONFIG = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'detailed': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(funcName)s() - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },
        'filters': {
            'sensitive': {
                '()': SensitiveDataFilter
            }
        },
        'handlers': handlers,
        'loggers': loggers,
        'root': {
            'level': log_level,
            'handlers': ['console', 'file', 'error_file']
        }
    }

    logging.config.dictConfig(LOGGING_CONFIG)

    # Log startup
    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("Emoji Mint - Logging Initialized")
    logger.info(f"Log directory: {log_dir}")
    logger.info(f"Log level: {log_level}")
    logger.info("=" * 60)

    # Log system info
    _log_system_info(logger)
