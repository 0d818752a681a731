"""
FILE DESCRIPTION: Foundational module for global configuration and logging.
KEY FUNCTIONS/CLASSES: setup_logger, CompanyFormatter, configuration constants
"""

import logging
import sys
import os
from datetime import datetime
from pathlib import Path
from dotenv import load_dotenv

# === CONFIGURATION SECTION ===

# Load .env at the beginning of core
load_dotenv(Path(__file__).resolve().parents[1] / '.env')

# Network timeout for plain HTTP requests (seconds)
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", 30))

USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36",
)

# canonical data directory for exported datasets
DATA_DIR = Path(os.getenv("DATA_DIR", Path(__file__).resolve().parents[1] / 'data'))

# Worker / crawl scope parameters
MAX_WORKERS = int(os.getenv("MAX_WORKERS", 3))
MAX_DEPTH = int(os.getenv("MAX_DEPTH", 2))
MAX_REQUEST_RETRIES = int(os.getenv("MAX_REQUEST_RETRIES", 3))

# Inner request handler timeout (seconds). Bounds the static dry run.
REQUEST_HANDLER_TIMEOUT = float(os.getenv("REQUEST_HANDLER_TIMEOUT", 60))

# Fraction of requests sampled for rendering type detection in steady state
DETECTION_RATIO = float(os.getenv("DETECTION_RATIO", 0.1))

# Playwright waiting periods (seconds)
JS_GOTO_TIMEOUT = int(os.getenv("JS_GOTO_TIMEOUT", 25))
JS_DEFAULT_TIMEOUT = int(os.getenv("JS_DEFAULT_TIMEOUT", 30))
HEADLESS = os.getenv("HEADLESS", "1") not in ("0", "false", "False")


# === LOGGING SECTION ===

class CompanyFormatter(logging.Formatter):
    """
    FLOW: Receives a log record -> Extracts timestamp -> Formats according to company standard
    (e.g., [ Tue Jan 06 05:32:41 AM UTC 2026 ]) -> Prepends level and context -> Returns final string.
    """
    def format(self, record):
        dt = datetime.fromtimestamp(record.created)
        timestamp = dt.strftime("%a %b %d %I:%M:%S %p UTC %Y")
        context = getattr(record, 'context', 'root')
        message = f"[ {timestamp} ] : {record.levelname} : {context} : {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message

def setup_logger(name="adaptive_crawler", log_file=None, level=logging.INFO):
    """
    FLOW: Initializes/Retrieves logger -> Checks for existing handlers to prevent duplicates ->
    Sets propagation for child loggers -> Attaches Console and optional File handlers with CompanyFormatter.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if name != "adaptive_crawler":
        logger.propagate = True
        setup_logger("adaptive_crawler", log_file=log_file, level=level)
        return logger

    formatter = CompanyFormatter()

    if not logger.handlers:
        # Console handler
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # File handler (optional, added once per path)
    if log_file and not any(
        isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_file)
        for h in logger.handlers
    ):
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger

def context_logger(context_name: str) -> logging.LoggerAdapter:
    """Per-worker logger; the context name shows up in the formatted line."""
    return logging.LoggerAdapter(logger, {"context": context_name})

# Global logger instance
logger = setup_logger()
