# Project: mapbox-geocoder
# Owner: GreenUnicorn
"""
utils.py — Shared utilities: failure logging.
"""

from datetime import datetime
from pathlib import Path


DEFAULT_LOG_PATH = Path("logs/geocoder.log")


def log_error(message: str, log_path: Path = DEFAULT_LOG_PATH) -> None:
    """Append a timestamped ERROR line to the log file.

    Args:
        message: Error description to log.
        log_path: Destination log file path. Parent directories are created
            as needed.
    """
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with open(log_path, "a") as f:
            f.write(f"{timestamp} [ERROR] {message}\n")
    except OSError:
        pass  # Never crash on logging failure
