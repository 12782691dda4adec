"""
Event Logger — Writes timestamped lines to the console and a per-component log file.
"""
import os
from datetime import datetime

from txn_history.config import get_settings


def log_event(component: str, message: str) -> str:
    """Log a line as `<iso-ts> - <COMPONENT>: <message>`.

    The line goes to stdout and is appended to LOG_DIR/<component>.log.
    Returns the formatted line.
    """
    ts = datetime.now().isoformat()
    line = f"{ts} - {component.upper()}: {message}"
    print(line)
    try:
        log_dir = get_settings().LOG_DIR
        os.makedirs(log_dir, exist_ok=True)
        with open(os.path.join(log_dir, f"{component.lower()}.log"), "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except OSError:
        # Console line is enough
        pass
    return line
