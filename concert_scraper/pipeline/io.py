import json
import traceback
from datetime import datetime, timezone

from concert_scraper.pipeline.runlog import print_log


def utc_timestamp():
    """ISO-8601 UTC timestamp with milliseconds, e.g. 2025-06-24T10:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_error_entry(url, title, error, timestamp=None):
    """Markdown block describing one failed candidate."""
    timestamp = timestamp or utc_timestamp()
    message = str(error) or type(error).__name__
    trace = ""
    if isinstance(error, BaseException) and error.__traceback__ is not None:
        trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))

    entry = f"\n## Error for {title}\n- **URL**: {url}\n- **Timestamp**: {timestamp}\n- **Error Message**: {message}\n"
    if trace:
        entry += f"- **Stack Trace**:\n```\n{trace.rstrip()}\n```\n"
    return entry + "\n---\n"


def append_error_entry(errors_path, url, title, error, log_func=None):
    """
    Append a failed candidate to the errors file.
    Never raises; a failure to write is only logged.
    """
    log = log_func or print_log
    try:
        errors_path.parent.mkdir(parents=True, exist_ok=True)
        with open(errors_path, "a", encoding="utf-8") as f:
            f.write(format_error_entry(url, title, error))
        log(f"  Error logged for {title} at {errors_path}", "ERROR")
    except OSError as e:
        log(f"  Failed to log error: {e}", "ERROR")


def load_existing_status(status_path):
    """Load the previous scrape status file if available."""
    try:
        if status_path.exists():
            with open(status_path, "r", encoding="utf-8") as f:
                return json.load(f)
    except (OSError, ValueError):
        pass
    return {}


def save_status(status_path, status):
    status_path.parent.mkdir(parents=True, exist_ok=True)
    with open(status_path, "w", encoding="utf-8") as f:
        json.dump(status, f, indent=2)
