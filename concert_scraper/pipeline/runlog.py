import re
from datetime import datetime, timedelta, timezone

from concert_scraper import config


def print_log(message, level="INFO"):
    """Default log sink: console only, warnings and errors get a prefix."""
    if level in ("WARNING", "ERROR"):
        print(f"{level}: {message}")
    else:
        print(message)


def trim_log_by_time(log_path, retention_days=14):
    """
    Remove log entries older than retention_days.
    Returns list of lines to keep.
    """
    if not log_path.exists():
        return []

    cutoff = datetime.now(timezone.utc) - timedelta(days=retention_days)
    cutoff_str = cutoff.strftime("%Y-%m-%d %H:%M:%S")

    kept_lines = []
    current_entry_recent = False

    with open(log_path, "r", encoding="utf-8") as f:
        for line in f:
            match = re.match(r"\[(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\]", line)
            if match:
                current_entry_recent = match.group(1) >= cutoff_str

            if current_entry_recent:
                kept_lines.append(line)

    return kept_lines


class RunLog:
    """
    Log sink for one pipeline run.
    Prints each message and keeps a timestamped copy that save() appends to the run log file.
    """

    def __init__(self, log_path=config.LOG_PATH, retention_days=config.LOG_RETENTION_DAYS):
        self.log_path = log_path
        self.retention_days = retention_days
        self.lines = []

    def __call__(self, message, level="INFO"):
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        print_log(message, level)
        self.lines.append(f"[{timestamp}] [{level}] {message}")

    def save(self):
        """Write this run's lines after the entries still inside the retention window."""
        existing = trim_log_by_time(self.log_path, retention_days=self.retention_days)
        content = existing + ["\n--- New Run ---\n"] + [line + "\n" for line in self.lines]

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.log_path, "w", encoding="utf-8") as f:
            f.writelines(content)
