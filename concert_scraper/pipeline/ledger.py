import json
import os
import tempfile
from pathlib import Path

from concert_scraper import config
from concert_scraper.errors import StorageLoadError, StorageWriteError
from concert_scraper.models import Record
from concert_scraper.pipeline.merge import merge_records
from concert_scraper.pipeline.r2 import download_from_r2, upload_to_r2
from concert_scraper.pipeline.runlog import print_log


class LedgerStore:
    """
    The local JSON file holding every accepted Record, sorted by first date.

    save() is only ever called with the full merged set and replaces the file
    in one step, so an interrupted run leaves the previous ledger in place.
    When R2 credentials are configured the file is mirrored to the bucket.
    """

    def __init__(self, path=config.OUTPUT_PATH, r2_config=None, log_func=None):
        self.path = Path(path)
        self.r2_config = r2_config
        self.log = log_func or print_log

    def read(self):
        """Parse the ledger file. Raises StorageLoadError when it is missing or unreadable."""
        if not self.path.exists():
            raise StorageLoadError(f"{self.path} does not exist")
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageLoadError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, list):
            raise StorageLoadError(f"{self.path} does not contain a JSON array")

        records = []
        for entry in data:
            try:
                records.append(Record.from_json(entry))
            except ValueError as e:
                self.log(f"  Skipping malformed ledger entry: {e}", "WARNING")
        return records

    def load(self):
        """All stored records, or [] when the ledger is missing or corrupt."""
        if self.r2_config:
            download_from_r2(self.r2_config, self.r2_config.ledger_key, self.path, log_func=self.log)
        try:
            records = self.read()
        except StorageLoadError as e:
            self.log(f"No existing concerts loaded: {e}", "WARNING")
            return []
        self.log(f"Loaded {len(records)} existing concerts")
        return records

    def merge(self, existing, fresh):
        return merge_records(existing, fresh)

    def save(self, records):
        """Replace the ledger with records. Raises StorageWriteError on failure."""
        payload = json.dumps([r.to_json() for r in records], indent=2, ensure_ascii=False)
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=self.path.name, suffix=".tmp", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload + "\n")
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageWriteError(f"Error saving concerts to {self.path}: {e}") from e

        self.log(f"Saved {len(records)} concerts to {self.path}")
        if self.r2_config:
            upload_to_r2(self.r2_config, self.r2_config.ledger_key, self.path, log_func=self.log)
