from concert_scraper import config
from concert_scraper.models import SHEET_HEADERS
from concert_scraper.pipeline.io import utc_timestamp
from concert_scraper.pipeline.runlog import print_log
from concert_scraper.sheets import sheet_range

URL_COLUMN = 5
COMPARED_CELLS = 6
LOCATION_COLUMN = 2


def stored_cells(row):
    """First six cells of a sheet row as strings; the API drops trailing empty cells."""
    cells = ["" if c is None else str(c) for c in row[:COMPARED_CELLS]]
    return cells + [""] * (COMPARED_CELLS - len(cells))


def index_rows(values):
    """
    Map url -> [(row_number, cells)] for every data row.
    values[0] is the header, so values[i] lives on sheet row i + 1.
    """
    by_url = {}
    for i, row in enumerate(values):
        if i == 0 or len(row) <= URL_COLUMN or not row[URL_COLUMN]:
            continue
        by_url.setdefault(row[URL_COLUMN], []).append((i + 1, stored_cells(row)))
    return by_url


def classify_records(records, by_url):
    """
    Split records into (new, updated, unchanged) against the indexed sheet rows.

    A record whose url has no row is new. Otherwise it is matched to one of the
    rows for its url: first a row with identical cells (unchanged), then a row
    with the same location, then any remaining row (updated). A candidate with
    several locations shares one url, so each row is matched at most once; a
    record left without a row is new.
    Returns (new_records, [(record, row_number)], unchanged_records).
    """
    claimed = set()
    matched = {}
    unchanged_indexes = set()

    def claim(index, rows, predicate):
        for row_number, cells in rows:
            if row_number not in claimed and predicate(cells):
                claimed.add(row_number)
                matched[index] = row_number
                return True
        return False

    for index, record in enumerate(records):
        cells = record.comparable_cells()
        if claim(index, by_url.get(record.url, []), lambda stored: stored == cells):
            unchanged_indexes.add(index)

    for index, record in enumerate(records):
        if index in matched:
            continue
        rows = by_url.get(record.url, [])
        if not claim(index, rows, lambda stored: stored[LOCATION_COLUMN] == record.location):
            claim(index, rows, lambda stored: True)

    new, updated, unchanged = [], [], []
    for index, record in enumerate(records):
        if index not in matched:
            new.append(record)
        elif index in unchanged_indexes:
            unchanged.append(record)
        else:
            updated.append((record, matched[index]))
    return new, updated, unchanged


class Reconciler:
    """
    Keeps a Google Sheets tab in line with the ledger.

    sync() writes the header when the tab is empty, appends new records in one
    batch and rewrites changed rows one range at a time. The "Last Updated"
    column is stamped on every write and ignored when comparing.
    """

    def __init__(self, client, sheet_name=config.SHEET_NAME, log_func=None):
        self.client = client
        self.sheet_name = sheet_name
        self.log = log_func or print_log

    @property
    def full_range(self):
        return sheet_range(self.sheet_name, "A:G")

    def read_existing(self):
        """Current rows, or [] when the tab is empty or can't be read."""
        try:
            return self.client.read_rows(self.full_range)
        except Exception as e:
            self.log(f"  Sheet appears to be empty or doesn't exist ({e})")
            return []

    def sync(self, records):
        self.client.ensure_sheet(self.sheet_name)

        values = self.read_existing()
        needs_headers = not values
        by_url = index_rows(values)
        if not needs_headers:
            self.log(f"  Found {sum(len(rows) for rows in by_url.values())} existing concerts in the sheet")

        new, updated, unchanged = classify_records(records, by_url)
        self.log(
            f"  Found {len(new)} new concerts and {len(updated)} concerts to update "
            f"({len(unchanged)} unchanged)"
        )

        if needs_headers and (new or updated):
            self.client.append_rows(self.full_range, [SHEET_HEADERS])

        timestamp = utc_timestamp()
        if new:
            self.client.append_rows(self.full_range, [r.to_row(timestamp) for r in new])
            self.log(f"  Added {len(new)} new concerts")

        for record, row_number in updated:
            self.client.update_rows(
                sheet_range(self.sheet_name, f"A{row_number}:G{row_number}"),
                [record.to_row(timestamp)],
            )
        if updated:
            self.log(f"  Updated {len(updated)} existing concerts")

        if not new and not updated:
            self.log("  No changes needed - all concerts are up to date")
        return {"added": len(new), "updated": len(updated)}

    def append_new(self, records):
        """Append records whose url isn't in the sheet yet; existing rows are never touched."""
        self.client.ensure_sheet(self.sheet_name)

        values = self.read_existing()
        existing_urls = set(index_rows(values))
        new = [r for r in records if r.url not in existing_urls]
        if not new:
            self.log("  No new concerts to add - all concerts already exist in the sheet")
            return {"added": 0, "updated": 0}

        self.log(f"  Found {len(new)} new concerts to append ({len(records) - len(new)} duplicates skipped)")
        timestamp = utc_timestamp()
        rows = [r.to_row(timestamp) for r in new]
        self.client.append_rows(self.full_range, ([SHEET_HEADERS] if not values else []) + rows)
        return {"added": len(new), "updated": 0}

    def replace_all(self, records):
        """Clear the tab and write the header plus every record."""
        self.client.ensure_sheet(self.sheet_name)
        self.client.clear(self.full_range)

        timestamp = utc_timestamp()
        rows = [SHEET_HEADERS] + [r.to_row(timestamp) for r in records]
        self.client.update_rows(sheet_range(self.sheet_name, "A1"), rows)
        self.log(f"  Successfully pushed {len(records)} concerts to Google Sheets")
        return {"added": len(records), "updated": 0}
