from concert_scraper.utils.dates import date_sort_key


def first_date_key(record):
    """Sort key on a record's earliest date; records without a usable date go last."""
    if not record.dates:
        return date_sort_key(None)
    return date_sort_key(record.dates[0])


def merge_records(existing_records, new_records):
    """
    Merge freshly built records into the ledger.
    - Existing records are kept as they are (the pipeline never rebuilds a known url)
    - The result is stable-sorted by each record's first date
    Returns merged list.
    """
    return sorted(list(existing_records) + list(new_records), key=first_date_key)


def known_urls(records):
    return {record.url for record in records}
