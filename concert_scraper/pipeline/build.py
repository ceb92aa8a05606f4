from concert_scraper.models import Record
from concert_scraper.utils.dates import sort_dates


def group_dates_by_location(events):
    """Map location -> unique dates, keeping first-seen order for both."""
    grouped = {}
    for event in events:
        dates = grouped.setdefault(event.location, [])
        if event.date not in dates:
            dates.append(event.date)
    return grouped


def build_records(candidate, extraction):
    """One Record per location found for a candidate, dates sorted chronologically."""
    return [
        Record(
            title=candidate.title,
            dates=sort_dates(dates),
            location=location,
            url=candidate.url,
            contact=extraction.contact,
        )
        for location, dates in group_dates_by_location(extraction.events).items()
    ]
