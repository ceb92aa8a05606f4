from concert_scraper.models import PLACEHOLDER_EVENT, Contact, ExtractedEvent, ExtractionResult
from concert_scraper.pipeline.runlog import print_log
from concert_scraper.utils.dates import parse_event_date
from concert_scraper.utils.locations import canonicalize_location


def validate_event(event):
    """
    Check that an extracted event has a "Venue, City" location and a
    "DD monthname YYYY" date naming a real calendar day.
    """
    if not isinstance(event, dict):
        return False
    date = event.get("date")
    location = event.get("location")
    if not isinstance(date, str) or not isinstance(location, str):
        return False
    return "," in location and parse_event_date(date) is not None


def validate_contact(contact):
    if not isinstance(contact, dict):
        return False
    return Contact.is_valid(contact.get("name"), contact.get("email"))


def clean_extraction(payload, log_func=None):
    """
    Turn a parsed model payload into an ExtractionResult.

    Invalid events and an invalid contact are dropped individually (with a
    warning), the remaining events are de-duplicated on (date, location), and
    when nothing is left the "Date not found" placeholder takes their place.
    The caller has already checked that payload["events"] is a list.
    """
    log = log_func or print_log

    events = []
    seen = set()
    for raw in payload.get("events", []):
        if not validate_event(raw):
            log(f"  Filtered out invalid event: {raw!r}", "WARNING")
            continue
        event = ExtractedEvent(
            date=" ".join(raw["date"].split()),
            location=canonicalize_location(raw["location"]),
        )
        key = (event.date.lower(), event.location)
        if key in seen:
            continue
        seen.add(key)
        events.append(event)

    contact = None
    raw_contact = payload.get("contact")
    if raw_contact:
        if validate_contact(raw_contact):
            contact = Contact(name=raw_contact["name"].strip(), email=raw_contact["email"].strip())
        else:
            log("  Removed invalid contact information", "WARNING")

    return ExtractionResult(events=events or [PLACEHOLDER_EVENT], contact=contact)
