from concert_scraper.models import PLACEHOLDER_EVENT, Contact, ExtractedEvent
from concert_scraper.pipeline.validate import clean_extraction, validate_contact, validate_event


def test_validate_event_rules():
    assert validate_event({"date": "24 juni 2025", "location": "Vorst Nationaal, Brussel"}) is True
    assert validate_event({"date": "24 juni 2025", "location": "NoComma"}) is False
    assert validate_event({"date": "32 invalidmonth 2025", "location": "Venue, City"}) is False
    assert validate_event({"date": "juni 2025", "location": "Venue, City"}) is False
    assert validate_event({"date": 24, "location": "Venue, City"}) is False
    assert validate_event("24 juni 2025") is False


def test_validate_contact_rules():
    assert validate_contact({"name": "Jan Peeters", "email": "jan@livenation.be"}) is True
    assert validate_contact({"name": "Jan Peeters", "email": "jan.livenation.be"}) is False
    assert validate_contact({"name": "", "email": "jan@livenation.be"}) is False
    assert validate_contact({"email": "jan@livenation.be"}) is False


def test_clean_extraction_drops_invalid_events_individually(quiet_log):
    payload = {
        "events": [
            {"date": "24 juni 2025", "location": "Vorst Nationaal, Brussel"},
            {"date": "25 juni 2025", "location": "NoComma"},
            {"date": "32 invalidmonth 2025", "location": "Venue, City"},
        ]
    }
    result = clean_extraction(payload, log_func=quiet_log)

    assert result.events == [ExtractedEvent("24 juni 2025", "Vorst Nationaal, Brussel")]
    warnings = [m for level, m in quiet_log.lines if level == "WARNING"]
    assert len(warnings) == 2


def test_clean_extraction_substitutes_placeholder_when_nothing_valid(quiet_log):
    payload = {"events": [{"date": "soon", "location": "NoComma"}]}
    result = clean_extraction(payload, log_func=quiet_log)

    assert result.events == [PLACEHOLDER_EVENT]
    assert result.is_placeholder is True

    empty = clean_extraction({"events": []}, log_func=quiet_log)
    assert empty.events == [PLACEHOLDER_EVENT]


def test_clean_extraction_dedupes_and_canonicalizes(quiet_log):
    payload = {
        "events": [
            {"date": "24 juni 2025", "location": "Vorst Nationaal, Brussels"},
            {"date": "24 juni 2025", "location": "Vorst Nationaal, Brussel"},
            {"date": "25 juni 2025", "location": "Vorst Nationaal, Bruxelles"},
        ]
    }
    result = clean_extraction(payload, log_func=quiet_log)
    assert result.events == [
        ExtractedEvent("24 juni 2025", "Vorst Nationaal, Brussel"),
        ExtractedEvent("25 juni 2025", "Vorst Nationaal, Brussel"),
    ]


def test_clean_extraction_contact_handling(quiet_log):
    events = [{"date": "24 juni 2025", "location": "Vorst Nationaal, Brussel"}]

    kept = clean_extraction({"events": events, "contact": {"name": "Jan Peeters", "email": "jan@livenation.be"}},
                            log_func=quiet_log)
    assert kept.contact == Contact("Jan Peeters", "jan@livenation.be")

    dropped = clean_extraction({"events": events, "contact": {"name": "Jan Peeters", "email": "n/a"}},
                               log_func=quiet_log)
    assert dropped.contact is None
    assert ("WARNING", "  Removed invalid contact information") in quiet_log.lines

    absent = clean_extraction({"events": events}, log_func=quiet_log)
    assert absent.contact is None
