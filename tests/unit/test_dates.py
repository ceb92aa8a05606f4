from concert_scraper.utils.dates import date_sort_key, is_event_date, parse_event_date, sort_dates


def test_is_event_date_shape():
    assert is_event_date("24 juni 2025") is True
    assert is_event_date("3 JULI 2025") is True
    assert is_event_date(" 7 mars 2026 ") is True
    assert is_event_date("2025-06-24") is False
    assert is_event_date("24 juni") is False
    assert is_event_date("Date not found") is False
    assert is_event_date(None) is False


def test_parse_event_date_dutch_and_french_months():
    assert parse_event_date("24 juni 2025").date().isoformat() == "2025-06-24"
    assert parse_event_date("3 juli 2025").date().isoformat() == "2025-07-03"
    assert parse_event_date("7 mars 2026").date().isoformat() == "2026-03-07"
    assert parse_event_date("Date not found") is None


def test_sort_dates_is_chronological_across_years():
    dates = ["3 juli 2025", "12 februari 2026", "24 juni 2025", "1 december 2025"]
    assert sort_dates(dates) == ["24 juni 2025", "3 juli 2025", "1 december 2025", "12 februari 2026"]


def test_unparseable_dates_sort_last_and_keep_order():
    dates = ["Date not found", "24 juni 2025", "binnenkort", "3 juli 2025"]
    assert sort_dates(dates) == ["24 juni 2025", "3 juli 2025", "Date not found", "binnenkort"]
    assert date_sort_key("Date not found") > date_sort_key("31 december 2099")
