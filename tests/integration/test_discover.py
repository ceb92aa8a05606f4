from concert_scraper.config import ScraperConfig
from concert_scraper.discover import LinkDiscoverer, parse_listing_cards, select_new_candidates
from concert_scraper.models import Candidate

LISTING_URL = "https://press.livenation.be/category/nieuw-concert"
COLDPLAY = "https://press.livenation.be/nieuw-concert/coldplay-koning-boudewijnstadion"
EDITORS = "https://press.livenation.be/nieuw-concert/editors-vorst-nationaal"


def card(href, title):
    return (
        '<div class="StoryCard_container__MsB7x">'
        f'<a class="StoryCard_titleLink__a9F2k" href="{href}"><h3 class="StoryCard_title__Qw3rt">{title}</h3></a>'
        "</div>"
    )


def listing(*cards):
    return "<html><body><main>" + "".join(cards) + "</main></body></html>"


def config(max_clicks=3):
    return ScraperConfig(max_load_more_clicks=max_clicks, settle_delay_ms=0)


def test_parse_listing_cards_resolves_and_filters(listing_html):
    candidates = parse_listing_cards(listing_html, LISTING_URL)

    assert candidates == [
        Candidate(url=COLDPLAY, title="Coldplay komt naar het Koning Boudewijnstadion"),
        Candidate(url=EDITORS, title="Editors in Vorst Nationaal"),
    ]


def test_discover_expands_until_button_disappears(quiet_log, make_browser):
    pages = [
        listing(card("/a", "Band A")),
        listing(card("/a", "Band A"), card("/b", "Band B")),
    ]
    browser = make_browser(pages)

    candidates = LinkDiscoverer(browser, config(), log_func=quiet_log).discover(LISTING_URL)

    assert [c.title for c in candidates] == ["Band A", "Band B"]
    assert browser.clicks == 2
    assert browser.expansions == 1
    assert ("INFO", "  No more concerts to load") in quiet_log.lines


def test_discover_respects_expansion_budget(quiet_log, make_browser):
    pages = [listing(*[card(f"/{n}", f"Band {n}") for n in range(i + 1)]) for i in range(6)]
    browser = make_browser(pages)

    candidates = LinkDiscoverer(browser, config(max_clicks=2), log_func=quiet_log).discover(LISTING_URL)

    assert browser.clicks == 2
    assert len(candidates) == 3
    assert browser.waits == [0, 0]


def test_discover_zero_expansions_reads_initial_page(quiet_log, listing_html, make_browser):
    browser = make_browser([listing_html, listing_html])

    candidates = LinkDiscoverer(browser, config(), log_func=quiet_log).discover(LISTING_URL, max_expansions=0)

    assert browser.clicks == 0
    assert len(candidates) == 2


def test_click_failure_keeps_links_already_visible(quiet_log, make_browser):
    pages = [listing(card("/a", "Band A")), listing(card("/a", "Band A"), card("/b", "Band B")), listing()]
    browser = make_browser(pages, fail_click_at=2)

    candidates = LinkDiscoverer(browser, config(), log_func=quiet_log).discover(LISTING_URL)

    assert [c.title for c in candidates] == ["Band A", "Band B"]
    assert any(level == "ERROR" and "Failed to load more" in message for level, message in quiet_log.lines)


def test_settle_timeout_is_not_fatal(quiet_log, make_browser):
    pages = [listing(card("/a", "Band A")), listing(card("/a", "Band A"), card("/b", "Band B"))]
    browser = make_browser(pages, settle_fails=True)

    candidates = LinkDiscoverer(browser, config(max_clicks=1), log_func=quiet_log).discover(LISTING_URL)

    assert len(candidates) == 2
    assert ("INFO", "  Network idle timeout reached, continuing...") in quiet_log.lines


def test_select_new_candidates_skips_known_and_repeated_urls():
    candidates = [
        Candidate(url="https://x/1", title="Known"),
        Candidate(url="https://x/2", title="New"),
        Candidate(url="https://x/2", title="New again"),
        Candidate(url="https://x/3", title="Other"),
    ]

    fresh = select_new_candidates(candidates, {"https://x/1"})

    assert [c.title for c in fresh] == ["New", "Other"]
