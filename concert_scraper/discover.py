from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from concert_scraper import config
from concert_scraper.models import Candidate
from concert_scraper.pipeline.runlog import print_log

CARD_SELECTOR = '[class*="StoryCard_container"]'
CARD_LINK_SELECTOR = 'a[class*="StoryCard_titleLink"][href]'
CARD_TITLE_SELECTOR = '[class*="StoryCard_title"]'


def is_http_url(url):
    try:
        return urlparse(url).scheme in ("http", "https")
    except ValueError:
        return False


def parse_listing_cards(html, base_url):
    """Extract (url, title) candidates from the story cards on a listing page."""
    soup = BeautifulSoup(html, "html.parser")
    candidates = []
    for card in soup.select(CARD_SELECTOR):
        link = card.select_one(CARD_LINK_SELECTOR)
        if not link:
            continue
        url = urljoin(base_url, link["href"].strip())
        if not is_http_url(url):
            continue
        title_tag = card.select_one(CARD_TITLE_SELECTOR)
        title = " ".join(title_tag.get_text(" ", strip=True).split()) if title_tag else ""
        candidates.append(Candidate(url=url, title=title))
    return candidates


def select_new_candidates(candidates, known_urls):
    """Drop candidates whose url is already in the ledger or was seen earlier in this pass."""
    seen = set(known_urls)
    fresh = []
    for candidate in candidates:
        if candidate.url in seen:
            continue
        seen.add(candidate.url)
        fresh.append(candidate)
    return fresh


class LinkDiscoverer:
    """Collects concert candidates from the press listing, expanding "load more" a bounded number of times."""

    def __init__(self, browser, cfg=None, log_func=None):
        self.browser = browser
        self.config = cfg or config.ScraperConfig()
        self.log = log_func or print_log

    def discover(self, root_url=None, max_expansions=None):
        root_url = root_url or self.config.base_url
        if max_expansions is None:
            max_expansions = self.config.max_load_more_clicks

        self.browser.open(root_url)
        self.expand(max_expansions)

        candidates = parse_listing_cards(self.browser.content(), self.browser.url or root_url)
        self.log(f"  Found {len(candidates)} concert links")
        return candidates

    def expand(self, max_expansions):
        """Click the load-more button up to max_expansions times. Returns the number of clicks."""
        clicks = 0
        for i in range(max_expansions):
            try:
                if not self.browser.click_text(self.config.load_more_text):
                    self.log("  No more concerts to load")
                    break

                try:
                    self.browser.wait_for_network_settle(self.config.network_idle_timeout_ms)
                except Exception:
                    self.log("  Network idle timeout reached, continuing...")

                clicks += 1
                self.log(f"  Loaded more concerts ({i + 1}/{max_expansions})")
                self.browser.wait(self.config.settle_delay_ms)
            except Exception as e:
                self.log(f"  Failed to load more concerts: {e}", "ERROR")
                break
        return clicks
