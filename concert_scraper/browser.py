from playwright.sync_api import sync_playwright

from concert_scraper import config
from concert_scraper.pipeline.runlog import print_log

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)

# Runs inside the page: click the first <button> whose text contains the phrase.
CLICK_BUTTON_JS = """
(phrase) => {
    const buttons = Array.from(document.querySelectorAll('button'));
    const match = buttons.find((b) => (b.textContent || '').trim().toLowerCase().includes(phrase));
    if (!match) return false;
    match.click();
    return true;
}
"""


class BrowserSession:
    """
    Headless Chromium page used for the listing and detail pages.

    Exposes only what the pipeline needs: open a url, click a button by its
    text, wait for the network to settle, and read the rendered HTML.
    """

    def __init__(self, headless=True, settle_delay_ms=config.SETTLE_DELAY_MS,
                 navigation_timeout_ms=30000, log_func=None):
        self.headless = headless
        self.settle_delay_ms = settle_delay_ms
        self.navigation_timeout_ms = navigation_timeout_ms
        self.log = log_func or print_log
        self._playwright = None
        self._browser = None
        self._page = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def start(self):
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(
            headless=self.headless,
            args=["--no-sandbox", "--disable-setuid-sandbox"],
        )
        self._page = self._browser.new_page(
            user_agent=USER_AGENT,
            viewport={"width": 1280, "height": 800},
        )
        self._page.on("console", lambda msg: self.log(f"  Browser console: {msg.text}"))
        self._page.on("pageerror", lambda err: self.log(f"  Page error: {err}"))

    def close(self):
        if self._browser:
            self._browser.close()
        if self._playwright:
            self._playwright.stop()
        self._browser = None
        self._playwright = None
        self._page = None

    @property
    def page(self):
        if self._page is None:
            raise RuntimeError("Browser page not initialized. Call start() first.")
        return self._page

    def open(self, url):
        """Navigate and wait until the network is idle plus a fixed settle delay."""
        self.page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout_ms)
        self.wait(self.settle_delay_ms)

    def click_text(self, phrase):
        """Click the first button containing phrase (case-insensitive). Returns False if absent."""
        return bool(self.page.evaluate(CLICK_BUTTON_JS, phrase.strip().lower()))

    def wait_for_network_settle(self, timeout_ms):
        self.page.wait_for_load_state("networkidle", timeout=timeout_ms)

    def wait(self, ms):
        self.page.wait_for_timeout(ms)

    def content(self):
        return self.page.content()

    @property
    def url(self):
        return self.page.url

    def fetch_html(self, url):
        """Rendered HTML of a detail page."""
        self.open(url)
        return self.content()
