import copy
import io
import re
from pathlib import Path

import pytest
from botocore.exceptions import ClientError

from concert_scraper.config import R2Config

FIXTURES = Path(__file__).parent / "fixtures"


class FakeBrowser:
    """
    Stands in for BrowserSession.
    listing_pages[i] is the listing HTML after i load-more clicks; detail pages are looked up by url.
    """

    def __init__(self, listing_pages, detail_pages=None, fail_click_at=None, settle_fails=False):
        self.listing_pages = listing_pages
        self.detail_pages = detail_pages or {}
        self.fail_click_at = fail_click_at
        self.settle_fails = settle_fails
        self.url = None
        self.expansions = 0
        self.clicks = 0
        self.opened = []
        self.waits = []

    def open(self, url):
        self.url = url
        self.opened.append(url)

    def click_text(self, phrase):
        self.clicks += 1
        if self.fail_click_at is not None and self.clicks == self.fail_click_at:
            raise RuntimeError("Execution context was destroyed")
        if self.expansions + 1 >= len(self.listing_pages):
            return False
        self.expansions += 1
        return True

    def wait_for_network_settle(self, timeout_ms):
        if self.settle_fails:
            raise TimeoutError(f"Timeout {timeout_ms}ms exceeded")

    def wait(self, ms):
        self.waits.append(ms)

    def content(self):
        if self.url in self.detail_pages:
            return self.detail_pages[self.url]
        return self.listing_pages[self.expansions]

    def fetch_html(self, url):
        self.open(url)
        if url not in self.detail_pages:
            raise RuntimeError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        return self.detail_pages[url]


class FakeSheetsClient:
    """In-memory stand-in for SheetsClient; values holds the tab's rows including the header."""

    def __init__(self, values=None, fail_read=False):
        self.values = values if values is not None else []
        self.fail_read = fail_read
        self.sheets = set()
        self.calls = []
        self.url = "https://docs.google.com/spreadsheets/d/test-sheet"
        self.service_account_email = "scraper@project.iam.gserviceaccount.com"

    def ensure_sheet(self, sheet_name):
        self.calls.append(("ensure_sheet", sheet_name))
        created = sheet_name not in self.sheets
        self.sheets.add(sheet_name)
        return created

    def read_rows(self, range_):
        self.calls.append(("read", range_))
        if self.fail_read:
            raise RuntimeError("Unable to parse range")
        return copy.deepcopy(self.values)

    def append_rows(self, range_, rows):
        self.calls.append(("append", range_, copy.deepcopy(rows)))
        self.values.extend(copy.deepcopy(rows))

    def update_rows(self, range_, rows):
        self.calls.append(("update", range_, copy.deepcopy(rows)))
        start = int(re.search(r"!A(\d+)", range_).group(1))
        for offset, row in enumerate(rows):
            index = start - 1 + offset
            while len(self.values) <= index:
                self.values.append([])
            self.values[index] = list(row)

    def clear(self, range_):
        self.calls.append(("clear", range_))
        self.values = []

    def writes(self):
        return [c for c in self.calls if c[0] in ("append", "update", "clear")]


@pytest.fixture
def listing_html():
    return (FIXTURES / "listing.html").read_text(encoding="utf-8")


@pytest.fixture
def detail_html():
    return (FIXTURES / "detail.html").read_text(encoding="utf-8")


@pytest.fixture
def fake_sheets():
    return FakeSheetsClient()


@pytest.fixture
def quiet_log():
    lines = []

    def log(message, level="INFO"):
        lines.append((level, message))

    log.lines = lines
    return log


@pytest.fixture
def make_browser():
    return FakeBrowser


@pytest.fixture
def make_sheets():
    return FakeSheetsClient


class FakeS3Client:
    """In-memory stand-in for the boto3 S3 client used for R2."""

    def __init__(self, objects=None, fail=False):
        self.objects = dict(objects or {})
        self.fail = fail
        self.puts = []

    def _error(self, code, operation):
        return ClientError({"Error": {"Code": code, "Message": code}}, operation)

    def get_object(self, Bucket, Key):
        if self.fail:
            raise self._error("InternalError", "GetObject")
        if Key not in self.objects:
            raise self._error("NoSuchKey", "GetObject")
        return {"Body": io.BytesIO(self.objects[Key])}

    def put_object(self, Bucket, Key, Body, ContentType):
        if self.fail:
            raise self._error("InternalError", "PutObject")
        self.puts.append((Bucket, Key, Body, ContentType))
        self.objects[Key] = Body


@pytest.fixture
def fake_r2(monkeypatch):
    """Patch the R2 client factory; returns a function that installs a FakeS3Client."""
    def install(objects=None, fail=False):
        client = FakeS3Client(objects, fail=fail)
        monkeypatch.setattr("concert_scraper.pipeline.r2._client", lambda r2_config: client)
        return client

    return install


@pytest.fixture
def r2_config():
    return R2Config(account_id="acct", access_key_id="key", secret_access_key="secret")
