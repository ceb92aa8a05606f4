import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

REPO_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = REPO_ROOT / "data"
OUTPUT_PATH = DATA_DIR / "concerts.json"
ERRORS_PATH = DATA_DIR / "errors.md"
STATUS_PATH = DATA_DIR / "scrape-status.json"
LOG_PATH = DATA_DIR / "scrape-log.txt"
LOG_RETENTION_DAYS = 14

BASE_URL = "https://press.livenation.be/category/nieuw-concert"
LOAD_MORE_TEXT = "meer laden"
MAX_LOAD_MORE_CLICKS = 3
NETWORK_IDLE_TIMEOUT_MS = 5000
SETTLE_DELAY_MS = 2000
DELAY_BETWEEN_REQUESTS = 1.0
MAX_CONTENT_LENGTH = 8000

OPENAI_BASE_URL = "https://api.openai.com/v1"
OPENAI_MODEL = "gpt-3.5-turbo"
OPENAI_TEMPERATURE = 0
OPENAI_MAX_TOKENS = 1000
OPENAI_TIMEOUT = 60
LLM_MAX_RETRIES = 3

SHEET_NAME = "Livenation Shows"
SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

R2_BUCKET_NAME = "press-concerts-data"
R2_LEDGER_KEY = "concerts.json"


def _env_bool(env, name, default):
    value = env.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class OpenAIConfig:
    api_key: str = ""
    model: str = OPENAI_MODEL
    temperature: float = OPENAI_TEMPERATURE
    max_tokens: int = OPENAI_MAX_TOKENS
    base_url: str = OPENAI_BASE_URL
    timeout: float = OPENAI_TIMEOUT
    max_retries: int = LLM_MAX_RETRIES


@dataclass
class SheetsConfig:
    spreadsheet_id: str = ""
    sheet_name: str = SHEET_NAME
    service_account_file: str = ""
    service_account_json: str = ""

    @property
    def has_credentials(self):
        return bool(self.service_account_file or self.service_account_json)

    @property
    def enabled(self):
        return bool(self.spreadsheet_id) and self.has_credentials

    def service_account_info(self):
        """Parse the inline service account JSON, or None when a key file is used."""
        if not self.service_account_json:
            return None
        return json.loads(self.service_account_json)


@dataclass
class R2Config:
    account_id: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""
    bucket_name: str = R2_BUCKET_NAME
    ledger_key: str = R2_LEDGER_KEY

    @property
    def enabled(self):
        return all([self.account_id, self.access_key_id, self.secret_access_key])


@dataclass
class ScraperConfig:
    base_url: str = BASE_URL
    output_path: Path = OUTPUT_PATH
    errors_path: Path = ERRORS_PATH
    status_path: Path = STATUS_PATH
    log_path: Path = LOG_PATH
    headless: bool = True
    load_more_text: str = LOAD_MORE_TEXT
    max_load_more_clicks: int = MAX_LOAD_MORE_CLICKS
    network_idle_timeout_ms: int = NETWORK_IDLE_TIMEOUT_MS
    settle_delay_ms: int = SETTLE_DELAY_MS
    delay_between_requests: float = DELAY_BETWEEN_REQUESTS
    max_content_length: int = MAX_CONTENT_LENGTH
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    sheets: SheetsConfig = field(default_factory=SheetsConfig)
    r2: R2Config = field(default_factory=R2Config)


def load_config(environ=None):
    """
    Build the run configuration from the environment (and .env).
    Called once per process; the result is passed to each component.
    """
    env = os.environ if environ is None else environ
    output_path = Path(env.get("SCRAPER_OUTPUT_PATH") or OUTPUT_PATH)

    return ScraperConfig(
        base_url=env.get("SCRAPER_BASE_URL") or BASE_URL,
        output_path=output_path,
        errors_path=Path(env.get("SCRAPER_ERRORS_PATH") or output_path.parent / ERRORS_PATH.name),
        status_path=Path(env.get("SCRAPER_STATUS_PATH") or output_path.parent / STATUS_PATH.name),
        log_path=Path(env.get("SCRAPER_LOG_PATH") or output_path.parent / LOG_PATH.name),
        headless=_env_bool(env, "SCRAPER_HEADLESS", True),
        max_load_more_clicks=int(env.get("SCRAPER_MAX_LOAD_MORE", MAX_LOAD_MORE_CLICKS)),
        delay_between_requests=float(env.get("SCRAPER_DELAY_SECONDS", DELAY_BETWEEN_REQUESTS)),
        openai=OpenAIConfig(
            api_key=env.get("OPENAI_API_KEY", ""),
            model=env.get("OPENAI_MODEL") or OPENAI_MODEL,
            base_url=(env.get("OPENAI_BASE_URL") or OPENAI_BASE_URL).rstrip("/"),
        ),
        sheets=SheetsConfig(
            spreadsheet_id=env.get("GOOGLE_SPREADSHEET_ID", ""),
            sheet_name=env.get("GOOGLE_SHEET_NAME") or SHEET_NAME,
            service_account_file=env.get("GOOGLE_SERVICE_ACCOUNT_KEY_FILE", ""),
            service_account_json=env.get("GOOGLE_SERVICE_ACCOUNT_JSON", ""),
        ),
        r2=R2Config(
            account_id=env.get("R2_ACCOUNT_ID", ""),
            access_key_id=env.get("R2_ACCESS_KEY_ID", ""),
            secret_access_key=env.get("R2_SECRET_ACCESS_KEY", ""),
            bucket_name=env.get("R2_BUCKET_NAME") or R2_BUCKET_NAME,
        ),
    )


def missing_settings(cfg):
    """Names of the settings a full scrape-and-sync run needs but doesn't have."""
    missing = []
    if not cfg.openai.api_key:
        missing.append("OPENAI_API_KEY")
    if not cfg.sheets.spreadsheet_id:
        missing.append("GOOGLE_SPREADSHEET_ID")
    if not cfg.sheets.has_credentials:
        missing.append("GOOGLE_SERVICE_ACCOUNT_KEY_FILE or GOOGLE_SERVICE_ACCOUNT_JSON")
    return missing
