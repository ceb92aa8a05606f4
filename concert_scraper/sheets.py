from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from concert_scraper import config
from concert_scraper.errors import ConfigurationError, SheetsWriteError
from concert_scraper.pipeline.runlog import print_log


def sheet_range(sheet_name, cells):
    """A1 range on a named tab, e.g. 'Livenation Shows'!A2:G2."""
    quoted = sheet_name.replace("'", "''")
    return f"'{quoted}'!{cells}"


def load_credentials(sheets_config):
    """Service account credentials from a key file or the inline JSON setting."""
    if sheets_config.service_account_file:
        return service_account.Credentials.from_service_account_file(
            sheets_config.service_account_file, scopes=config.SHEETS_SCOPES
        )
    info = sheets_config.service_account_info()
    if info:
        return service_account.Credentials.from_service_account_info(info, scopes=config.SHEETS_SCOPES)
    raise ConfigurationError(
        "No Google authentication method found. Please set "
        "GOOGLE_SERVICE_ACCOUNT_KEY_FILE or GOOGLE_SERVICE_ACCOUNT_JSON"
    )


class SheetsClient:
    """Thin wrapper over the Sheets v4 values API for one spreadsheet."""

    def __init__(self, service, spreadsheet_id, service_account_email=None, log_func=None):
        self.service = service
        self.spreadsheet_id = spreadsheet_id
        self.service_account_email = service_account_email
        self.log = log_func or print_log

    @classmethod
    def from_config(cls, sheets_config, log_func=None):
        if not sheets_config.spreadsheet_id:
            raise ConfigurationError("GOOGLE_SPREADSHEET_ID environment variable is required")
        credentials = load_credentials(sheets_config)
        service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        return cls(
            service,
            sheets_config.spreadsheet_id,
            service_account_email=getattr(credentials, "service_account_email", None),
            log_func=log_func,
        )

    @property
    def url(self):
        return f"https://docs.google.com/spreadsheets/d/{self.spreadsheet_id}"

    def sheet_titles(self):
        spreadsheet = self.service.spreadsheets().get(spreadsheetId=self.spreadsheet_id).execute()
        return [s.get("properties", {}).get("title") for s in spreadsheet.get("sheets", [])]

    def ensure_sheet(self, sheet_name):
        """Create the tab unless it already exists. Returns True when it was created."""
        try:
            if sheet_name in self.sheet_titles():
                self.log(f'  Sheet "{sheet_name}" already exists, skipping creation')
                return False
            self.service.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={"requests": [{"addSheet": {"properties": {"title": sheet_name}}}]},
            ).execute()
        except HttpError as e:
            if "already exists" in str(e):
                self.log(f'  Sheet "{sheet_name}" already exists, continuing...')
                return False
            raise SheetsWriteError(f"Failed to create sheet {sheet_name}: {e}") from e
        self.log(f"  Created new sheet: {sheet_name}")
        return True

    def read_rows(self, range_):
        result = self.service.spreadsheets().values().get(
            spreadsheetId=self.spreadsheet_id, range=range_
        ).execute()
        return result.get("values", [])

    def append_rows(self, range_, rows):
        try:
            return self.service.spreadsheets().values().append(
                spreadsheetId=self.spreadsheet_id,
                range=range_,
                valueInputOption="RAW",
                insertDataOption="INSERT_ROWS",
                body={"values": rows},
            ).execute()
        except HttpError as e:
            raise SheetsWriteError(f"Failed to append {len(rows)} rows to {range_}: {e}") from e

    def update_rows(self, range_, rows):
        try:
            return self.service.spreadsheets().values().update(
                spreadsheetId=self.spreadsheet_id,
                range=range_,
                valueInputOption="RAW",
                body={"values": rows},
            ).execute()
        except HttpError as e:
            raise SheetsWriteError(f"Failed to update {range_}: {e}") from e

    def clear(self, range_):
        try:
            return self.service.spreadsheets().values().clear(
                spreadsheetId=self.spreadsheet_id, range=range_, body={}
            ).execute()
        except HttpError as e:
            raise SheetsWriteError(f"Failed to clear {range_}: {e}") from e
