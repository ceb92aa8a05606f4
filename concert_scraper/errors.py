class ScraperError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(ScraperError):
    """A required credential or setting is missing. Never retried."""


class ExtractionError(ScraperError):
    """The model did not produce a usable result for one candidate."""


class TransientExtractionError(ExtractionError):
    """Malformed model output or a transport failure; retried up to a fixed bound."""


class StorageLoadError(ScraperError):
    """The ledger file is missing or could not be parsed."""


class StorageWriteError(ScraperError):
    """Persisting records failed."""


class SheetsWriteError(StorageWriteError):
    """A write to the remote spreadsheet failed."""
