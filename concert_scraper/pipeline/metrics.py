from dataclasses import dataclass, field


@dataclass
class RunMetrics:
    """Track counts and timing for one scrape run."""
    links_found: int = 0
    new_links: int = 0
    processed: int = 0
    records_built: int = 0
    placeholders: int = 0
    errors: int = 0
    error_messages: list = field(default_factory=list)
    sheet_added: int = 0
    sheet_updated: int = 0
    duration_ms: float = 0.0

    def summary_lines(self):
        rows = [
            ("Links found", self.links_found),
            ("New links", self.new_links),
            ("Processed", self.processed),
            ("Records built", self.records_built),
            ("No dates found", self.placeholders),
            ("Errors", self.errors),
            ("Sheet rows added", self.sheet_added),
            ("Sheet rows updated", self.sheet_updated),
        ]
        lines = ["=" * 40, "RUN SUMMARY", "=" * 40]
        lines += [f"{label:<24} {value:>7}" for label, value in rows]
        lines += ["-" * 40, f"{'Duration':<24} {self.duration_ms:>5.0f}ms", "=" * 40]
        return lines
