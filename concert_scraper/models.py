from dataclasses import dataclass, field
from typing import List, Optional

SHEET_HEADERS = [
    "Title",
    "Dates",
    "Location",
    "Contact Name",
    "Contact Email",
    "URL",
    "Last Updated",
]

DATE_NOT_FOUND = "Date not found"
LOCATION_NOT_FOUND = "Location not found"


@dataclass(frozen=True)
class Candidate:
    url: str
    title: str


@dataclass(frozen=True)
class ExtractedEvent:
    date: str
    location: str

    @property
    def is_placeholder(self):
        return self.date == DATE_NOT_FOUND and self.location == LOCATION_NOT_FOUND


PLACEHOLDER_EVENT = ExtractedEvent(date=DATE_NOT_FOUND, location=LOCATION_NOT_FOUND)


@dataclass(frozen=True)
class Contact:
    name: str
    email: str

    @staticmethod
    def is_valid(name, email):
        """A press contact needs a name and an email address containing "@"."""
        if not isinstance(name, str) or not isinstance(email, str):
            return False
        return bool(name.strip()) and "@" in email

    def to_json(self):
        return {"name": self.name, "email": self.email}


@dataclass
class ExtractionResult:
    events: List[ExtractedEvent] = field(default_factory=list)
    contact: Optional[Contact] = None

    @property
    def is_placeholder(self):
        return len(self.events) == 1 and self.events[0].is_placeholder


@dataclass
class Record:
    title: str
    dates: List[str]
    location: str
    url: str
    contact: Optional[Contact] = None

    def to_json(self):
        # key order matches the ledger file: title, dates, location, contact, url
        data = {"title": self.title, "dates": list(self.dates), "location": self.location}
        if self.contact:
            data["contact"] = self.contact.to_json()
        data["url"] = self.url
        return data

    @classmethod
    def from_json(cls, data):
        """Build a Record from a ledger entry. Raises ValueError on malformed entries."""
        if not isinstance(data, dict):
            raise ValueError(f"ledger entry is not an object: {data!r}")
        dates = data.get("dates")
        if not data.get("url") or not isinstance(dates, list) or not dates:
            raise ValueError(f"ledger entry is missing url or dates: {data!r}")

        contact = None
        raw_contact = data.get("contact")
        if isinstance(raw_contact, dict) and Contact.is_valid(raw_contact.get("name"), raw_contact.get("email")):
            contact = Contact(name=raw_contact["name"].strip(), email=raw_contact["email"].strip())

        return cls(
            title=data.get("title", ""),
            dates=[str(d) for d in dates],
            location=data.get("location", ""),
            url=data["url"],
            contact=contact,
        )

    def comparable_cells(self):
        """The six sheet cells used to detect changes (no timestamp)."""
        return [
            self.title,
            ", ".join(self.dates),
            self.location,
            self.contact.name if self.contact else "",
            self.contact.email if self.contact else "",
            self.url,
        ]

    def to_row(self, timestamp):
        return self.comparable_cells() + [timestamp]
