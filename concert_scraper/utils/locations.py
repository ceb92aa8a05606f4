import unicodedata

# Canonical spelling for each city, with the variants the press releases use.
CANONICAL_CITIES = {
    "Brussel": ["brussels", "bruxelles", "brussel"],
    "Antwerpen": ["antwerp", "anvers", "antwerpen"],
    "Gent": ["ghent", "gand", "gent"],
    "Luik": ["liège", "liege", "luik", "lüttich"],
    "Leuven": ["louvain", "leuven"],
    "Brugge": ["bruges", "brugge"],
    "Hasselt": ["hasselt"],
    "Kortrijk": ["courtrai", "kortrijk"],
    "Mechelen": ["malines", "mechelen"],
    "Oostende": ["ostend", "ostende", "oostende"],
    "Werchter": ["werchter"],
}


def _fold(text):
    text = unicodedata.normalize("NFKC", text).strip().lower()
    return " ".join(text.split())


_ALIASES = {_fold(alias): city for city, aliases in CANONICAL_CITIES.items() for alias in aliases}


def canonical_city(city):
    """Return the canonical spelling for a known city, or the trimmed input."""
    if not city:
        return city
    return _ALIASES.get(_fold(city), city.strip())


def canonicalize_location(location):
    """
    Normalize "Venue, City" so the city uses its canonical spelling.
    Only the part after the last comma is treated as the city.
    """
    if "," not in location:
        return location.strip()
    venue, city = location.rsplit(",", 1)
    return f"{venue.strip()}, {canonical_city(city)}"


def describe_canonical_cities():
    """One line per city for the extraction prompt."""
    lines = []
    for city, aliases in CANONICAL_CITIES.items():
        variants = [a for a in aliases if a != city.lower()]
        if variants:
            lines.append(f'- "{city}" (not {", ".join(variants)})')
        else:
            lines.append(f'- "{city}"')
    return "\n".join(lines)
