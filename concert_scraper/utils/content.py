from bs4 import BeautifulSoup

from concert_scraper import config

# Scanned in order; earlier selectors contribute their fragments first.
CONTENT_SELECTORS = [
    "h1", "h2", "h3", "h4", "h5", "h6",
    '[class*="title" i]',
    '[class*="content" i]',
    '[class*="description" i]',
    '[class*="date" i]',
    '[class*="location" i]',
    '[class*="venue" i]',
    '[class*="contact" i]',
    '[class*="press" i]',
    "p",
    "span",
    "div",
]

BOILERPLATE_MARKERS = ("cookie", "menu", "navigation", "footer", "header")
INVISIBLE_TAGS = ["script", "style", "noscript", "template"]

MIN_FRAGMENT_LENGTH = 10
MAX_FRAGMENT_LENGTH = 500
MIN_FRAGMENT_WORDS = 3
MAX_FRAGMENTS = 50


def _clean(text):
    return " ".join(text.split())


def is_relevant_fragment(text):
    """Keep mid-sized, multi-word fragments that aren't page chrome."""
    if not (MIN_FRAGMENT_LENGTH < len(text) < MAX_FRAGMENT_LENGTH):
        return False
    if len(text.split(" ")) < MIN_FRAGMENT_WORDS:
        return False
    lowered = text.lower()
    return not any(marker in lowered for marker in BOILERPLATE_MARKERS)


def truncate(text, max_length):
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


def normalize_page_text(html, max_length=config.MAX_CONTENT_LENGTH):
    """
    Reduce a rendered detail page to a short plain-text excerpt for the model.

    Fragments come from headings and title/content/date/venue/contact-like
    elements, are filtered for size and boilerplate, de-duplicated and capped
    at 50. The joined result is cut at max_length characters (with "..."
    appended when cut). If nothing survives the filters, the collapsed body
    text is used instead so that a page with visible text never yields "".
    """
    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup.find_all(INVISIBLE_TAGS):
        tag.decompose()

    fragments = []
    seen = set()
    for selector in CONTENT_SELECTORS:
        for element in soup.select(selector):
            text = _clean(element.get_text(" ", strip=True))
            if not text or text in seen or not is_relevant_fragment(text):
                continue
            seen.add(text)
            fragments.append(text)

    if fragments:
        return truncate("\n".join(fragments[:MAX_FRAGMENTS]), max_length)

    root = soup.body or soup
    return truncate(_clean(root.get_text(" ", strip=True)), max_length)
