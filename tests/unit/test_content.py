from concert_scraper.utils.content import is_relevant_fragment, normalize_page_text, truncate


def test_is_relevant_fragment_filters():
    assert is_relevant_fragment("De band speelt op 24 juni 2025.") is True
    assert is_relevant_fragment("Too short") is False
    assert is_relevant_fragment("Tweewoordige_titel_zonder_spaties_hier") is False
    assert is_relevant_fragment("Accept all cookies on this site") is False
    assert is_relevant_fragment("Open the main menu for more") is False
    assert is_relevant_fragment("x " * 300) is False


def test_normalize_page_text_keeps_relevant_fragments(detail_html):
    text = normalize_page_text(detail_html)
    lines = text.split("\n")

    assert lines[0] == "Editors in Vorst Nationaal"
    assert "De band speelt op 24 juni 2025 en 25 juni 2025 in Vorst Nationaal, Brussel." in lines
    assert "Perscontact: Jan Peeters - jan.peeters@livenation.be" in lines
    assert len(lines) == len(set(lines))
    assert "tracking" not in text
    assert "cookies" not in text
    assert "footer" not in text.lower()


def test_normalize_page_text_is_deterministic(detail_html):
    assert normalize_page_text(detail_html) == normalize_page_text(detail_html)


def test_normalize_page_text_truncates(detail_html):
    text = normalize_page_text(detail_html, max_length=40)
    assert len(text) == 43
    assert text.endswith("...")


def test_normalize_page_text_caps_fragment_count():
    html = "<body>" + "".join(f"<p>Concert aankondiging nummer {i} met details</p>" for i in range(80)) + "</body>"
    lines = normalize_page_text(html, max_length=100000).split("\n")
    assert len(lines) == 50
    assert lines[0] == "Concert aankondiging nummer 0 met details"


def test_normalize_page_text_falls_back_to_body_text():
    html = "<html><body><p>Short</p><b>Vorst</b></body></html>"
    assert normalize_page_text(html) == "Short Vorst"
    assert normalize_page_text("") == ""


def test_truncate():
    assert truncate("abcdef", 10) == "abcdef"
    assert truncate("abcdef", 3) == "abc..."
