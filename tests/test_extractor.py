"""Tests for HTML to text extraction."""

from palimpseste_bot.fetch.extractor import (
    DOM_RULES,
    TEXT_RULES,
    drop_unknown_entities,
    extract_text,
    is_metadata_line,
    strip_leading_metadata,
)


POEM_HTML = (
    '<div class="mw-parser-output">'
    '<div class="ws-header">Navigation de la page</div>'
    "<p>Premier vers<sup>1</sup> du poème,<br>second vers ici.</p>"
    "<script>track()</script>"
    "</div>"
)


def test_extract_removes_chrome_and_keeps_lines() -> None:
    text = extract_text(POEM_HTML)
    assert text == "Premier vers du poème,\nsecond vers ici."


def test_extract_prefers_paginated_region() -> None:
    html = (
        '<div class="mw-parser-output"><p>Texte hors de la zone</p>'
        '<div class="prp-pages-output"><p>Le texte réel.</p></div></div>'
    )
    assert extract_text(html) == "Le texte réel."


def test_extract_is_idempotent() -> None:
    once = extract_text(POEM_HTML)
    assert extract_text(once) == once


def test_blank_line_runs_collapse() -> None:
    text = extract_text("<p>Un.</p>\n\n\n<p>Deux.</p>")
    assert text == "Un.\n\nDeux."
    assert "\n\n\n" not in text


def test_editor_artifacts_removed() -> None:
    text = extract_text("<p>Bonjour&foo; le monde [modifier] entier, et la suite [12].</p>")
    assert "&foo" not in text
    assert "modifier" not in text
    assert "[12]" not in text
    assert text.startswith("Bonjour le monde")


def test_leading_metadata_dropped() -> None:
    text = (
        "Sommaire\n"
        "Texte établi par Jean Dupont\n"
        "\n"
        "Il était une fois une princesse qui vivait loin."
    )
    assert strip_leading_metadata(text) == "Il était une fois une princesse qui vivait loin."


def test_metadata_scan_stops_at_first_content_line() -> None:
    text = "Le Lac\nÉdition de 1820\nAinsi toujours poussés vers de nouveaux rivages,"
    assert strip_leading_metadata(text) == text


def test_long_line_needs_signature_at_start() -> None:
    assert is_metadata_line("Texte établi par Jean Dupont, Paris, Librairie Hachette, 1880")
    assert not is_metadata_line("Il relut la note en marge du texte établi par son ami le soir même")
    assert is_metadata_line("(1820)")
    assert is_metadata_line("◄ Chapitre II")


def test_rule_tables_are_named() -> None:
    dom_names = {rule.name for rule in DOM_RULES}
    text_names = {rule.name for rule in TEXT_RULES}
    assert {"scripts", "footnote-markers", "header-templates"} <= dom_names
    assert {"stray-tags", "entity-remnants", "blank-runs"} <= text_names


def test_decoded_ampersand_keeps_following_text() -> None:
    text = extract_text("<p>La maison Smith&amp;Sons publia ce livre en mille huit cent.</p>")
    assert text == "La maison Smith&Sons publia ce livre en mille huit cent."
    assert extract_text(text) == text


def test_unknown_entities_dropped_before_parsing() -> None:
    assert drop_unknown_entities("a&foo;b &amp; &eacute; &nbsp;") == "ab &amp; &eacute; &nbsp;"


def test_escaped_markup_does_not_break_idempotence() -> None:
    once = extract_text("<p>Il écrivit &lt;b&gt; puis la suite…</p>")
    assert "<b>" not in once
    assert once.startswith("Il écrivit")
    assert once.endswith("puis la suite…")
    assert extract_text(once) == once
