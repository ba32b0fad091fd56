"""Tests for author attribution heuristics."""

from palimpseste_bot.core.author import resolve_author
from palimpseste_bot.core.types import PageLink, ParsedPage


def test_author_namespace_link_wins() -> None:
    page = ParsedPage(
        title="Les Contemplations",
        html='<span class="auteur">Quelqu\'un d\'autre</span>',
        links=[PageLink("Les Misérables"), PageLink("Auteur:Victor Hugo", 102)],
    )
    assert resolve_author(page) == "Victor Hugo"


def test_author_class_element() -> None:
    page = ParsedPage(title="Le Lac", html='<p><span class="auteur">Alphonse de Lamartine</span></p>')
    assert resolve_author(page) == "Alphonse de Lamartine"


def test_author_href() -> None:
    page = ParsedPage(title="Spleen", html='<a href="/wiki/Auteur:Charles_Baudelaire">lien</a>')
    assert resolve_author(page) == "Charles Baudelaire"


def test_byline() -> None:
    page = ParsedPage(title="El Desdichado", html="<p>Poème par Gérard de Nerval</p>")
    assert resolve_author(page) == "Gérard de Nerval"


def test_subpage_display_title() -> None:
    page = ParsedPage(
        title="Les Fleurs du mal/Spleen",
        html="<p>texte sans attribution</p>",
        display_title="Les Fleurs du mal/Spleen",
    )
    assert resolve_author(page) == "Les Fleurs du mal"


def test_no_match() -> None:
    page = ParsedPage(title="Texte", html="<p>texte sans attribution</p>", display_title="Texte")
    assert resolve_author(page) is None


def test_byline_stops_at_sentence_end() -> None:
    page = ParsedPage(title="Demain", html="<p>Poème par Victor Hugo. Demain dès l'aube je partirai</p>")
    assert resolve_author(page) == "Victor Hugo"


def test_byline_ignores_de_inside_a_sentence() -> None:
    page = ParsedPage(
        title="Le temps",
        html="<p>Le temps de Rêver est passé et la nuit tombe</p>",
        display_title="Le temps",
    )
    assert resolve_author(page) is None


def test_byline_with_de_needs_a_full_name() -> None:
    page = ParsedPage(title="Demain", html="<p>Poème de Victor Hugo</p>")
    assert resolve_author(page) == "Victor Hugo"


def test_byline_hyphenated_name_with_particle() -> None:
    page = ParsedPage(title="Figaro", html="<p>Comédie par Pierre-Augustin Caron de Beaumarchais</p>")
    assert resolve_author(page) == "Pierre-Augustin Caron de Beaumarchais"
