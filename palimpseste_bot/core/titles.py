"""Title filter: reject non-content pages before spending a parse call."""

from __future__ import annotations

import re


MIN_TITLE_CHARS = 3
MAX_TITLE_CHARS = 200

# Namespace prefixes across the configured languages (fr, en, de, it, es)
# plus the site-wide namespaces every Wikisource shares.
_NAMESPACE_PREFIXES = (
    # Category
    "Catégorie", "Category", "Kategorie", "Categoria", "Categoría",
    # Help
    "Aide", "Help", "Hilfe", "Aiuto", "Ayuda",
    # Template / Module
    "Modèle", "Template", "Vorlage", "Plantilla", "Module", "Modul", "Modulo", "Módulo",
    # File
    "Fichier", "File", "Image", "Datei", "Bild", "Archivo",
    # Talk (any "X talk" / "Discussion X" variant is caught below)
    "Discussion", "Talk", "Diskussion", "Discussione", "Discusión",
    # Author
    "Auteur", "Auteure", "Author", "Autor", "Autore", "Autora",
    # Index / Page (proofreading namespaces)
    "Index", "Livre", "Page", "Pagina", "Página", "Seite",
    # Portal
    "Portail", "Portal", "Portale",
    # Project / user / special
    "Wikisource", "Utilisateur", "Utilisatrice", "User", "Benutzer", "Utente", "Usuario",
    "Spécial", "Special", "Spezial", "Speciale", "Especial",
    "MediaWiki", "Transwiki", "Translation", "Traduction",
)

_NAMESPACE_RE = re.compile(
    r"^(?:" + "|".join(re.escape(p) for p in _NAMESPACE_PREFIXES) + r")\s*:",
    re.IGNORECASE,
)
_TALK_RE = re.compile(
    r"^(?:[\w ]+ talk|Discussion [\w ]+|[\w ]+ Diskussion|Discussioni [\w ]+|Usuario discusión)\s*:",
    re.IGNORECASE,
)

# Lists, tables of contents and bibliographies
_LIST_RE = re.compile(
    r"\b(?:liste|list of|lists of|sommaire|table des matières|tables? of contents|"
    r"contents|index|bibliographie|bibliography|inhaltsverzeichnis|verzeichnis|"
    r"indice|índice|elenco|bibliografia|bibliografía)\b",
    re.IGNORECASE,
)

# Biographies and critical studies
_BIOGRAPHY_RE = re.compile(
    r"\b(?:biographie|biography|notice biographique|notice sur|étude sur|étude critique|"
    r"vie de|life of|leben|biografia|biografía|vida de|vita di|critique de)\b",
    re.IGNORECASE,
)

# "Complete works" umbrella pages; accepted only as sub-pages ("…/Tome 1")
_COMPLETE_WORKS_RE = re.compile(
    r"(?:œuvres complètes|oeuvres complètes|complete works|collected works|"
    r"sämtliche werke|gesammelte werke|opere complete|obras completas)",
    re.IGNORECASE,
)


def rejection_reason(title: str) -> str | None:
    """Return why a title is rejected, or None if it looks like a content page."""
    title = (title or "").strip()
    if _NAMESPACE_RE.match(title) or _TALK_RE.match(title):
        return "namespace"
    if _LIST_RE.search(title):
        return "list"
    if _BIOGRAPHY_RE.search(title):
        return "biography"
    if _COMPLETE_WORKS_RE.search(title) and "/" not in title:
        return "complete_works"
    if len(title) < MIN_TITLE_CHARS or len(title) > MAX_TITLE_CHARS:
        return "length"
    return None


def is_content_title(title: str) -> bool:
    """Return True when a title is worth fetching.

    Examples:
        >>> is_content_title("Le Lac")
        True
        >>> is_content_title("Catégorie:Poèmes")
        False
    """
    return rejection_reason(title) is None
