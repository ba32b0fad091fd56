"""Tests for post formatting."""

from palimpseste_bot.config import PostConfig
from palimpseste_bot.core.types import Excerpt
from palimpseste_bot.output.formatter import format_post


def _excerpt(text: str, author: str | None = "Victor Hugo") -> Excerpt:
    return Excerpt(
        text=text,
        author=author,
        title="Demain, dès l'aube",
        lang="fr",
        source_url="https://fr.wikisource.org/wiki/Demain,_d%C3%A8s_l%E2%80%99aube",
    )


def test_short_post_layout() -> None:
    cfg = PostConfig()
    post = format_post(_excerpt("Demain, dès l'aube, à l'heure où blanchit la campagne,"), cfg)
    assert post.text.startswith("Demain, dès l'aube")
    assert "\n\n— Victor Hugo\n" in post.text
    assert "https://palimpseste.vercel.app/#/author/Victor%20Hugo" in post.text
    assert post.text.endswith(cfg.hashtags)
    assert len(post) <= cfg.max_length


def test_long_text_shortened_at_word_boundary() -> None:
    cfg = PostConfig()
    post = format_post(_excerpt("mot " * 125), cfg)
    assert len(post) <= cfg.max_length
    body = post.text.split("\n\n— ")[0]
    assert body.endswith("…")
    assert "— Victor Hugo" in post.text


def test_long_author_stays_within_budget() -> None:
    cfg = PostConfig()
    post = format_post(_excerpt("Un vers.", author="Nom " * 80), cfg)
    assert len(post) <= cfg.max_length
    assert post.text.startswith("Un vers.")


def test_missing_author_falls_back() -> None:
    post = format_post(_excerpt("Un vers.", author=None), PostConfig())
    assert "— Anonyme" in post.text


def test_without_link_or_hashtags() -> None:
    cfg = PostConfig(hashtags="", profile_url_template="")
    post = format_post(_excerpt("Un vers."), cfg)
    assert post.text == "Un vers.\n\n— Victor Hugo"


def test_long_author_name_keeps_profile_link() -> None:
    cfg = PostConfig()
    post = format_post(_excerpt("Un vers.", author="Pierre-Augustin Caron de Beaumarchais"), cfg)
    assert post.text == (
        "Un vers.\n\n— Pierre-Augustin Caron de Beaumarchais\n"
        "https://palimpseste.vercel.app/#/author/Pierre-Augustin%20Caron%20de%20Beaumarchais\n"
        "#littérature #palimpseste"
    )


def test_text_is_cut_before_the_attribution() -> None:
    cfg = PostConfig()
    post = format_post(_excerpt("mot " * 125, author="Pierre-Augustin Caron de Beaumarchais"), cfg)
    assert len(post) <= cfg.max_length
    assert "/author/Pierre-Augustin%20Caron%20de%20Beaumarchais\n" in post.text
    assert post.text.split("\n\n— ")[0].endswith("…")
