"""Unit tests for input sanitization, HTML/LIKE escaping and slug generation."""

import unittest

from storefront.services.sanitize import escape_html, escape_like, sanitize_input, slugify


class TestSanitizeInput(unittest.TestCase):
    """Markup-injection patterns are removed and the result trimmed."""

    def test_strips_angle_brackets_and_trims(self) -> None:
        self.assertEqual(sanitize_input("  <b>Ada</b>  "), "bAda/b")

    def test_removes_javascript_protocol_case_insensitive(self) -> None:
        self.assertEqual(sanitize_input("JavaScript:alert(1)"), "alert(1)")

    def test_removes_inline_event_handlers(self) -> None:
        self.assertEqual(sanitize_input('img onerror="x" onClick=y'), 'img "x" y')

    def test_non_string_becomes_empty(self) -> None:
        self.assertEqual(sanitize_input(None), "")
        self.assertEqual(sanitize_input(42), "")

    def test_plain_text_unchanged(self) -> None:
        self.assertEqual(sanitize_input("Grace Hopper"), "Grace Hopper")


class TestEscapeHtml(unittest.TestCase):
    def test_escapes_all_specials(self) -> None:
        self.assertEqual(
            escape_html("<a href='/x'>&\"</a>"),
            "&lt;a href=&#x27;&#x2F;x&#x27;&gt;&amp;&quot;&lt;&#x2F;a&gt;",
        )

    def test_non_string_becomes_empty(self) -> None:
        self.assertEqual(escape_html(None), "")


class TestEscapeLike(unittest.TestCase):
    """Wildcards in user search terms must match literally."""

    def test_escapes_percent_underscore_and_backslash(self) -> None:
        self.assertEqual(escape_like("50%_off\\"), "50\\%\\_off\\\\")

    def test_plain_term_unchanged(self) -> None:
        self.assertEqual(escape_like("shoe"), "shoe")


class TestSlugify(unittest.TestCase):
    def test_turkish_letters_transliterated(self) -> None:
        self.assertEqual(slugify("Çocuk Ayakkabısı Güneş"), "cocuk-ayakkabisi-gunes")

    def test_drops_punctuation_and_collapses_dashes(self) -> None:
        self.assertEqual(slugify("Men's  Shoes -- Sale!"), "mens-shoes-sale")

    def test_only_symbols_gives_empty_slug(self) -> None:
        self.assertEqual(slugify("!!!"), "")


if __name__ == "__main__":
    unittest.main()
