import json
import random
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import requests

from wordsearch.core.constants import DEFAULT_ALPHABET
from wordsearch.core.exceptions import CatalogLoadError, InvalidTokenError
from wordsearch.data.catalog import (DEFAULT_CATALOG_PATH, FALLBACK_WORD_SET,
                                     HttpCatalogSource, JsonFileCatalogSource, WordCatalog,
                                     WordSet, build_tokens, make_token, parse_catalog)
from wordsearch.data.normalization import clean_word, fold_diacritics, is_placeable


class NormalizationTests(unittest.TestCase):
    def test_clean_word(self) -> None:
        self.assertEqual(clean_word("Ratón"), "raton")
        self.assertEqual(clean_word("Costa Rica"), "costarica")
        self.assertEqual(clean_word("O'Higgins"), "ohiggins")
        self.assertEqual(clean_word("Ñandú"), "ñandu")
        self.assertEqual(clean_word("Pingüino"), "pinguino")
        self.assertEqual(clean_word(""), "")

    def test_fold_keeps_other_characters(self) -> None:
        self.assertEqual(fold_diacritics("àéîõü"), "aeiõu")

    def test_is_placeable(self) -> None:
        self.assertTrue(is_placeable("ñandu", DEFAULT_ALPHABET))
        self.assertFalse(is_placeable("", DEFAULT_ALPHABET))
        self.assertFalse(is_placeable("r2d2", DEFAULT_ALPHABET))
        self.assertFalse(is_placeable("ñandu", "abcdnu"))


class TokenTests(unittest.TestCase):
    def test_make_token(self) -> None:
        token = make_token(3, " El Salvador ")
        self.assertEqual(token.original_index, 3)
        self.assertEqual(token.display_text, "El Salvador")
        self.assertEqual(token.normalized_text, "elsalvador")
        self.assertFalse(token.placed or token.found)

    def test_make_token_rejects_unusable_words(self) -> None:
        with self.assertRaises(InvalidTokenError):
            make_token(0, "C-3PO")

    def test_build_tokens_keeps_original_indices(self) -> None:
        tokens = build_tokens(["sol", "42", "luna"])
        self.assertEqual([(t.original_index, t.normalized_text) for t in tokens], [(0, "sol"), (2, "luna")])


class SourceTests(unittest.TestCase):
    def test_bundled_catalog_is_usable(self) -> None:
        word_sets = JsonFileCatalogSource(DEFAULT_CATALOG_PATH).load_catalog()
        self.assertGreaterEqual(len(word_sets), 5)
        for word_set in word_sets:
            tokens = build_tokens(word_set.words)
            self.assertEqual(len(tokens), len(word_set.words), word_set.name)
            self.assertTrue(all(token.length <= 16 for token in tokens))

    def test_missing_or_bad_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "words.json"
            with self.assertRaises(CatalogLoadError):
                JsonFileCatalogSource(path).load_catalog()
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(CatalogLoadError):
                JsonFileCatalogSource(path).load_catalog()

    def test_parse_catalog_validates_shape(self) -> None:
        with self.assertRaises(CatalogLoadError):
            parse_catalog({"name": "x"})
        with self.assertRaises(CatalogLoadError):
            parse_catalog([{"title": "Sin nombre", "words": []}])
        with self.assertRaises(CatalogLoadError):
            parse_catalog([{"name": "x", "words": "gato"}])
        [word_set] = parse_catalog([{"name": "x", "words": ["gato"]}])
        self.assertEqual(word_set.title, "x")

    @patch("wordsearch.data.catalog.requests.get")
    def test_http_source(self, mock_get) -> None:
        response = MagicMock()
        response.json.return_value = [{"name": "mar", "title": "Mar", "words": ["pez", "ola"]}]
        mock_get.return_value = response

        word_sets = HttpCatalogSource("https://example.com/words.json", timeout_seconds=2).load_catalog()

        mock_get.assert_called_once_with("https://example.com/words.json", timeout=2)
        response.raise_for_status.assert_called_once()
        self.assertEqual(word_sets, [WordSet(name="mar", title="Mar", words=["pez", "ola"])])

    @patch("wordsearch.data.catalog.requests.get")
    def test_http_failures_become_catalog_errors(self, mock_get) -> None:
        mock_get.side_effect = requests.ConnectionError("offline")
        with self.assertRaises(CatalogLoadError):
            HttpCatalogSource("https://example.com/words.json").load_catalog()

        mock_get.side_effect = None
        response = MagicMock()
        response.json.side_effect = ValueError("no JSON")
        mock_get.return_value = response
        with self.assertRaises(CatalogLoadError):
            HttpCatalogSource("https://example.com/words.json").load_catalog()


class WordCatalogTests(unittest.TestCase):
    def setUp(self) -> None:
        self.source = MagicMock()
        self.source.load_catalog.return_value = [
            WordSet(name="mar", title="Mar", words=["pez"]),
            WordSet(name="cielo", title="Cielo", words=["nube"]),
        ]
        self.catalog = WordCatalog(self.source, rng=random.Random(0))

    def test_pick_by_name(self) -> None:
        self.assertEqual(self.catalog.pick("cielo").title, "Cielo")
        self.assertEqual(self.catalog.names(), ["mar", "cielo"])

    def test_pick_random(self) -> None:
        self.assertIn(self.catalog.pick("random"), self.source.load_catalog.return_value)
        self.assertIn(self.catalog.pick(""), self.source.load_catalog.return_value)

    def test_unknown_name_falls_back(self) -> None:
        self.assertIs(self.catalog.pick("desierto"), FALLBACK_WORD_SET)

    def test_catalog_is_loaded_once(self) -> None:
        self.catalog.pick("mar")
        self.catalog.pick("cielo")
        self.catalog.names()
        self.source.load_catalog.assert_called_once()

    def test_load_failure_falls_back(self) -> None:
        self.source.load_catalog.side_effect = CatalogLoadError("offline")
        self.assertEqual(self.catalog.sets, [FALLBACK_WORD_SET])
        self.assertIs(self.catalog.pick(), FALLBACK_WORD_SET)

    def test_empty_catalog_falls_back(self) -> None:
        self.source.load_catalog.return_value = []
        self.assertEqual(self.catalog.names(), ["fallback"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
